# tests/conftest.py
import sys
from pathlib import Path

import pytest

# add project root to sys.path so "supportdesk.*" imports work without an install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


LINES_CSV = """\
id,name,client_id,site_id,site_name,warranty_start_date,paid_support_start_date,paid_support_end_date
1,Packing A,10,100,Plant North,2025-01-01,,
2,Packing B,10,100,Plant North,,,
3,Labeler,20,200,Depot,not-a-date,,
4,Palletizer,20,201,Depot East,2026-06-01T00:00:00.000Z,,
5,Old Line,30,300,Warehouse,2023-01-01,,
"""

CLIENTS_CSV = """\
id,name,warranty_start_date,paid_support_start_date,paid_support_end_date
10,Zeta Foods,2024-05-01,2025-01-01,2025-12-31
20,Alpha Dairy,,,
30,Mid Bakery,,,
"""


@pytest.fixture
def lines_csv(tmp_path):
    p = tmp_path / "lines.csv"
    p.write_text(LINES_CSV, encoding="utf-8")
    return p


@pytest.fixture
def clients_csv(tmp_path):
    p = tmp_path / "clients.csv"
    p.write_text(CLIENTS_CSV, encoding="utf-8")
    return p


@pytest.fixture
def csv_env(monkeypatch, lines_csv, clients_csv):
    monkeypatch.setenv("LINES_CSV", str(lines_csv))
    monkeypatch.setenv("CLIENTS_CSV", str(clients_csv))
    monkeypatch.delenv("COVERAGE_LOCALE", raising=False)
    return lines_csv, clients_csv
