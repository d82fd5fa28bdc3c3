import pytest
from fastapi.testclient import TestClient

from supportdesk.api.main import app


@pytest.fixture
def client(csv_env):
    return TestClient(app)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["coverage"] == "/coverage"
    assert body["locale"] == "en"


def test_classify_inline_record(client):
    r = client.post("/coverage", json={
        "paid_support_start_date": "2025-01-01",
        "paid_support_end_date": "2025-12-31",
        "now": "2025-06-15T00:00:00",
    })
    assert r.status_code == 200
    assert r.json() == {
        "status": "paid",
        "label": "Support contract",
        "remaining": "6 months 19 days left",
        "tooltip": "Paid support until 2025-12-31 (6 months 19 days left)",
    }


def test_classify_inline_record_russian(client):
    r = client.post("/coverage", json={
        "warranty_start_date": "2026-06-01T00:00:00.000Z",
        "now": "2026-09-01T00:00:00Z",
        "locale": "RU",
    })
    assert r.status_code == 200
    assert r.json()["status"] == "warranty_only"
    assert r.json()["label"] == "Гарантия"


def test_classify_empty_record(client):
    r = client.post("/coverage", json={"now": "2025-06-15T00:00:00"})
    assert r.json()["status"] == "none"


def test_malformed_date_is_rejected(client):
    r = client.post("/coverage", json={"warranty_start_date": "2025-13-45"})
    assert r.status_code == 422


def test_line_coverage(client):
    r = client.get("/lines/4/coverage", params={"now": "2026-09-01T00:00:00"})
    assert r.status_code == 200
    body = r.json()
    assert body["line_id"] == 4
    assert body["status"] == "warranty_only"
    assert body["tone"] == "covered"
    assert body["remaining"] == "9 months 3 days left"


def test_unknown_line_is_404(client):
    assert client.get("/lines/999/coverage").status_code == 404


def test_report(client):
    r = client.get("/coverage/report", params={"support": "active", "now": "2025-06-15T00:00:00"})
    assert r.status_code == 200
    body = r.json()
    assert body["support"] == "active"
    assert [l["line_id"] for l in body["lines"]] == [1, 2]


def test_report_bad_filter(client):
    r = client.get("/coverage/report", params={"support": "soon"})
    assert r.status_code == 422
    assert "Unknown support filter" in r.json()["detail"]


def test_tree(client):
    r = client.get("/coverage/tree", params={"support": "expired", "now": "2025-06-15T00:00:00"})
    assert r.status_code == 200
    body = r.json()
    assert body["support"] == "expired"
    assert [c["client_name"] for c in body["clients"]] == ["Mid Bakery"]


def test_offset_timestamp_is_read_as_written_day(client):
    # 2026-01-01 local time: post-cutover, so free support ended on 2026-03-01
    r = client.post("/coverage", json={
        "warranty_start_date": "2026-01-01T00:00:00+03:00",
        "now": "2026-06-01T00:00:00",
    })
    assert r.status_code == 200
    assert r.json()["status"] == "warranty_only"


def test_tree_all_lists_sites_without_lines(client, tmp_path, monkeypatch):
    sites = tmp_path / "sites.csv"
    sites.write_text("id,client_id,name\n100,10,Plant North\n101,10,Plant South\n", encoding="utf-8")
    monkeypatch.setenv("SITES_CSV", str(sites))
    body = client.get("/coverage/tree", params={"support": "all", "now": "2025-06-15T00:00:00"}).json()
    zeta = next(c for c in body["clients"] if c["client_name"] == "Zeta Foods")
    assert [s["site_name"] for s in zeta["sites"]] == ["Plant North", "Plant South"]
    assert zeta["sites"][1]["lines"] == []
