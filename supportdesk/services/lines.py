import logging
from typing import Dict, List, Optional

import pandas as pd

from ..config import settings
from ..schemas import DATE_COLUMNS, CoverageInput, LineRecord, calendar_day

logger = logging.getLogger(__name__)


def _df(csv: str) -> pd.DataFrame:
    # keep strings, handle BOM, don't turn blanks into NaN
    return pd.read_csv(csv, dtype=str, keep_default_na=False, encoding="utf-8-sig")


def _coerce_dates(df: pd.DataFrame, source: str) -> pd.DataFrame:
    """
    Parse the support date columns. Blank cells become None; anything that
    doesn't parse is dropped to None with a warning, never raised.
    """
    for col in DATE_COLUMNS:
        if col not in df.columns:
            df[col] = None
            continue
        raw = df[col].astype(str).str.strip()
        # same day rule as CoverageInput: keep the written date, ignore the offset
        days = raw.map(calendar_day)
        parsed = pd.to_datetime(days.where(days != ""), errors="coerce", format="ISO8601")
        bad = parsed.isna() & (raw != "")
        for idx in df.index[bad]:
            logger.warning("%s: row %s has malformed %s=%r, treating as absent", source, idx, col, raw[idx])
        df[col] = [None if pd.isna(v) else v.date() for v in parsed]
    return df


def _as_int(v, field: str = "id") -> Optional[int]:
    s = str(v if v is not None else "").strip()
    if not s:
        return None
    try:
        return int(float(s))
    except (ValueError, OverflowError):
        logger.warning("Malformed %s=%r, treating as absent", field, s)
        return None


def _coverage(row: Dict) -> CoverageInput:
    return CoverageInput(**{col: row.get(col) for col in DATE_COLUMNS})


def load_clients(csv_path: Optional[str] = None) -> Dict[int, Dict]:
    """Client rows keyed by id. Empty when no clients export is configured."""
    path = csv_path or settings.CLIENTS_CSV
    if not path:
        return {}
    df = _coerce_dates(_df(path), source=str(path))
    if "id" not in df.columns and "client_id" in df.columns:
        df = df.rename(columns={"client_id": "id"})

    out: Dict[int, Dict] = {}
    for r in df.to_dict(orient="records"):
        cid = _as_int(r.get("id"))
        if cid is None:
            continue
        out[cid] = {"name": str(r.get("name", "")), "coverage": _coverage(r)}
    return out


def load_sites(csv_path: Optional[str] = None) -> Dict[int, Dict]:
    """Site rows keyed by id, in file order. Empty when no sites export is configured."""
    path = csv_path or settings.SITES_CSV
    if not path:
        return {}
    df = _df(path)
    if "id" not in df.columns and "site_id" in df.columns:
        df = df.rename(columns={"site_id": "id"})

    out: Dict[int, Dict] = {}
    for r in df.to_dict(orient="records"):
        sid = _as_int(r.get("id"))
        if sid is None:
            continue
        out[sid] = {"client_id": _as_int(r.get("client_id"), "client_id"), "name": str(r.get("name", ""))}
    return out


def load_lines(csv_path: Optional[str] = None, clients_csv: Optional[str] = None) -> List[LineRecord]:
    """
    Read production lines from a CSV export and attach their client's
    support dates, so each record can fall back to the client when the
    line has no dates of its own.
    """
    path = csv_path or settings.LINES_CSV
    df = _coerce_dates(_df(path), source=str(path))
    if "id" not in df.columns and "line_id" in df.columns:
        df = df.rename(columns={"line_id": "id"})
    clients = load_clients(clients_csv)

    records: List[LineRecord] = []
    for r in df.to_dict(orient="records"):
        line_id = _as_int(r.get("id"))
        if line_id is None:
            logger.warning("%s: skipping line without id: %r", path, r.get("name"))
            continue
        client_id = _as_int(r.get("client_id"), "client_id")
        client = clients.get(client_id) if client_id is not None else None
        records.append(LineRecord(
            id=line_id,
            name=str(r.get("name", "")),
            client_id=client_id,
            client_name=str(r.get("client_name", "") or (client or {}).get("name", "")),
            site_id=_as_int(r.get("site_id"), "site_id"),
            site_name=str(r.get("site_name", "")),
            line=_coverage(r),
            client=client["coverage"] if client else CoverageInput(),
        ))
    logger.info("Loaded %d lines from %s (%d clients)", len(records), path, len(clients))
    return records


def get_line(line_id: int, records: Optional[List[LineRecord]] = None) -> LineRecord:
    for rec in (records if records is not None else load_lines()):
        if rec.id == int(line_id):
            return rec
    raise KeyError("Line not found")


def effective_input(record: LineRecord) -> CoverageInput:
    """Line dates win field by field; missing ones come from the client."""
    line, client = record.line, record.client
    return CoverageInput(
        warranty_start_date=line.warranty_start_date or client.warranty_start_date,
        paid_support_start_date=line.paid_support_start_date or client.paid_support_start_date,
        paid_support_end_date=line.paid_support_end_date or client.paid_support_end_date,
    )

