import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .config import settings
from .rules import as_instant
from .schemas import CoverageInput, CoverageResult, LineCoverage, LineRecord
from .services.coverage import classify_coverage
from .services.filters import classify_lines, filter_tree, matches_filter, parse_filter, tone_for
from .services.lines import get_line, load_clients, load_lines, load_sites

logger = logging.getLogger(__name__)


def _now(now: Optional[date | datetime]) -> date | datetime:
    # sampled once per call so every line is judged against the same instant
    return now if now is not None else datetime.now()


def _locale(locale: Optional[str]) -> str:
    return locale or settings.COVERAGE_LOCALE


def _line_coverage(rec: LineRecord, result: CoverageResult) -> LineCoverage:
    return LineCoverage(
        **result.model_dump(),
        line_id=rec.id,
        line_name=rec.name,
        client_id=rec.client_id,
        site_id=rec.site_id,
        tone=tone_for(result.status),
    )


def evaluate(data: CoverageInput, now=None, locale=None) -> CoverageResult:
    return classify_coverage(data, _now(now), _locale(locale))


def line_coverage(line_id: int, now=None, locale=None, records: Optional[List[LineRecord]] = None) -> LineCoverage:
    rec = get_line(line_id, records)
    [(rec, result)] = classify_lines([rec], _now(now), _locale(locale))
    return _line_coverage(rec, result)


def coverage_report(support: Any = "all", now=None, locale=None,
                    records: Optional[List[LineRecord]] = None) -> Dict[str, Any]:
    f = parse_filter(support)
    at = _now(now)
    lines = records if records is not None else load_lines()
    rows = [
        _line_coverage(rec, result)
        for rec, result in classify_lines(lines, at, _locale(locale))
        if matches_filter(result.status, f)
    ]
    logger.info("Coverage report: %d of %d lines match support=%s", len(rows), len(lines), f.value)
    return {"support": f, "evaluated_at": as_instant(at), "lines": rows}


def support_tree(support: Any = "all", now=None, locale=None,
                 records: Optional[List[LineRecord]] = None,
                 clients: Optional[Dict[int, Dict]] = None,
                 sites: Optional[Dict[int, Dict]] = None) -> List[Dict[str, Any]]:
    if records is None:
        records = load_lines()
        clients = load_clients() if clients is None else clients
        sites = load_sites() if sites is None else sites
    return filter_tree(records, support, _now(now), _locale(locale), clients=clients, sites=sites)
