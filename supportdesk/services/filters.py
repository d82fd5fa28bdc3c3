# supportdesk/services/filters.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..schemas import CoverageResult, CoverageStatus, LineRecord, StatusTone, SupportFilter
from .coverage import classify_coverage
from .lines import effective_input

COVERED_STATUSES = (CoverageStatus.PAID, CoverageStatus.WARRANTY, CoverageStatus.WARRANTY_ONLY)

# "active" excludes warranty_only.
FILTER_STATUSES: Dict[SupportFilter, Tuple[CoverageStatus, ...]] = {
    SupportFilter.ACTIVE: (CoverageStatus.PAID, CoverageStatus.WARRANTY),
    SupportFilter.EXPIRED: (CoverageStatus.EXPIRED,),
}


def parse_filter(value: Any) -> SupportFilter:
    if isinstance(value, SupportFilter):
        return value
    try:
        return SupportFilter(str(value or "all").strip().lower())
    except ValueError as exc:
        allowed = ", ".join(f.value for f in SupportFilter)
        raise ValueError(f"Unknown support filter {value!r}; expected one of: {allowed}") from exc


def tone_for(status: CoverageStatus) -> StatusTone:
    if status in COVERED_STATUSES:
        return StatusTone.COVERED
    if status == CoverageStatus.EXPIRED:
        return StatusTone.EXPIRED
    return StatusTone.UNKNOWN


def matches_filter(status: CoverageStatus, support: Any) -> bool:
    f = parse_filter(support)
    if f == SupportFilter.ALL:
        return True
    return status in FILTER_STATUSES[f]


def classify_lines(
    lines: Iterable[LineRecord], now: date | datetime, locale: Optional[str] = None
) -> List[Tuple[LineRecord, CoverageResult]]:
    return [(rec, classify_coverage(effective_input(rec), now, locale)) for rec in lines]


def _client_node(clients: Dict[Any, Dict[str, Any]], client_id: Any, name: str) -> Dict[str, Any]:
    node = clients.setdefault(client_id, {"client_id": client_id, "client_name": name, "sites": {}})
    if not node["client_name"]:
        node["client_name"] = name
    return node


def _site_node(client: Dict[str, Any], site_id: Any, name: str) -> Dict[str, Any]:
    node = client["sites"].setdefault(site_id, {"site_id": site_id, "site_name": name, "lines": []})
    if not node["site_name"]:
        node["site_name"] = name
    return node


def filter_tree(
    lines: Iterable[LineRecord],
    support: Any,
    now: date | datetime,
    locale: Optional[str] = None,
    clients: Optional[Mapping[Any, Mapping[str, Any]]] = None,
    sites: Optional[Mapping[Any, Mapping[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """
    Group lines into clients -> sites -> lines.

    With "all", every known client and site is listed, including those
    with no lines yet (`clients` as returned by load_clients, `sites` as
    returned by load_sites). Other filters keep a client or site only if
    at least one of its lines passes.
    Clients are sorted by name, sites and lines keep their input order.
    """
    f = parse_filter(support)
    tree: Dict[Any, Dict[str, Any]] = {}
    if f == SupportFilter.ALL:
        for client_id, row in (clients or {}).items():
            _client_node(tree, client_id, str(row.get("name", "")))
        for site_id, row in (sites or {}).items():
            client = _client_node(tree, row.get("client_id"), "")
            _site_node(client, site_id, str(row.get("name", "")))

    for rec, result in classify_lines(lines, now, locale):
        if not matches_filter(result.status, f):
            continue
        client = _client_node(tree, rec.client_id, rec.client_name)
        site = _site_node(client, rec.site_id, rec.site_name)
        site["lines"].append({
            "line_id": rec.id,
            "line_name": rec.name,
            "status": result.status.value,
            "label": result.label,
            "tone": tone_for(result.status).value,
            "tooltip": result.tooltip,
        })

    out = []
    for c in sorted(tree.values(), key=lambda c: (c["client_name"].casefold(), str(c["client_id"]))):
        out.append({**c, "sites": list(c["sites"].values())})
    return out
