# supportdesk/services/coverage.py
"""
Support-status classification.

A record's coverage at an instant is exactly one of five statuses, decided by
an ordered list of rules (first match wins):

  1. paid           - inside the paid support window (inclusive)
  2. warranty       - inside [warranty start, support end]
  3. warranty_only  - post-cutover installs, after free support but before warranty end
  4. expired        - paid end or warranty end in the past
  5. none           - nothing known / not started yet

`now` is always passed in; nothing here reads the clock.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Tuple

from ..messages import catalog
from ..rules import CoverageWindows, as_instant, coverage_windows
from ..schemas import CoverageInput, CoverageResult, CoverageStatus

Predicate = Callable[[CoverageWindows, datetime], bool]
Builder = Callable[[CoverageWindows, datetime, Dict[str, str]], CoverageResult]


def format_remaining(end: date | datetime, now: date | datetime, locale: Optional[str] = None) -> str:
    """
    Approximate countdown: 30-day months, 365-day years.
    Past end dates render as the localized "Expired".
    """
    return _countdown(end, as_instant(now), catalog(locale))


def _countdown(end: date | datetime, now: datetime, msgs: Dict[str, str]) -> str:
    end_at = as_instant(end)
    if end_at < now:
        return msgs["remaining.expired"]
    days = (end_at - now).days
    months = days // 30
    if days < 30:
        return msgs["remaining.days"].format(days=days)
    if months < 12:
        return msgs["remaining.months"].format(months=months, days=days % 30)
    return msgs["remaining.years"].format(years=days // 365, months=months % 12)


def _within(now: datetime, start: Optional[date], end: Optional[date]) -> bool:
    if start is None or end is None:
        return False
    return as_instant(start) <= now <= as_instant(end)


def _fmt_date(d: date, msgs: Dict[str, str]) -> str:
    return d.strftime(msgs["date_format"])


# --------- predicates ---------
def _is_paid(w: CoverageWindows, now: datetime) -> bool:
    return w.has_paid_window and _within(now, w.paid_start, w.paid_end)


def _is_warranty(w: CoverageWindows, now: datetime) -> bool:
    return _within(now, w.warranty_start, w.support_end)


def _is_warranty_only(w: CoverageWindows, now: datetime) -> bool:
    if not w.is_post_threshold or w.support_end is None:
        return False
    return now > as_instant(w.support_end) and _within(now, w.warranty_start, w.warranty_end)


def _is_expired(w: CoverageWindows, now: datetime) -> bool:
    if w.paid_end is not None and now > as_instant(w.paid_end):
        return True
    return w.warranty_end is not None and now > as_instant(w.warranty_end)


def _always(w: CoverageWindows, now: datetime) -> bool:
    return True


# --------- builders ---------
def _paid(w: CoverageWindows, now: datetime, msgs: Dict[str, str]) -> CoverageResult:
    remaining = _countdown(w.paid_end, now, msgs)
    return CoverageResult(
        status=CoverageStatus.PAID,
        label=msgs["label.paid"],
        remaining=remaining,
        tooltip=msgs["tooltip.paid"].format(end=_fmt_date(w.paid_end, msgs), remaining=remaining),
    )


def _warranty(w: CoverageWindows, now: datetime, msgs: Dict[str, str]) -> CoverageResult:
    remaining = _countdown(w.support_end, now, msgs)
    label = msgs["label.warranty_support"] if w.is_post_threshold else msgs["label.warranty"]
    return CoverageResult(
        status=CoverageStatus.WARRANTY,
        label=label,
        remaining=remaining,
        tooltip=msgs["tooltip.warranty"].format(end=_fmt_date(w.support_end, msgs), remaining=remaining),
    )


def _warranty_only(w: CoverageWindows, now: datetime, msgs: Dict[str, str]) -> CoverageResult:
    remaining = _countdown(w.warranty_end, now, msgs)
    return CoverageResult(
        status=CoverageStatus.WARRANTY_ONLY,
        label=msgs["label.warranty_only"],
        remaining=remaining,
        tooltip=msgs["tooltip.warranty_only"].format(end=_fmt_date(w.warranty_end, msgs), remaining=remaining),
    )


def _expired(w: CoverageWindows, now: datetime, msgs: Dict[str, str]) -> CoverageResult:
    return CoverageResult(
        status=CoverageStatus.EXPIRED,
        label=msgs["label.expired"],
        remaining="",
        tooltip=msgs["tooltip.expired"],
    )


def _none(w: CoverageWindows, now: datetime, msgs: Dict[str, str]) -> CoverageResult:
    return CoverageResult(
        status=CoverageStatus.NONE,
        label=msgs["label.none"],
        remaining="",
        tooltip=msgs["tooltip.none"],
    )


# Order is the priority. The last rule always matches.
RULES: List[Tuple[CoverageStatus, Predicate, Builder]] = [
    (CoverageStatus.PAID, _is_paid, _paid),
    (CoverageStatus.WARRANTY, _is_warranty, _warranty),
    (CoverageStatus.WARRANTY_ONLY, _is_warranty_only, _warranty_only),
    (CoverageStatus.EXPIRED, _is_expired, _expired),
    (CoverageStatus.NONE, _always, _none),
]


def classify_coverage(data: CoverageInput, now: date | datetime, locale: Optional[str] = None) -> CoverageResult:
    """
    Classify `data` at instant `now`. Total: returns one of the five
    statuses for every combination of present/absent dates.
    """
    msgs = catalog(locale)
    at = as_instant(now)
    windows = coverage_windows(data)
    for _status, matches, build in RULES:
        if matches(windows, at):
            return build(windows, at, msgs)
    return _none(windows, at, msgs)
