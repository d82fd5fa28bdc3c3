from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from dateutil.relativedelta import relativedelta

from .schemas import CoverageInput

# Installs starting in or after this year get 2 months of free support instead of 12.
CUTOVER_YEAR = 2026
FREE_SUPPORT_MONTHS_PRE_CUTOVER = 12
FREE_SUPPORT_MONTHS_POST_CUTOVER = 2
WARRANTY_MONTHS = 12


def add_months(d: date, months: int) -> date:
    """Calendar month addition, clamped to the end of the target month."""
    return d + relativedelta(months=months)


def as_instant(d: date | datetime) -> datetime:
    """
    Dates are compared as midnight of that day. Aware datetimes keep their
    wall-clock time and drop the zone, so they compare with plain dates.
    """
    if isinstance(d, datetime):
        return d.replace(tzinfo=None)
    return datetime.combine(d, time.min)


def free_support_months(warranty_start: Optional[date]) -> Optional[int]:
    if warranty_start is None:
        return None
    if warranty_start.year >= CUTOVER_YEAR:
        return FREE_SUPPORT_MONTHS_POST_CUTOVER
    return FREE_SUPPORT_MONTHS_PRE_CUTOVER


@dataclass(frozen=True)
class CoverageWindows:
    warranty_start: Optional[date] = None
    is_post_threshold: bool = False
    free_support_months: Optional[int] = None
    support_end: Optional[date] = None
    warranty_end: Optional[date] = None
    paid_start: Optional[date] = None
    paid_end: Optional[date] = None

    @property
    def has_paid_window(self) -> bool:
        return self.paid_start is not None and self.paid_end is not None


def coverage_windows(data: CoverageInput) -> CoverageWindows:
    """
    Derive the support/warranty windows of a record.
    - support_end: warranty start + free support months (2 post-cutover, 12 before)
    - warranty_end: warranty start + 12 months, regardless of cutover
    Absent dates leave the matching windows as None.
    """
    start = data.warranty_start_date
    if start is None:
        return CoverageWindows(
            paid_start=data.paid_support_start_date,
            paid_end=data.paid_support_end_date,
        )

    months = free_support_months(start)
    return CoverageWindows(
        warranty_start=start,
        is_post_threshold=start.year >= CUTOVER_YEAR,
        free_support_months=months,
        support_end=add_months(start, months),
        warranty_end=add_months(start, WARRANTY_MONTHS),
        paid_start=data.paid_support_start_date,
        paid_end=data.paid_support_end_date,
    )
