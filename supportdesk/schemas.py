# supportdesk/schemas.py
from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DATE_COLUMNS = ("warranty_start_date", "paid_support_start_date", "paid_support_end_date")

_TIME_PART = re.compile(r"[T ]")


def calendar_day(text: str) -> str:
    """
    Date part of an ISO date or timestamp, as written. The offset is ignored,
    so 2026-01-01T00:00:00+03:00 stays on 2026-01-01.
    """
    return _TIME_PART.split(text.strip(), maxsplit=1)[0]


class CoverageStatus(str, Enum):
    PAID = "paid"
    WARRANTY = "warranty"
    WARRANTY_ONLY = "warranty_only"
    EXPIRED = "expired"
    NONE = "none"


class SupportFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    EXPIRED = "expired"


class StatusTone(str, Enum):
    COVERED = "covered"
    EXPIRED = "expired"
    UNKNOWN = "unknown"


class CoverageInput(BaseModel):
    warranty_start_date: Optional[date] = None
    paid_support_start_date: Optional[date] = None
    paid_support_end_date: Optional[date] = None

    @field_validator(*DATE_COLUMNS, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            return calendar_day(v) or None
        if isinstance(v, datetime):
            return v.date()
        return v


class CoverageResult(BaseModel):
    status: CoverageStatus
    label: str
    remaining: str
    tooltip: str


class CoverageRequest(CoverageInput):
    now: Optional[datetime] = None
    locale: Optional[str] = None

    @field_validator("locale")
    @classmethod
    def locale_lower(cls, v: Optional[str]) -> Optional[str]:
        return (v or "").strip().lower() or None


class LineRecord(BaseModel):
    id: int
    name: str = ""
    client_id: Optional[int] = None
    client_name: str = ""
    site_id: Optional[int] = None
    site_name: str = ""
    line: CoverageInput = Field(default_factory=CoverageInput)
    client: CoverageInput = Field(default_factory=CoverageInput)


class LineCoverage(CoverageResult):
    line_id: int
    line_name: str
    client_id: Optional[int] = None
    site_id: Optional[int] = None
    tone: StatusTone


class CoverageReport(BaseModel):
    support: SupportFilter
    evaluated_at: datetime
    lines: List[LineCoverage]
