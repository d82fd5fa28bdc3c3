# supportdesk/api/main.py
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ..schemas import CoverageReport, CoverageRequest, CoverageResult, LineCoverage, SupportFilter
from ..service import coverage_report, evaluate, line_coverage, support_tree
from ..services.filters import parse_filter
from ..config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_TITLE)


def _support(value: str) -> SupportFilter:
    try:
        return parse_filter(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# Read-only API consumed by the support UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

@app.get("/")
def root():
    return {
        "name": settings.APP_TITLE,
        "health": "/health",
        "coverage": "/coverage",
        "line": "/lines/{line_id}/coverage",
        "report": "/coverage/report",
        "tree": "/coverage/tree",
        "locale": settings.COVERAGE_LOCALE,
    }

@app.get("/health")
def health():
    return {"status": "ok"}

@app.post("/coverage", response_model=CoverageResult)
def coverage(req: CoverageRequest):
    return evaluate(req, now=req.now, locale=req.locale)

@app.get("/lines/{line_id}/coverage", response_model=LineCoverage)
def line(line_id: int, now: Optional[datetime] = None, locale: Optional[str] = None):
    try:
        return line_coverage(line_id, now=now, locale=locale)
    except KeyError:
        logger.info("Coverage requested for unknown line %s", line_id)
        raise HTTPException(status_code=404, detail=f"Line {line_id} not found")

@app.get("/coverage/report", response_model=CoverageReport)
def report(support: str = "all", now: Optional[datetime] = None, locale: Optional[str] = None):
    return coverage_report(_support(support), now=now, locale=locale)

@app.get("/coverage/tree")
def tree(support: str = "all", now: Optional[datetime] = None, locale: Optional[str] = None):
    f = _support(support)
    return {"support": f.value, "clients": support_tree(f, now=now, locale=locale)}
