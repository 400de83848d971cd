"""
Report API Endpoints

REST API over the sales performance report catalogue.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sales_reporting.database.connection import get_db_dependency
from sales_reporting.reports import (
    InvalidParameterError,
    ReportExecutionError,
    ReportService,
    UnknownReportError,
    list_reports,
)
from sales_reporting.reports.parameters import MAX_LIMIT, MAX_WINDOW_DAYS, MAX_YEAR, MIN_YEAR

router = APIRouter()
logger = structlog.get_logger(__name__)


class ReportSummary(BaseModel):
    """Catalogue entry"""
    number: int
    name: str
    title: str
    description: str
    parameters: List[str]
    required_parameters: List[str]
    columns: List[str]
    notes: List[str]


class ReportResponse(BaseModel):
    """Report result"""
    name: str
    title: str
    parameters: Dict[str, Any]
    columns: List[str]
    row_count: int
    rows: List[Dict[str, Any]]
    generated_at: str


@router.get("", response_model=List[ReportSummary])
async def get_catalogue() -> List[ReportSummary]:
    """List every available report in catalogue order."""
    return [ReportSummary(**definition.describe()) for definition in list_reports()]


@router.get("/{name}", response_model=ReportResponse)
async def run_report(
    name: str,
    year: Optional[int] = Query(None, ge=MIN_YEAR, le=MAX_YEAR, description="Target calendar year, e.g. 2014"),
    reference_date: Optional[date] = Query(None, description="Last day of the recent window (YYYY-MM-DD)"),
    window_days: Optional[int] = Query(None, ge=1, le=MAX_WINDOW_DAYS, description="Days before reference_date to include"),
    limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT, description="Rows kept by top-N reports"),
    db: AsyncSession = Depends(get_db_dependency),
) -> ReportResponse:
    """
    Run one report.

    Malformed or out-of-range values and parameters the report does not
    accept are rejected with 422.
    """
    service = ReportService(db)
    try:
        result = await service.run(
            name,
            year=year,
            reference_date=reference_date,
            window_days=window_days,
            limit=limit,
        )
    except UnknownReportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidParameterError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ReportExecutionError as e:
        logger.error("Report request failed", report=name, error=str(e))
        raise HTTPException(status_code=500, detail=f"Report {name!r} failed")

    return ReportResponse(**result.to_payload())
