"""
Report Execution Service

Runs catalogue reports against a database session. Every report is issued as
one SELECT statement, so it observes a single consistent snapshot of the
data. Reports never write.
"""

import time
from datetime import date, datetime, timezone
from typing import Any, List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sales_reporting.config import ReportSettings, get_settings
from sales_reporting.reports.catalog import ReportDefinition, get_report, list_reports
from sales_reporting.reports.exceptions import ReportExecutionError
from sales_reporting.reports.parameters import ReportParameters, resolve_parameters
from sales_reporting.reports.schemas import ReportResult

logger = structlog.get_logger(__name__)


class ReportService:
    """
    Execute sales performance reports.

    Example:
        async with get_db(read_only=True) as db:
            service = ReportService(db)
            result = await service.run("monthly-sales", year=2014)
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Optional[ReportSettings] = None,
        today: Optional[date] = None,
    ):
        self.session = session
        self.settings = settings or get_settings().reports
        self.today = today

    def resolve(self, name: Any, **overrides: Any) -> ReportParameters:
        """Validate and resolve parameters without touching the database"""
        definition = get_report(name)
        return resolve_parameters(definition, overrides, self.settings, today=self.today)

    async def run(self, name: Any, **overrides: Any) -> ReportResult:
        """
        Run one report.

        Args:
            name: Catalogue name (ReportName or string)
            **overrides: year, reference_date, window_days, limit

        Returns:
            ReportResult with typed rows in report order

        Raises:
            UnknownReportError: No such report
            InvalidParameterError: Malformed or unaccepted parameter
            ReportExecutionError: The database failed
        """
        definition = get_report(name)
        params = resolve_parameters(definition, overrides, self.settings, today=self.today)
        return await self._execute(definition, params)

    async def run_all(self, **overrides: Any) -> List[ReportResult]:
        """
        Run every report in catalogue order.

        Each report takes only the overrides it accepts; the rest are ignored.
        """
        results = []
        for definition in list_reports():
            params = resolve_parameters(
                definition, overrides, self.settings, today=self.today, strict=False
            )
            results.append(await self._execute(definition, params))
        return results

    async def _execute(self, definition: ReportDefinition, params: ReportParameters) -> ReportResult:
        log = logger.bind(report=definition.name.value, parameters=params.as_dict())
        log.debug("Report started")

        stmt = definition.build_query(params)
        start = time.perf_counter()
        try:
            result = await self.session.execute(stmt)
            mappings = result.mappings().all()
        except SQLAlchemyError as e:
            log.error("Report failed", error=str(e), error_type=type(e).__name__)
            raise ReportExecutionError(definition.name.value, e) from e

        rows = [definition.row_model.model_validate(dict(m)) for m in mappings]
        duration_ms = (time.perf_counter() - start) * 1000

        log.info("Report completed", rows=len(rows), duration_ms=round(duration_ms, 2))

        return ReportResult(
            name=definition.name.value,
            title=definition.title,
            parameters=params,
            columns=definition.columns,
            rows=rows,
            generated_at=datetime.now(timezone.utc),
        )
