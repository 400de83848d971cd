"""
Report Export

Tabular export of report results through polars.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Type, Union

import polars as pl
import structlog

from sales_reporting.reports.catalog import get_report
from sales_reporting.reports.schemas import ReportResult

logger = structlog.get_logger(__name__)


class ExportFormat(str, Enum):
    """Supported export formats"""
    CSV = "csv"
    PARQUET = "parquet"
    JSON = "json"


_POLARS_TYPES: Dict[Type, pl.DataType] = {
    int: pl.Int64,
    float: pl.Float64,
    str: pl.Utf8,
}


def result_schema(result: ReportResult) -> Dict[str, pl.DataType]:
    """polars schema of a report, taken from its row model"""
    row_model = get_report(result.name).row_model
    return {
        name: _POLARS_TYPES.get(info.annotation, pl.Utf8)
        for name, info in row_model.model_fields.items()
    }


def result_to_frame(result: ReportResult) -> pl.DataFrame:
    """
    Build a DataFrame from a report result.

    Zero-row reports keep their columns and types.
    """
    schema = result_schema(result)
    if not result.rows:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(result.records(), schema=schema)


def export_result(
    result: ReportResult,
    path: Union[str, Path],
    fmt: Union[str, ExportFormat] = ExportFormat.CSV,
) -> Path:
    """
    Write a report result to disk.

    Args:
        result: Report to export
        path: Target file
        fmt: csv, parquet or json

    Returns:
        Path of the written file

    Raises:
        ValueError: Unsupported format
    """
    try:
        export_format = ExportFormat(fmt)
    except ValueError:
        allowed = [f.value for f in ExportFormat]
        raise ValueError(f"Unsupported export format {fmt!r}. Must be one of: {allowed}") from None

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    df = result_to_frame(result)

    if export_format == ExportFormat.CSV:
        df.write_csv(target)
    elif export_format == ExportFormat.PARQUET:
        df.write_parquet(target)
    else:
        df.write_json(target)

    logger.info(
        "Report exported",
        report=result.name,
        path=str(target),
        format=export_format.value,
        rows=len(df),
    )
    return target
