"""
Sales Performance Reports
"""
from .catalog import ReportDefinition, ReportName, get_report, list_reports
from .exceptions import (
    InvalidParameterError,
    ReportError,
    ReportExecutionError,
    UnknownReportError,
)
from .export import ExportFormat, export_result, result_to_frame
from .parameters import ReportParameters, resolve_parameters
from .schemas import ReportResult
from .service import ReportService

__all__ = [
    "ReportDefinition",
    "ReportName",
    "get_report",
    "list_reports",
    "InvalidParameterError",
    "ReportError",
    "ReportExecutionError",
    "UnknownReportError",
    "ExportFormat",
    "export_result",
    "result_to_frame",
    "ReportParameters",
    "resolve_parameters",
    "ReportResult",
    "ReportService",
]
