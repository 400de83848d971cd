"""
Report Errors

Input errors are raised before any SQL is issued. Execution errors wrap the
underlying database error so callers see a single failure type.
"""

from typing import Any, Optional


class ReportError(Exception):
    """Base class for all reporting errors"""


class InvalidParameterError(ReportError, ValueError):
    """A report parameter is malformed, out of range, or not accepted"""

    def __init__(self, parameter: str, value: Any, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{parameter}': {value!r} ({reason})")


class UnknownReportError(ReportError, LookupError):
    """No report is registered under the requested name"""

    def __init__(self, name: str, available: Optional[list] = None):
        self.name = name
        self.available = available or []
        message = f"Unknown report: {name!r}"
        if self.available:
            message += f". Available reports: {', '.join(self.available)}"
        super().__init__(message)


class ReportExecutionError(ReportError):
    """The database failed while computing a report"""

    def __init__(self, name: str, cause: Exception):
        self.name = name
        self.cause = cause
        super().__init__(f"Report {name!r} failed: {type(cause).__name__}: {cause}")
