"""
Report Parameters

Validation of caller-supplied report parameters and their defaults.
Bounds live on the ReportParameters model so that the API, the CLI and
the service all reject the same values.
"""

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sales_reporting.config.settings import ReportSettings
from sales_reporting.reports.exceptions import InvalidParameterError

if TYPE_CHECKING:
    from sales_reporting.reports.catalog import ReportDefinition


# The year after MAX_YEAR and the day after MAX_DATE are still valid
# datetimes, so half-open bounds never overflow.
MIN_YEAR = 1900
MAX_YEAR = 9998
MIN_DATE = date(MIN_YEAR, 1, 1)
MAX_DATE = date(MAX_YEAR, 12, 31)
MAX_WINDOW_DAYS = 3650
MAX_LIMIT = 1000

PARAMETER_NAMES = ("year", "reference_date", "window_days", "limit")


class ReportParameters(BaseModel):
    """Resolved parameters for one report run"""

    model_config = ConfigDict(frozen=True)

    year: Optional[int] = Field(default=None, ge=MIN_YEAR, le=MAX_YEAR)
    reference_date: Optional[date] = Field(default=None, ge=MIN_DATE, le=MAX_DATE)
    window_days: Optional[int] = Field(default=None, ge=1, le=MAX_WINDOW_DAYS)
    limit: Optional[int] = Field(default=None, ge=1, le=MAX_LIMIT)

    @field_validator("reference_date", mode="before")
    @classmethod
    def truncate_datetime(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date()
        return v

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def year_bounds(self) -> Tuple[datetime, datetime]:
        """[1 Jan year, 1 Jan year+1) as naive timestamps"""
        if self.year is None:
            raise InvalidParameterError("year", None, "required by this report")
        return datetime(self.year, 1, 1), datetime(self.year + 1, 1, 1)

    def window_bounds(self) -> Tuple[datetime, datetime]:
        """
        Half-open timestamp range for the recent-sales window.

        Starts at midnight window_days before reference_date and ends at
        midnight after it, so the whole reference day is included.
        """
        if self.reference_date is None or self.window_days is None:
            raise InvalidParameterError(
                "reference_date", self.reference_date, "reference_date and window_days are required"
            )
        start = datetime.combine(self.reference_date - timedelta(days=self.window_days), time.min)
        end = datetime.combine(self.reference_date + timedelta(days=1), time.min)
        return start, end


def parse_parameter(name: str, value: Any) -> Any:
    """Validate a single parameter against the ReportParameters field rules."""
    if value is None:
        raise InvalidParameterError(name, value, "a value is required")
    try:
        validated = ReportParameters.model_validate({name: value})
    except ValidationError as e:
        raise InvalidParameterError(name, value, e.errors()[0]["msg"]) from None
    return getattr(validated, name)


def parse_year(value: Any) -> int:
    return parse_parameter("year", value)


def parse_date(value: Any) -> date:
    return parse_parameter("reference_date", value)


def parse_window_days(value: Any) -> int:
    return parse_parameter("window_days", value)


def parse_limit(value: Any) -> int:
    return parse_parameter("limit", value)


def _default_for(
    name: str,
    definition: "ReportDefinition",
    settings: ReportSettings,
    today: Optional[date],
) -> Any:
    if name == "year":
        return settings.default_year
    if name == "reference_date":
        return settings.reference_date or today or date.today()
    if name == "window_days":
        return settings.window_days
    return getattr(settings, definition.limit_setting)


def resolve_parameters(
    definition: "ReportDefinition",
    overrides: Optional[Mapping[str, Any]] = None,
    settings: Optional[ReportSettings] = None,
    today: Optional[date] = None,
    strict: bool = True,
) -> ReportParameters:
    """
    Merge caller overrides over configured defaults for one report.

    Args:
        definition: Report being run
        overrides: Raw values from the API or CLI; None entries are ignored
        settings: Report defaults, read from the environment when omitted
        today: Fallback reference date when none is configured
        strict: Reject parameters the report does not accept

    Raises:
        InvalidParameterError: Unknown, unaccepted or malformed parameter
    """
    settings = settings or ReportSettings()
    supplied = {k: v for k, v in (overrides or {}).items() if v is not None}

    for name in supplied:
        if name not in PARAMETER_NAMES:
            raise InvalidParameterError(name, supplied[name], "unknown parameter")
        if strict and name not in definition.parameters:
            accepted = ", ".join(definition.parameters) or "none"
            raise InvalidParameterError(
                name,
                supplied[name],
                f"not accepted by report '{definition.name}' (accepts: {accepted})",
            )

    resolved: Dict[str, Any] = {}
    for name in definition.parameters:
        if name in supplied:
            resolved[name] = parse_parameter(name, supplied[name])
        elif name in definition.required:
            resolved[name] = parse_parameter(name, _default_for(name, definition, settings, today))

    return ReportParameters(**resolved)
