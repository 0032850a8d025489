"""Inputs handed to the report exporter."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from migtracker.models.hierarchy import Phase
from migtracker.models.progress import ForecastOutcome, ProgressResult
from migtracker.models.snapshot import Snapshot


class ExportFormat(str, Enum):
    """Output formats supported by the exporter."""

    JSON = "json"
    CSV = "csv"
    EXCEL = "excel"
    PDF = "pdf"
    HTML = "html"


class ExportTemplate(str, Enum):
    """Report layouts."""

    EXECUTIVE = "executive"
    DETAILED = "detailed"
    MINIMAL = "minimal"


class ExportOptions(BaseModel):
    """Caller-specified export options."""

    format: ExportFormat = ExportFormat.JSON
    include_charts: bool = True
    include_forecast: bool = True
    include_raw_data: bool = False
    date_from: date | None = None
    date_to: date | None = None
    template: ExportTemplate = ExportTemplate.DETAILED

    @model_validator(mode="after")
    def _check_range(self) -> "ExportOptions":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self


class ExportBundle(BaseModel):
    """Everything the exporter needs for one phase."""

    phase: Phase
    progress: ProgressResult
    forecast: ForecastOutcome | None = None
    data: list[Snapshot] = Field(default_factory=list)
    options: ExportOptions = Field(default_factory=ExportOptions)
