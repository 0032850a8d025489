"""Derived progress and forecast results."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field


def format_bytes(size: int) -> str:
    """Format a byte count using 1024-based units."""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if abs(value) < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} PB"


class ProgressResult(BaseModel):
    """Present-day progress of a phase."""

    phase_id: str
    phase_name: str
    progress: float = Field(default=0.0, ge=0, le=100)
    source_objects: int = 0
    target_objects: int = 0
    source_size: int = 0
    target_size: int = 0
    source_tape_count: int | None = None
    target_tape_count: int | None = None
    snapshot_count: int = 0
    indeterminate: bool = False
    latest_timestamp: date | None = None
    customer_name: str | None = None
    project_name: str | None = None

    @property
    def has_data(self) -> bool:
        """Whether any snapshot contributed to this result."""
        return self.snapshot_count > 0

    @property
    def remaining_objects(self) -> int:
        """Objects still to migrate."""
        return max(0, self.source_objects - self.target_objects)

    @property
    def remaining_size(self) -> int:
        """Bytes still to migrate."""
        return max(0, self.source_size - self.target_size)

    @property
    def progress_display(self) -> str:
        """Format progress for display."""
        if self.indeterminate:
            return "--"
        return f"{self.progress:.1f}%"


class ForecastResult(BaseModel):
    """Projected completion of a phase."""

    available: Literal[True] = True
    eta: date
    confidence: int = Field(..., ge=0, le=100)
    average_rate: float
    remaining_objects: int
    remaining_size: int
    data_points: int = 0

    @property
    def eta_display(self) -> str:
        """Format ETA for display."""
        return self.eta.isoformat()

    @property
    def rate_display(self) -> str:
        """Format the average rate for display."""
        return f"{self.average_rate:,.0f} objects/day"


class ForecastUnavailable(BaseModel):
    """No forecast can be made from the available history."""

    available: Literal[False] = False
    reason: str

    @property
    def eta_display(self) -> str:
        """Format ETA for display."""
        return "Unavailable"


ForecastOutcome = ForecastResult | ForecastUnavailable
