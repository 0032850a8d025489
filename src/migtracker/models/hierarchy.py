"""Customer, project and phase models."""

from datetime import date
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    """Base for records read from the tracker API (camelCase or snake_case keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PhaseType(str, Enum):
    """Kind of migration stream."""

    IOM_BUCKET = "IOM_BUCKET"
    IOM_EXCLUSION = "IOM_EXCLUSION"
    RIO_CRUISE = "RIO_CRUISE"

    @property
    def label(self) -> str:
        """Human-readable phase type."""
        labels = {
            PhaseType.IOM_BUCKET: "Bucket copy",
            PhaseType.IOM_EXCLUSION: "Exclusion list",
            PhaseType.RIO_CRUISE: "Cruise tape",
        }
        return labels[self]


class Customer(UpstreamModel):
    """A customer owning one or more migration projects."""

    id: str
    name: str = Field(..., min_length=1)
    active: bool | None = None


class Project(UpstreamModel):
    """A migration project."""

    id: str
    name: str = Field(..., min_length=1)
    customer_id: str
    active: bool | None = None


class Phase(UpstreamModel):
    """One source to target migration stream within a project."""

    id: str
    name: str = Field(..., min_length=1)
    type: PhaseType = PhaseType.IOM_BUCKET
    project_id: str = Field(
        validation_alias=AliasChoices("project_id", "projectId", "migrationId")
    )
    source: str = ""
    target: str = ""
    source_tape_partition: str | None = None
    target_tape_partition: str | None = None
    active: bool | None = None
    created_at: date | None = None
    last_updated: date | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _collapse_cruise_subtypes(cls, value: object) -> object:
        if value is None:
            return PhaseType.IOM_BUCKET
        if isinstance(value, str) and value.upper().startswith("RIO_CRUISE"):
            return PhaseType.RIO_CRUISE
        return value

    @property
    def is_active(self) -> bool:
        """Records without the flag predate it and count as active."""
        return self.active is not False

    @property
    def route_display(self) -> str:
        """Source and target domains for display."""
        return f"{self.source or '?'} -> {self.target or '?'}"
