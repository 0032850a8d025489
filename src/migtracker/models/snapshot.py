"""Snapshot models: per-phase totals and per-bucket measurements."""

from datetime import date
from enum import Enum
from uuid import uuid4

from pydantic import AliasChoices, Field, field_validator

from migtracker.models.hierarchy import UpstreamModel

_PHASE_ID_ALIASES = AliasChoices("phase_id", "phaseId", "migrationPhaseId")


class SnapshotKind(str, Enum):
    """Snapshot kind."""

    REFERENCE = "REFERENCE"
    DATA = "DATA"


class BucketOrigin(str, Enum):
    """System a bucket measurement was taken from."""

    SYSTEM_A = "source-system-a"
    SYSTEM_B = "source-system-b"


_LEGACY_ORIGINS = {
    "blackpearl": BucketOrigin.SYSTEM_A,
    "rio": BucketOrigin.SYSTEM_B,
}


class Snapshot(UpstreamModel):
    """One dated measurement of object and byte counts for a phase."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    phase_id: str = Field(validation_alias=_PHASE_ID_ALIASES)
    timestamp: date
    source_objects: int = Field(default=0, ge=0)
    source_size: int = Field(default=0, ge=0)
    target_objects: int = Field(default=0, ge=0)
    target_size: int = Field(default=0, ge=0)
    kind: SnapshotKind = Field(
        default=SnapshotKind.DATA, validation_alias=AliasChoices("kind", "type")
    )
    target_scratch_tapes: int | None = None
    user_id: str | None = None

    @field_validator(
        "source_objects", "source_size", "target_objects", "target_size", mode="before"
    )
    @classmethod
    def _null_count_is_zero(cls, value: object) -> object:
        return 0 if value is None else value

    @property
    def is_reference(self) -> bool:
        """Whether this is a baseline-only measurement."""
        return self.kind == SnapshotKind.REFERENCE


class BucketSnapshot(UpstreamModel):
    """One measurement of a named bucket, scoped to a phase."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    phase_id: str = Field(validation_alias=_PHASE_ID_ALIASES)
    timestamp: date
    bucket_name: str = Field(..., min_length=1)
    origin: BucketOrigin = Field(validation_alias=AliasChoices("origin", "source"))
    object_count: int = Field(default=0, ge=0)
    size_bytes: int = Field(default=0, ge=0)

    @field_validator("origin", mode="before")
    @classmethod
    def _map_legacy_origin(cls, value: object) -> object:
        if isinstance(value, str):
            return _LEGACY_ORIGINS.get(value.lower(), value)
        return value
