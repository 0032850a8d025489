"""Normalization of upstream payloads into the internal data model.

Records coming from the tracker API drift in shape: a single object where a
list was expected, a list wrapped in a paging envelope, missing or mistyped
fields. Everything is parsed once here into strict models. A fragment that
cannot be parsed becomes ``Malformed`` and contributes nothing downstream.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from migtracker.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_ENVELOPE_KEYS = ("items", "data", "content")
_PHASE_ID_KEYS = ("phase_id", "phaseId", "migrationPhaseId")


@dataclass(frozen=True)
class Ok(Generic[ModelT]):
    """A successfully parsed payload."""

    value: ModelT


@dataclass(frozen=True)
class Malformed:
    """A payload that could not be parsed."""

    reason: str
    payload: Any = None


ParseResult = Ok[ModelT] | Malformed


def parse(model_cls: type[ModelT], raw: Any) -> "Ok[ModelT] | Malformed":
    """Parse one raw payload into ``model_cls``."""
    if isinstance(raw, model_cls):
        return Ok(raw)
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        return Malformed(f"expected an object, got {type(raw).__name__}", raw)
    try:
        return Ok(model_cls.model_validate(raw))
    except ValidationError as e:
        return Malformed(f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}", raw)


def as_collection(raw: Any) -> list[Any]:
    """Coerce a payload that should be a collection into a list."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set, frozenset)):
        return list(raw)
    if isinstance(raw, Mapping):
        for key in _ENVELOPE_KEYS:
            wrapped = raw.get(key)
            if isinstance(wrapped, list):
                return list(wrapped)
        return [raw]
    if isinstance(raw, (str, bytes)):
        return [raw]
    if isinstance(raw, Iterable):
        return list(raw)
    return [raw]


def parse_many(model_cls: type[ModelT], raw: Any, label: str) -> list[ModelT]:
    """Parse a collection, dropping malformed entries with a warning."""
    items = as_collection(raw)
    if raw is not None and not isinstance(raw, (list, tuple, set, frozenset)):
        logger.warning(f"Expected a list of {label}, got {type(raw).__name__}; normalized")

    parsed: list[ModelT] = []
    for index, item in enumerate(items):
        result = parse(model_cls, item)
        if isinstance(result, Malformed):
            logger.warning(f"Skipping malformed {label} at index {index}: {result.reason}")
            continue
        parsed.append(result.value)
    return parsed


def parse_snapshot_index(raw: Any) -> dict[str, list[Snapshot]]:
    """Normalize a mapping of phase id to snapshot history."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        logger.warning(
            f"Expected snapshots keyed by phase id, got {type(raw).__name__}; ignoring"
        )
        return {}

    index: dict[str, list[Snapshot]] = {}
    for phase_id, history in raw.items():
        phase_id = str(phase_id)
        items = [_with_phase_id(item, phase_id) for item in as_collection(history)]
        index[phase_id] = parse_many(Snapshot, items, f"snapshots for phase {phase_id}")
    return index


def _with_phase_id(item: Any, phase_id: str) -> Any:
    # Histories keyed by phase often omit the owning id on each point.
    if isinstance(item, Mapping) and not any(k in item for k in _PHASE_ID_KEYS):
        return {**item, "phase_id": phase_id}
    return item
