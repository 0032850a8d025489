"""Present-day progress of a phase from its snapshot history."""

import logging
from collections.abc import Sequence

from migtracker.models.hierarchy import Phase
from migtracker.models.progress import ProgressResult
from migtracker.models.snapshot import Snapshot, SnapshotKind

logger = logging.getLogger(__name__)


def chronological_key(snapshot: Snapshot) -> tuple:
    """Sort key placing the authoritative measurement last.

    Later dates win. On the same date a DATA point outranks a REFERENCE point,
    and among duplicates the larger target count wins (progress is assumed
    to be monotonic).
    """
    return (
        snapshot.timestamp,
        snapshot.kind == SnapshotKind.DATA,
        snapshot.target_objects,
    )


def latest_snapshot(snapshots: Sequence[Snapshot]) -> Snapshot | None:
    """Return the latest measurement, or None for an empty history."""
    if not snapshots:
        return None
    return max(snapshots, key=chronological_key)


def baseline_source(snapshots: Sequence[Snapshot], latest: Snapshot) -> tuple[int, int]:
    """Source totals to measure ``latest`` against, as (objects, bytes).

    The latest point carries its own source totals. When it reports none,
    the most recent REFERENCE point on or before it supplies the baseline.
    """
    if latest.source_objects > 0:
        return latest.source_objects, latest.source_size

    references = [
        s
        for s in snapshots
        if s.is_reference and s.timestamp <= latest.timestamp and s.source_objects > 0
    ]
    if not references:
        return latest.source_objects, latest.source_size
    reference = max(references, key=chronological_key)
    return reference.source_objects, reference.source_size


def percentage(target: int, source: int) -> float:
    """``target / source * 100`` clamped to [0, 100]; 0 when source is 0."""
    if source <= 0:
        return 0.0
    return max(0.0, min(100.0, target * 100 / source))


def compute_progress(
    phase: Phase,
    snapshots: Sequence[Snapshot],
    customer_name: str | None = None,
    project_name: str | None = None,
) -> ProgressResult:
    """Compute a phase's current progress from its full snapshot history."""
    result = ProgressResult(
        phase_id=phase.id,
        phase_name=phase.name,
        snapshot_count=len(snapshots),
        customer_name=customer_name,
        project_name=project_name,
    )

    latest = latest_snapshot(snapshots)
    if latest is None:
        logger.debug(f"No snapshots for phase {phase.id}; progress is 0")
        result.indeterminate = True
        return result

    source_objects, source_size = baseline_source(snapshots, latest)

    result.source_objects = source_objects
    result.source_size = source_size
    result.target_objects = latest.target_objects
    result.target_size = latest.target_size
    result.target_tape_count = latest.target_scratch_tapes
    result.latest_timestamp = latest.timestamp
    result.indeterminate = source_objects == 0
    result.progress = percentage(latest.target_objects, source_objects)

    if len(snapshots) == 1 and source_objects > 0 and latest.target_objects == source_objects:
        logger.warning(
            f"Phase {phase.id} has a single snapshot with target equal to source "
            f"({source_objects} objects); reporting 100% but the migration may not have started"
        )
    if latest.target_objects > source_objects > 0:
        logger.info(
            f"Phase {phase.id} target ({latest.target_objects}) exceeds source "
            f"({source_objects}); progress capped at 100%"
        )

    return result
