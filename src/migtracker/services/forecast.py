"""Completion forecast for a phase from its snapshot history."""

import logging
from collections.abc import Sequence
from datetime import date, timedelta
from statistics import fmean, pstdev

from migtracker.config import ForecastConfig, get_config
from migtracker.models.hierarchy import Phase
from migtracker.models.progress import ForecastOutcome, ForecastResult, ForecastUnavailable
from migtracker.models.snapshot import Snapshot, SnapshotKind
from migtracker.services.progress import baseline_source, chronological_key

logger = logging.getLogger(__name__)

# Consistency assigned when a single interval gives no variance to measure.
_SINGLE_INTERVAL_CONSISTENCY = 0.5
# Recency never drops below this share, however old the latest point is.
_RECENCY_FLOOR = 0.5


def daily_points(snapshots: Sequence[Snapshot]) -> list[Snapshot]:
    """DATA snapshots reduced to one point per calendar day, ascending.

    Same-day duplicates resolve to the point with the larger target count.
    """
    by_day: dict[date, Snapshot] = {}
    for snapshot in sorted(snapshots, key=chronological_key):
        if snapshot.kind == SnapshotKind.DATA:
            by_day[snapshot.timestamp] = snapshot
    return [by_day[day] for day in sorted(by_day)]


def interval_rates(points: Sequence[Snapshot]) -> tuple[list[float], int]:
    """Day-over-day rates between consecutive points and the regression count.

    A regressing interval (target count went down) contributes a rate of 0.
    """
    rates: list[float] = []
    regressions = 0
    for previous, current in zip(points, points[1:]):
        days = (current.timestamp - previous.timestamp).days
        delta = current.target_objects - previous.target_objects
        if delta < 0:
            regressions += 1
        rates.append(max(0.0, delta / days))
    return rates, regressions


def confidence_score(points: Sequence[Snapshot], as_of: date, config: ForecastConfig) -> int:
    """Score in [0, 100] for a forecast built from ``points``.

    The score is the product of four factors, each in [0, 1]:

    * volume: intervals observed over ``full_confidence_points - 1``, capped at 1;
    * consistency: ``1 / (1 + cv)`` where cv is the coefficient of variation
      of the interval rates (0.5 when there is only one interval);
    * recency: 1 when the latest point is from ``as_of``, decaying linearly to
      0.5 at ``recency_horizon_days`` old;
    * regression: ``1 - 0.5 * share of intervals whose target count fell``.

    Two points therefore score at most 7, and only a history of at least
    ``full_confidence_points`` evenly paced, current points reaches 100.
    """
    rates, regressions = interval_rates(points)
    if not rates:
        return 0

    volume = min(1.0, len(rates) / (config.full_confidence_points - 1))

    if len(rates) == 1:
        consistency = _SINGLE_INTERVAL_CONSISTENCY
    else:
        mean = fmean(rates)
        consistency = 0.0 if mean <= 0 else 1 / (1 + pstdev(rates) / mean)

    age = max(0, (as_of - points[-1].timestamp).days)
    recency = _RECENCY_FLOOR + (1 - _RECENCY_FLOOR) * max(
        0.0, 1 - age / config.recency_horizon_days
    )

    regression = 1 - 0.5 * regressions / len(rates)

    score = round(100 * volume * consistency * recency * regression)
    return max(0, min(100, score))


def compute_forecast(
    phase: Phase,
    snapshots: Sequence[Snapshot],
    as_of: date | None = None,
    config: ForecastConfig | None = None,
) -> ForecastOutcome:
    """Estimate completion date, confidence and average rate for a phase."""
    if config is None:
        config = get_config().forecast
    if as_of is None:
        as_of = date.today()

    points = daily_points(snapshots)
    if len(points) < 2:
        logger.debug(f"Forecast unavailable for phase {phase.id}: {len(points)} data day(s)")
        return ForecastUnavailable(
            reason="At least two DATA snapshots on different dates are required"
        )

    earliest, latest = points[0], points[-1]
    elapsed_days = (latest.timestamp - earliest.timestamp).days
    migrated = latest.target_objects - earliest.target_objects
    if migrated <= 0:
        logger.debug(f"Forecast unavailable for phase {phase.id}: no net progress")
        return ForecastUnavailable(reason="No net progress between first and latest snapshot")

    source_objects, source_size = baseline_source(snapshots, latest)
    remaining_objects = max(0, source_objects - latest.target_objects)
    remaining_size = max(0, source_size - latest.target_size)

    # ceil(remaining / (migrated / elapsed)) without float rounding
    days_left = -(-remaining_objects * elapsed_days // migrated)

    return ForecastResult(
        eta=latest.timestamp + timedelta(days=days_left),
        confidence=confidence_score(points, as_of, config),
        average_rate=migrated / elapsed_days,
        remaining_objects=remaining_objects,
        remaining_size=remaining_size,
        data_points=len(points),
    )
