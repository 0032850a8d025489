"""Tests for the forecast estimator."""

from datetime import date, timedelta

from migtracker.config import ForecastConfig
from migtracker.models.hierarchy import Phase
from migtracker.models.progress import ForecastResult, ForecastUnavailable
from migtracker.models.snapshot import Snapshot, SnapshotKind
from migtracker.services.forecast import (
    compute_forecast,
    confidence_score,
    daily_points,
    interval_rates,
)

CONFIG = ForecastConfig(full_confidence_points=8, recency_horizon_days=60)
PHASE = Phase(id="ph-1", name="Bucket copy 1", project_id="pr-1")


def _snap(day: int, source: int, target: int, kind=SnapshotKind.DATA, **extra) -> Snapshot:
    return Snapshot(
        phase_id="ph-1",
        timestamp=date(2024, 1, day),
        source_objects=source,
        target_objects=target,
        kind=kind,
        **extra,
    )


def _steady(points: int, per_day: int = 100, source: int = 10_000) -> list[Snapshot]:
    return [_snap(day, source, (day - 1) * per_day) for day in range(1, points + 1)]


class TestDailyPoints:
    """Tests for reducing a history to one point per day."""

    def test_excludes_reference(self):
        """Test that REFERENCE snapshots are not rate points."""
        history = [_snap(1, 1000, 0, kind=SnapshotKind.REFERENCE), _snap(2, 1000, 100)]

        assert [p.timestamp.day for p in daily_points(history)] == [2]

    def test_same_day_keeps_larger_target(self):
        """Test the duplicate-date tie-break."""
        history = [_snap(3, 1000, 400), _snap(1, 1000, 0), _snap(3, 1000, 300)]

        points = daily_points(history)

        assert [p.timestamp.day for p in points] == [1, 3]
        assert points[-1].target_objects == 400


class TestIntervalRates:
    """Tests for day-over-day rates."""

    def test_regression_counts_as_zero(self):
        """Test that a falling target contributes a zero rate."""
        rates, regressions = interval_rates([_snap(1, 0, 100), _snap(2, 0, 50), _snap(4, 0, 250)])

        assert rates == [0.0, 100.0]
        assert regressions == 1


class TestComputeForecast:
    """Tests for compute_forecast."""

    def test_two_point_example(self):
        """Test rate, remaining work and ETA for a two-point history."""
        forecast = compute_forecast(
            PHASE, [_snap(1, 1000, 0), _snap(3, 1000, 400)], as_of=date(2024, 1, 3), config=CONFIG
        )

        assert isinstance(forecast, ForecastResult)
        assert forecast.average_rate == 200.0
        assert forecast.remaining_objects == 600
        assert forecast.eta == date(2024, 1, 6)
        assert forecast.data_points == 2
        assert forecast.confidence <= 10

    def test_single_point_unavailable(self):
        """Test that one snapshot cannot produce a forecast."""
        forecast = compute_forecast(PHASE, [_snap(1, 500, 500)], config=CONFIG)

        assert isinstance(forecast, ForecastUnavailable)
        assert forecast.available is False
        assert forecast.eta_display == "Unavailable"

    def test_empty_history_unavailable(self):
        """Test that an empty history cannot produce a forecast."""
        assert isinstance(compute_forecast(PHASE, [], config=CONFIG), ForecastUnavailable)

    def test_same_day_duplicates_unavailable(self):
        """Test that zero elapsed days yields no forecast."""
        history = [_snap(2, 1000, 100), _snap(2, 1000, 200)]

        assert isinstance(compute_forecast(PHASE, history, config=CONFIG), ForecastUnavailable)

    def test_reference_does_not_count_as_data(self):
        """Test that REFERENCE plus one DATA point is not enough."""
        history = [_snap(1, 1000, 0, kind=SnapshotKind.REFERENCE), _snap(5, 1000, 400)]

        assert isinstance(compute_forecast(PHASE, history, config=CONFIG), ForecastUnavailable)

    def test_no_progress_unavailable(self):
        """Test that a flat target count gives no ETA."""
        history = [_snap(1, 1000, 300), _snap(4, 1000, 300)]

        assert isinstance(compute_forecast(PHASE, history, config=CONFIG), ForecastUnavailable)

    def test_net_regression_unavailable(self):
        """Test that a shrinking target count gives no ETA."""
        history = [_snap(1, 1000, 300), _snap(4, 1000, 100)]

        assert isinstance(compute_forecast(PHASE, history, config=CONFIG), ForecastUnavailable)

    def test_complete_phase_eta_is_latest(self):
        """Test that nothing remaining puts the ETA on the latest snapshot."""
        forecast = compute_forecast(
            PHASE, [_snap(1, 1000, 0), _snap(5, 1000, 1200)], config=CONFIG
        )

        assert isinstance(forecast, ForecastResult)
        assert forecast.remaining_objects == 0
        assert forecast.eta == date(2024, 1, 5)

    def test_eta_rounds_up(self):
        """Test that partial days round up."""
        forecast = compute_forecast(
            PHASE, [_snap(1, 1000, 0), _snap(4, 1000, 70)], config=CONFIG
        )

        # 70 objects in 3 days leaves 930, which takes 39.9 days
        assert forecast.eta == date(2024, 1, 4) + timedelta(days=40)

    def test_remaining_size(self):
        """Test remaining bytes from source and target sizes."""
        history = [
            _snap(1, 1000, 0, source_size=5000, target_size=0),
            _snap(2, 1000, 500, source_size=5000, target_size=2000),
        ]

        forecast = compute_forecast(PHASE, history, config=CONFIG)

        assert forecast.remaining_size == 3000

    def test_regression_interval_does_not_crash(self):
        """Test that a mid-history drop lowers confidence instead of failing."""
        as_of = date(2024, 1, 4)
        steady = compute_forecast(PHASE, _steady(4), as_of=as_of, config=CONFIG)
        bumpy = compute_forecast(
            PHASE,
            [_snap(1, 10_000, 0), _snap(2, 10_000, 100), _snap(3, 10_000, 50), _snap(4, 10_000, 300)],
            as_of=as_of,
            config=CONFIG,
        )

        assert isinstance(bumpy, ForecastResult)
        assert bumpy.average_rate == 100.0
        assert bumpy.confidence < steady.confidence


class TestConfidence:
    """Tests for the confidence score."""

    def test_monotonic_in_point_count(self):
        """Test that adding consistent points never lowers confidence."""
        scores = []
        for count in range(2, 12):
            history = _steady(count)
            as_of = history[-1].timestamp
            forecast = compute_forecast(PHASE, history, as_of=as_of, config=CONFIG)
            scores.append(forecast.confidence)

        assert scores == sorted(scores)
        assert scores[0] <= 10

    def test_full_confidence_needs_eight_points(self):
        """Test that 100 is reached only with enough consistent points."""
        seven = _steady(7)
        eight = _steady(8)

        assert confidence_score(seven, seven[-1].timestamp, CONFIG) < 100
        assert confidence_score(eight, eight[-1].timestamp, CONFIG) == 100

    def test_recency_lowers_confidence(self):
        """Test that a stale latest point lowers confidence."""
        history = _steady(8)
        latest = history[-1].timestamp

        fresh = confidence_score(history, latest, CONFIG)
        stale = confidence_score(history, latest + timedelta(days=30), CONFIG)
        ancient = confidence_score(history, latest + timedelta(days=365), CONFIG)

        assert fresh > stale > ancient
        assert ancient == 50

    def test_variance_lowers_confidence(self):
        """Test that uneven pacing lowers confidence."""
        even = _steady(5)
        uneven = [
            _snap(1, 10_000, 0),
            _snap(2, 10_000, 10),
            _snap(3, 10_000, 400),
            _snap(4, 10_000, 410),
            _snap(5, 10_000, 800),
        ]

        as_of = date(2024, 1, 5)
        assert confidence_score(uneven, as_of, CONFIG) < confidence_score(even, as_of, CONFIG)

    def test_bounds(self):
        """Test that confidence stays within [0, 100]."""
        history = _steady(20)

        score = confidence_score(history, history[-1].timestamp, CONFIG)

        assert 0 <= score <= 100
