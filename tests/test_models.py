"""Tests for data models."""

from datetime import date

import pytest
from pydantic import ValidationError

from migtracker.models.dashboard import CustomerPhases, ProjectPhases
from migtracker.models.export import ExportFormat, ExportOptions, ExportTemplate
from migtracker.models.hierarchy import Phase, PhaseType
from migtracker.models.progress import (
    ForecastResult,
    ForecastUnavailable,
    ProgressResult,
    format_bytes,
)
from migtracker.models.snapshot import BucketOrigin, BucketSnapshot, Snapshot, SnapshotKind


class TestPhase:
    """Tests for Phase model."""

    def test_create_from_api_payload(self):
        """Test parsing a camelCase payload."""
        phase = Phase.model_validate(
            {
                "id": "ph-1",
                "name": "IOM copy",
                "type": "IOM_EXCLUSION",
                "migrationId": "p-1",
                "source": "BP-Primary",
                "target": "Rio-Archive",
                "createdAt": "2024-01-01",
            }
        )

        assert phase.project_id == "p-1"
        assert phase.type == PhaseType.IOM_EXCLUSION
        assert phase.created_at == date(2024, 1, 1)
        assert phase.route_display == "BP-Primary -> Rio-Archive"

    def test_cruise_subtypes_collapse(self):
        """Test that legacy cruise sub-types parse to RIO_CRUISE."""
        phase = Phase(id="ph-1", name="Cruise", type="RIO_CRUISE_SGL", project_id="p-1")

        assert phase.type == PhaseType.RIO_CRUISE
        assert phase.type.label == "Cruise tape"

    def test_active_defaults(self):
        """Test the active flag semantics."""
        assert Phase(id="a", name="a", project_id="p").is_active
        assert Phase(id="a", name="a", project_id="p", active=True).is_active
        assert not Phase(id="a", name="a", project_id="p", active=False).is_active

    def test_null_type_defaults_to_bucket_copy(self):
        """Test that legacy records with a null type still parse."""
        phase = Phase.model_validate(
            {"id": "ph-1", "name": "Old", "type": None, "migrationId": "p-1"}
        )

        assert phase.type == PhaseType.IOM_BUCKET

    def test_unknown_type_rejected(self):
        """Test that an unknown phase type fails validation."""
        with pytest.raises(ValidationError):
            Phase(id="a", name="a", project_id="p", type="FLOPPY")


class TestSnapshot:
    """Tests for Snapshot model."""

    def test_create_from_api_payload(self):
        """Test parsing the original MigrationData shape."""
        snapshot = Snapshot.model_validate(
            {
                "id": "md-1",
                "migrationPhaseId": "ph-1",
                "timestamp": "2024-03-05",
                "sourceObjects": 1000,
                "sourceSize": None,
                "targetObjects": 10,
                "targetSize": 4096,
                "type": "REFERENCE",
                "targetScratchTapes": 2,
            }
        )

        assert snapshot.phase_id == "ph-1"
        assert snapshot.source_size == 0
        assert snapshot.kind == SnapshotKind.REFERENCE
        assert snapshot.is_reference
        assert snapshot.target_scratch_tapes == 2

    def test_defaults(self):
        """Test default kind and generated id."""
        snapshot = Snapshot(phase_id="ph-1", timestamp=date(2024, 1, 1))

        assert snapshot.kind == SnapshotKind.DATA
        assert snapshot.id

    def test_negative_counts_rejected(self):
        """Test that negative counts fail validation."""
        with pytest.raises(ValidationError):
            Snapshot(phase_id="ph-1", timestamp=date(2024, 1, 1), target_objects=-1)

    def test_dump_by_alias(self):
        """Test serialization uses camelCase keys."""
        snapshot = Snapshot(phase_id="ph-1", timestamp=date(2024, 1, 1), target_objects=5)

        dumped = snapshot.model_dump(mode="json", by_alias=True)

        assert dumped["targetObjects"] == 5
        assert dumped["timestamp"] == "2024-01-01"


class TestBucketSnapshot:
    """Tests for BucketSnapshot model."""

    def test_legacy_origin(self):
        """Test that legacy origin tags are mapped."""
        snapshot = BucketSnapshot.model_validate(
            {
                "phaseId": "ph-1",
                "timestamp": "2024-01-01",
                "bucketName": "media",
                "source": "BlackPearl",
            }
        )

        assert snapshot.origin == BucketOrigin.SYSTEM_A

    def test_new_origin(self):
        """Test the current origin tags."""
        snapshot = BucketSnapshot(
            phase_id="ph-1",
            timestamp=date(2024, 1, 1),
            bucket_name="media",
            origin="source-system-b",
        )

        assert snapshot.origin == BucketOrigin.SYSTEM_B


class TestProgressResult:
    """Tests for ProgressResult model."""

    def test_remaining(self):
        """Test remaining counts never go negative."""
        result = ProgressResult(
            phase_id="ph-1",
            phase_name="p",
            source_objects=10,
            target_objects=12,
            source_size=100,
            target_size=40,
        )

        assert result.remaining_objects == 0
        assert result.remaining_size == 60

    def test_progress_bounds_validated(self):
        """Test that out-of-range progress is rejected on construction."""
        with pytest.raises(ValidationError):
            ProgressResult(phase_id="ph-1", phase_name="p", progress=101)


class TestForecastModels:
    """Tests for forecast result models."""

    def test_displays(self):
        """Test ETA and rate display."""
        forecast = ForecastResult(
            eta=date(2024, 2, 1),
            confidence=70,
            average_rate=12500.4,
            remaining_objects=10,
            remaining_size=0,
        )

        assert forecast.available is True
        assert forecast.eta_display == "2024-02-01"
        assert forecast.rate_display == "12,500 objects/day"

    def test_unavailable(self):
        """Test the unavailable result."""
        forecast = ForecastUnavailable(reason="not enough data")

        assert forecast.available is False
        assert forecast.model_dump()["reason"] == "not enough data"


class TestFormatBytes:
    """Tests for format_bytes."""

    def test_units(self):
        """Test unit selection."""
        assert format_bytes(512) == "512 B"
        assert format_bytes(1536) == "1.50 KB"
        assert format_bytes(5 * 1024**3) == "5.00 GB"
        assert format_bytes(3 * 1024**5) == "3.00 PB"


class TestHierarchyNodes:
    """Tests for dashboard tree nodes."""

    def test_project_average_ignores_empty_phases(self):
        """Test project average over measured phases."""
        project = ProjectPhases(
            id="p-1",
            name="Move",
            phases=[
                ProgressResult(phase_id="a", phase_name="a", progress=40, snapshot_count=1),
                ProgressResult(phase_id="b", phase_name="b", progress=0, snapshot_count=0),
            ],
        )
        customer = CustomerPhases(id="c-1", name="Acme", projects=[project])

        assert project.average_progress == 40.0
        assert customer.phase_count == 2


class TestExportOptions:
    """Tests for ExportOptions model."""

    def test_defaults(self):
        """Test default options."""
        options = ExportOptions()

        assert options.format == ExportFormat.JSON
        assert options.template == ExportTemplate.DETAILED
        assert options.include_forecast is True
        assert options.include_raw_data is False

    def test_inverted_range_rejected(self):
        """Test that date_from after date_to is rejected."""
        with pytest.raises(ValidationError):
            ExportOptions(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))
