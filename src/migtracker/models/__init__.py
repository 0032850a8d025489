"""Data models for the migration tracker."""

from migtracker.models.bucket import BucketPoint, BucketSummary, BucketTrends
from migtracker.models.dashboard import (
    CustomerPhases,
    Dashboard,
    DashboardStats,
    ProjectPhases,
    RecentActivity,
)
from migtracker.models.export import (
    ExportBundle,
    ExportFormat,
    ExportOptions,
    ExportTemplate,
)
from migtracker.models.hierarchy import Customer, Phase, PhaseType, Project
from migtracker.models.progress import (
    ForecastOutcome,
    ForecastResult,
    ForecastUnavailable,
    ProgressResult,
    format_bytes,
)
from migtracker.models.snapshot import (
    BucketOrigin,
    BucketSnapshot,
    Snapshot,
    SnapshotKind,
)

__all__ = [
    "BucketOrigin",
    "BucketPoint",
    "BucketSnapshot",
    "BucketSummary",
    "BucketTrends",
    "Customer",
    "CustomerPhases",
    "Dashboard",
    "DashboardStats",
    "ExportBundle",
    "ExportFormat",
    "ExportOptions",
    "ExportTemplate",
    "ForecastOutcome",
    "ForecastResult",
    "ForecastUnavailable",
    "Phase",
    "PhaseType",
    "ProgressResult",
    "Project",
    "ProjectPhases",
    "RecentActivity",
    "Snapshot",
    "SnapshotKind",
    "format_bytes",
]
