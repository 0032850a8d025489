"""Computation services for the migration tracker."""

from migtracker.services.boundary import Malformed, Ok, as_collection, parse, parse_many
from migtracker.services.bucket_trends import build_bucket_trends
from migtracker.services.dashboard import ATTENTION_THRESHOLD, build_dashboard
from migtracker.services.forecast import compute_forecast, confidence_score
from migtracker.services.progress import compute_progress
from migtracker.services.store import InMemoryStore, SnapshotStore
from migtracker.services.tracker import MigrationTracker

__all__ = [
    "ATTENTION_THRESHOLD",
    "InMemoryStore",
    "Malformed",
    "MigrationTracker",
    "Ok",
    "SnapshotStore",
    "as_collection",
    "build_bucket_trends",
    "build_dashboard",
    "compute_forecast",
    "compute_progress",
    "confidence_score",
    "parse",
    "parse_many",
]
