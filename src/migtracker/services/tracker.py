"""Progress, forecast, dashboard and bucket operations over a snapshot store."""

import logging
from datetime import date

from migtracker.config import AppConfig, get_config
from migtracker.errors import NotFoundError
from migtracker.models.bucket import BucketTrends
from migtracker.models.dashboard import Dashboard
from migtracker.models.export import ExportBundle, ExportOptions
from migtracker.models.hierarchy import Phase
from migtracker.models.progress import ForecastOutcome, ProgressResult
from migtracker.models.snapshot import BucketSnapshot, Snapshot
from migtracker.services.bucket_trends import build_bucket_trends
from migtracker.services.dashboard import build_dashboard
from migtracker.services.forecast import compute_forecast
from migtracker.services.progress import compute_progress
from migtracker.services.store import SnapshotStore

logger = logging.getLogger(__name__)


def _in_range(day: date, date_from: date | None, date_to: date | None) -> bool:
    if date_from is not None and day < date_from:
        return False
    if date_to is not None and day > date_to:
        return False
    return True


class MigrationTracker:
    """Computes derived views fresh from the store on every call."""

    def __init__(self, store: SnapshotStore, config: AppConfig | None = None) -> None:
        self._store = store
        self._config = config or get_config()

    def get_phase(self, phase_id: str) -> Phase:
        """Get a phase or raise NotFoundError."""
        phase = self._store.get_phase(phase_id)
        if phase is None:
            raise NotFoundError("Phase", phase_id)
        return phase

    def get_progress(self, phase_id: str) -> ProgressResult:
        """Current progress of a phase."""
        phase = self.get_phase(phase_id)
        project = self._store.get_project(phase.project_id)
        customer = self._store.get_customer(project.customer_id) if project else None
        return compute_progress(
            phase,
            self._store.list_snapshots(phase_id),
            customer_name=customer.name if customer else None,
            project_name=project.name if project else None,
        )

    def get_forecast(self, phase_id: str, as_of: date | None = None) -> ForecastOutcome:
        """Completion forecast for a phase."""
        phase = self.get_phase(phase_id)
        return compute_forecast(
            phase,
            self._store.list_snapshots(phase_id),
            as_of=as_of,
            config=self._config.forecast,
        )

    def get_data(
        self,
        phase_id: str,
        date_from: date | None = None,
        date_to: date | None = None,
        newest_first: bool = True,
    ) -> list[Snapshot]:
        """Raw snapshots of a phase within an optional inclusive date range."""
        self.get_phase(phase_id)
        snapshots = [
            s
            for s in self._store.list_snapshots(phase_id)
            if _in_range(s.timestamp, date_from, date_to)
        ]
        return sorted(snapshots, key=lambda s: s.timestamp, reverse=newest_first)

    def delete_data(self, phase_id: str, day: date) -> int:
        """Delete the phase's snapshot(s) on ``day``. Deleting nothing is fine."""
        self.get_phase(phase_id)
        return self._store.delete_snapshots(phase_id, day)

    def get_dashboard(self) -> Dashboard:
        """Dashboard statistics, attention list and customer tree."""
        phases = self._store.list_phases()
        return build_dashboard(
            self._store.list_customers(),
            self._store.list_projects(),
            phases,
            {phase.id: self._store.list_snapshots(phase.id) for phase in phases},
            active_phase_limit=self._config.dashboard.active_phase_limit,
            recent_activity_limit=self._config.dashboard.recent_activity_limit,
        )

    def get_bucket_data(
        self,
        phase_id: str,
        bucket_name: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[BucketSnapshot]:
        """Bucket snapshots of a phase, newest first then by bucket name."""
        self.get_phase(phase_id)
        snapshots = [
            s
            for s in self._store.list_bucket_snapshots(phase_id)
            if (bucket_name is None or s.bucket_name == bucket_name)
            and _in_range(s.timestamp, date_from, date_to)
        ]
        snapshots.sort(key=lambda s: s.bucket_name)
        snapshots.sort(key=lambda s: s.timestamp, reverse=True)
        return snapshots

    def get_bucket_trends(self, phase_id: str) -> BucketTrends:
        """Per-bucket trend series for a phase."""
        self.get_phase(phase_id)
        return build_bucket_trends(self._store.list_bucket_snapshots(phase_id))

    def build_export(
        self, phase_id: str, options: ExportOptions | None = None, as_of: date | None = None
    ) -> ExportBundle:
        """Collect what the report exporter needs for a phase."""
        options = options or ExportOptions()
        bundle = ExportBundle(
            phase=self.get_phase(phase_id),
            progress=self.get_progress(phase_id),
            options=options,
        )
        if options.include_forecast:
            bundle.forecast = self.get_forecast(phase_id, as_of=as_of)
        if options.include_raw_data:
            bundle.data = self.get_data(
                phase_id, options.date_from, options.date_to, newest_first=False
            )
        logger.debug(
            f"Prepared {options.format.value} export for phase {phase_id} "
            f"({len(bundle.data)} data point(s))"
        )
        return bundle
