"""Snapshot store interface and an in-memory implementation."""

import logging
import threading
from collections.abc import Mapping
from datetime import date
from typing import Any, Protocol

from migtracker.models.hierarchy import Customer, Phase, Project
from migtracker.models.snapshot import BucketSnapshot, Snapshot
from migtracker.services.boundary import parse_many

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """What the engine reads from (and deletes in) persistent storage."""

    def get_customer(self, customer_id: str) -> Customer | None: ...

    def get_project(self, project_id: str) -> Project | None: ...

    def get_phase(self, phase_id: str) -> Phase | None: ...

    def list_customers(self) -> list[Customer]: ...

    def list_projects(self) -> list[Project]: ...

    def list_phases(self) -> list[Phase]: ...

    def list_snapshots(self, phase_id: str) -> list[Snapshot]: ...

    def delete_snapshots(self, phase_id: str, day: date) -> int: ...

    def list_bucket_snapshots(self, phase_id: str) -> list[BucketSnapshot]: ...


class InMemoryStore:
    """Thread-safe in-memory snapshot store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._customers: dict[str, Customer] = {}
        self._projects: dict[str, Project] = {}
        self._phases: dict[str, Phase] = {}
        self._snapshots: dict[str, list[Snapshot]] = {}
        self._bucket_snapshots: dict[str, list[BucketSnapshot]] = {}

    def add_customer(self, customer: Customer) -> str:
        """Add or replace a customer."""
        with self._lock:
            self._customers[customer.id] = customer
        return customer.id

    def add_project(self, project: Project) -> str:
        """Add or replace a project."""
        with self._lock:
            self._projects[project.id] = project
        return project.id

    def add_phase(self, phase: Phase) -> str:
        """Add or replace a phase."""
        with self._lock:
            self._phases[phase.id] = phase
        return phase.id

    def get_customer(self, customer_id: str) -> Customer | None:
        """Get a customer by ID."""
        with self._lock:
            return self._customers.get(customer_id)

    def get_project(self, project_id: str) -> Project | None:
        """Get a project by ID."""
        with self._lock:
            return self._projects.get(project_id)

    def get_phase(self, phase_id: str) -> Phase | None:
        """Get a phase by ID."""
        with self._lock:
            return self._phases.get(phase_id)

    def list_customers(self) -> list[Customer]:
        """List all customers."""
        with self._lock:
            return list(self._customers.values())

    def list_projects(self) -> list[Project]:
        """List all projects."""
        with self._lock:
            return list(self._projects.values())

    def list_phases(self) -> list[Phase]:
        """List all phases."""
        with self._lock:
            return list(self._phases.values())

    def add_snapshot(self, snapshot: Snapshot) -> str:
        """Record a snapshot.

        A second snapshot on the same date is kept as a distinct point.
        """
        with self._lock:
            history = self._snapshots.setdefault(snapshot.phase_id, [])
            if any(s.timestamp == snapshot.timestamp for s in history):
                logger.warning(
                    f"Phase {snapshot.phase_id} already has data for {snapshot.timestamp}; "
                    "keeping both points"
                )
            history.append(snapshot)
        return snapshot.id

    def list_snapshots(self, phase_id: str) -> list[Snapshot]:
        """Snapshots for a phase in insertion order."""
        with self._lock:
            return list(self._snapshots.get(phase_id, []))

    def delete_snapshots(self, phase_id: str, day: date) -> int:
        """Delete every snapshot of a phase on ``day``; returns how many went."""
        with self._lock:
            history = self._snapshots.get(phase_id, [])
            kept = [s for s in history if s.timestamp != day]
            removed = len(history) - len(kept)
            if removed:
                self._snapshots[phase_id] = kept
        if removed:
            logger.info(f"Deleted {removed} snapshot(s) for phase {phase_id} on {day}")
        else:
            logger.debug(f"No snapshot for phase {phase_id} on {day}; nothing deleted")
        return removed

    def add_bucket_snapshot(self, snapshot: BucketSnapshot) -> str:
        """Record a bucket snapshot."""
        with self._lock:
            self._bucket_snapshots.setdefault(snapshot.phase_id, []).append(snapshot)
        return snapshot.id

    def list_bucket_snapshots(self, phase_id: str) -> list[BucketSnapshot]:
        """Bucket snapshots for a phase in insertion order."""
        with self._lock:
            return list(self._bucket_snapshots.get(phase_id, []))

    def load_payload(self, payload: Mapping[str, Any]) -> None:
        """Populate the store from a raw dump of tracker records."""
        for customer in parse_many(Customer, payload.get("customers"), "customers"):
            self.add_customer(customer)
        for project in parse_many(Project, payload.get("projects"), "projects"):
            self.add_project(project)
        for phase in parse_many(Phase, payload.get("phases"), "phases"):
            self.add_phase(phase)
        for snapshot in parse_many(Snapshot, payload.get("snapshots"), "snapshots"):
            self.add_snapshot(snapshot)
        buckets = payload.get("bucketSnapshots", payload.get("bucket_snapshots"))
        for bucket in parse_many(BucketSnapshot, buckets, "bucket snapshots"):
            self.add_bucket_snapshot(bucket)
