"""Customer, project and phase rollups for the dashboard."""

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from statistics import fmean
from typing import Any

from migtracker.models.dashboard import (
    CustomerPhases,
    Dashboard,
    DashboardStats,
    ProjectPhases,
    RecentActivity,
)
from migtracker.models.hierarchy import Customer, Phase, Project
from migtracker.models.progress import ProgressResult
from migtracker.models.snapshot import Snapshot
from migtracker.services.boundary import parse_many, parse_snapshot_index
from migtracker.services.progress import chronological_key, compute_progress

logger = logging.getLogger(__name__)

# Phases below this progress percentage need attention.
ATTENTION_THRESHOLD = 50.0


def is_active(phase: Phase, project: Project | None, customer: Customer | None) -> bool:
    """A phase is active unless it, its project or its customer is switched off."""
    if not phase.is_active:
        return False
    if project is not None and project.active is False:
        return False
    if customer is not None and customer.active is False:
        return False
    return True


def compute_stats(active: Sequence[ProgressResult]) -> DashboardStats:
    """System-wide statistics over active phase progress."""
    measured = [p for p in active if p.has_data]
    return DashboardStats(
        active_migrations=len(measured),
        total_objects_migrated=sum(p.target_objects for p in active),
        average_progress=fmean(p.progress for p in measured) if measured else 0.0,
        phases_needing_attention=len(needing_attention(active)),
    )


def needing_attention(active: Sequence[ProgressResult]) -> list[ProgressResult]:
    """Measured phases below the attention threshold, worst first."""
    lagging = [
        p
        for p in active
        if p.has_data and not p.indeterminate and p.progress < ATTENTION_THRESHOLD
    ]
    return sorted(lagging, key=lambda p: p.progress)


def build_customer_tree(
    placements: Sequence[tuple[Customer, Project, ProgressResult]],
) -> list[CustomerPhases]:
    """Group placed phases by customer then project, ordered by name."""
    customers: dict[str, CustomerPhases] = {}
    projects: dict[tuple[str, str], ProjectPhases] = {}

    ordered = sorted(
        placements,
        key=lambda t: (t[0].name.lower(), t[1].name.lower(), t[2].phase_name.lower()),
    )
    for customer, project, progress in ordered:
        customer_node = customers.get(customer.id)
        if customer_node is None:
            customer_node = CustomerPhases(id=customer.id, name=customer.name)
            customers[customer.id] = customer_node

        project_node = projects.get((customer.id, project.id))
        if project_node is None:
            project_node = ProjectPhases(id=project.id, name=project.name)
            projects[(customer.id, project.id)] = project_node
            customer_node.projects.append(project_node)

        project_node.phases.append(progress)

    return list(customers.values())


def recent_activity(
    phases: Sequence[Phase],
    history: Mapping[str, Sequence[Snapshot]],
    limit: int | None = None,
) -> list[RecentActivity]:
    """Most recent snapshots across all known phases, newest first.

    Snapshots of phases missing from ``phases`` have no name to show and are
    skipped.
    """
    names = {phase.id: phase.name for phase in phases}
    recorded = [
        (phase_id, snapshot)
        for phase_id, snapshots in history.items()
        if phase_id in names
        for snapshot in snapshots
    ]
    recorded.sort(key=lambda item: chronological_key(item[1]), reverse=True)
    if limit is not None:
        recorded = recorded[:limit]
    return [
        RecentActivity(
            snapshot_id=s.id,
            phase_id=phase_id,
            phase_name=names[phase_id],
            timestamp=s.timestamp,
            source_objects=s.source_objects,
            target_objects=s.target_objects,
        )
        for phase_id, s in recorded
    ]


def build_dashboard(
    customers: Any,
    projects: Any,
    phases: Any,
    snapshots_by_phase: Any,
    active_phase_limit: int | None = None,
    recent_activity_limit: int | None = None,
) -> Dashboard:
    """Build the dashboard from raw hierarchy records and snapshot histories.

    Inputs go through the normalization boundary first, so a malformed
    customer, project, phase or history drops out on its own instead of
    failing the whole aggregation.

    Active phases are listed newest first by creation date, undated phases
    last, so a capped listing keeps the most recent ones.
    """
    customers_by_id = {c.id: c for c in parse_many(Customer, customers, "customers")}
    projects_by_id = {p.id: p for p in parse_many(Project, projects, "projects")}
    phase_list = parse_many(Phase, phases, "phases")
    phase_list.sort(key=lambda p: p.created_at or date.min, reverse=True)
    history = parse_snapshot_index(snapshots_by_phase)

    active: list[ProgressResult] = []
    placements: list[tuple[Customer, Project, ProgressResult]] = []

    for phase in phase_list:
        project = projects_by_id.get(phase.project_id)
        customer = customers_by_id.get(project.customer_id) if project else None
        if not is_active(phase, project, customer):
            continue

        progress = compute_progress(
            phase,
            history.get(phase.id, []),
            customer_name=customer.name if customer else None,
            project_name=project.name if project else None,
        )
        active.append(progress)

        if project is None or customer is None:
            logger.warning(
                f"Phase {phase.id} has no known project or customer; "
                "left out of the customer tree"
            )
            continue
        placements.append((customer, project, progress))

    listed = active if active_phase_limit is None else active[:active_phase_limit]
    attention = needing_attention(active)

    return Dashboard(
        stats=compute_stats(active),
        active_phases=listed,
        phases_needing_attention=attention,
        customer_tree=build_customer_tree(placements),
        recent_activity=recent_activity(phase_list, history, recent_activity_limit),
    )
