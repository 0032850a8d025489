"""Dashboard aggregate models."""

from datetime import date

from pydantic import BaseModel, Field

from migtracker.models.progress import ProgressResult


class ProjectPhases(BaseModel):
    """A project node with its active phases."""

    id: str
    name: str
    phases: list[ProgressResult] = Field(default_factory=list)

    @property
    def average_progress(self) -> float:
        """Mean progress of phases that have data."""
        measured = [p.progress for p in self.phases if p.has_data]
        if not measured:
            return 0.0
        return sum(measured) / len(measured)


class CustomerPhases(BaseModel):
    """A customer node with its projects."""

    id: str
    name: str
    projects: list[ProjectPhases] = Field(default_factory=list)

    @property
    def phase_count(self) -> int:
        """Total phases across projects."""
        return sum(len(p.phases) for p in self.projects)


class RecentActivity(BaseModel):
    """One recently recorded snapshot, labelled with its phase."""

    snapshot_id: str
    phase_id: str
    phase_name: str
    timestamp: date
    source_objects: int = 0
    target_objects: int = 0


class DashboardStats(BaseModel):
    """System-wide statistics."""

    active_migrations: int = 0
    total_objects_migrated: int = 0
    average_progress: float = 0.0
    phases_needing_attention: int = 0


class Dashboard(BaseModel):
    """Everything the dashboard view renders."""

    stats: DashboardStats = Field(default_factory=DashboardStats)
    active_phases: list[ProgressResult] = Field(default_factory=list)
    phases_needing_attention: list[ProgressResult] = Field(default_factory=list)
    customer_tree: list[CustomerPhases] = Field(default_factory=list)
    recent_activity: list[RecentActivity] = Field(default_factory=list)
