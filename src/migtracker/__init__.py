"""Progress and forecast engine for object-storage migration tracking."""

__version__ = "0.1.0"
