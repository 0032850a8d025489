"""Exceptions raised by the migration tracker."""


class TrackerError(Exception):
    """Base class for tracker errors."""


class NotFoundError(TrackerError, KeyError):
    """A referenced customer, project or phase does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier

    def __str__(self) -> str:
        return str(self.args[0])
