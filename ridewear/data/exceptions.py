"""
ridewear/data/exceptions.py
───────────────────────────
Errors raised at the service-event boundary. Prediction code never raises these.
"""


class RideWearError(Exception):
    """Base class for errors reported to callers of the mutation API."""


class ComponentNotFoundError(RideWearError, KeyError):
    """Raised when a component id does not exist in the store."""

    def __init__(self, component_id: str):
        self.component_id = component_id
        super().__init__(f"Component not found: {component_id}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidServiceEventError(RideWearError, ValueError):
    """Raised for future-dated service logs, unparsable dates or out-of-range snoozes."""


class ConcurrentModificationError(RideWearError):
    """Raised when a compare-and-swap write keeps losing to concurrent writers."""
