"""
Domain errors for the measurement core
Every failed operation surfaces one of these kinds; none of them is retried internally
"""

from typing import Optional


class MeasurementError(Exception):
    """Base class for all measurement domain errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(MeasurementError, ValueError):
    """Input rejected before any state was touched"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CapacityExceededError(MeasurementError):
    """A bounded index is full; the whole transaction was abandoned"""

    status_code = 409

    def __init__(self, owner_id: int, capacity: int, index_name: str = "index"):
        super().__init__(
            f"{index_name} for pond {owner_id} is full (capacity {capacity})"
        )
        self.owner_id = owner_id
        self.capacity = capacity
        self.index_name = index_name


class MeasurementNotFoundError(MeasurementError):
    """Lookup of an unknown measurement id"""

    status_code = 404

    def __init__(self, measurement_id: int):
        super().__init__(f"Measurement {measurement_id} not found")
        self.measurement_id = measurement_id


class PersistenceError(MeasurementError):
    """The durable journal refused a write; in-memory state was left untouched"""

    status_code = 503


class AuthorizationError(MeasurementError):
    """Caller is not allowed to perform an administrative operation"""

    status_code = 403
