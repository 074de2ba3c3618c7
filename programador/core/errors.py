"""
Scheduling error taxonomy.

Every rejected operation reports which rule failed and the dates or days that
triggered it, so the caller can show it to the operator without guessing.
"""

from typing import Any, Dict, List, Optional


class SchedulingError(Exception):
    """Base class for every error raised by the scheduling engine."""

    code = "scheduling_error"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.detail}


class ValidationError(SchedulingError):
    """Malformed or missing input, rejected before any computation."""

    code = "validation_error"


class ConflictError(SchedulingError):
    """A working day collides with a full-day blocking novedad."""

    code = "conflict"

    def __init__(self, message: str, bloqueos: List[Dict[str, Any]]):
        super().__init__(message, {"bloqueos": bloqueos})
        self.bloqueos = bloqueos


class CapacityError(SchedulingError):
    """A weekly or daily hour ceiling is exceeded."""

    code = "capacity_exceeded"

    def __init__(self, message: str, limit: float, value: float, rule: str):
        super().__init__(message, {"rule": rule, "limit": limit, "value": value})
        self.limit = limit
        self.value = value
        self.rule = rule


class CancelledByCaller(SchedulingError):
    """An interactive decision answered ``cancel``."""

    code = "cancelled"


class NotFoundError(SchedulingError):
    code = "not_found"


class ExternalIOError(SchedulingError):
    """Reading from or writing to a backing store failed."""

    code = "external_io_error"
