"""
Service error hierarchy.

Every failure a service reports is a SalesFlowError subclass carrying a
message and structured context. None of them is fatal: the unit of work is
rolled back and the store is left unchanged.
"""

from typing import Any


class SalesFlowError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context


class InvalidInputError(SalesFlowError):
    """Raised when a required field is missing or invalid."""


class NotFoundError(SalesFlowError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, entity_id: Any, **context: Any):
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=entity_id, **context)
        self.entity = entity
        self.entity_id = entity_id


class PermissionDeniedError(SalesFlowError):
    """Raised when the acting user's role does not permit an action."""


class ConflictError(SalesFlowError):
    """Raised when a uniqueness rule would be violated."""
