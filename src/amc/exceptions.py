"""Domain exceptions raised by the service layer."""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception class for all domain-specific exceptions."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DomainError):
    """A required field is missing or empty."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """A referenced resource does not exist."""

    code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} {resource_id} not found")


class TrackNotFound(NotFoundError):
    def __init__(self, track_id: int) -> None:
        super().__init__("Track", track_id)


class TrackItemNotFound(NotFoundError):
    def __init__(self, track_item_id: int) -> None:
        super().__init__("Track item", track_item_id)


class DependencyError(DomainError):
    """The backing store is unreachable or not provisioned."""

    code = "DEPENDENCY_ERROR"
