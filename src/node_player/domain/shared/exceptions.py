"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when a caller passes a malformed argument."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class ConfigurationError(DomainError):
    """Raised when an operation is attempted without its prerequisite."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")
        self.setting = setting


class RangeError(DomainError):
    """Raised when a value falls outside a domain-specific bound."""

    def __init__(self, message: str, value: object = None, limit: object = None) -> None:
        super().__init__(message, code="RANGE_ERROR")
        self.value = value
        self.limit = limit


class StateError(DomainError):
    """Raised when an operation is invalid in the player's current state."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in the current state"
        super().__init__(msg, code="STATE_ERROR")
        self.operation = operation


class NodeRequestError(DomainError):
    """Raised when a request to a remote node fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, code="NODE_REQUEST_ERROR")
        self.status_code = status_code


class TrackResolutionError(DomainError):
    """Raised when an unresolved track cannot be matched to a playable one."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"No playable track found for '{query}'"
        super().__init__(msg, code="TRACK_RESOLUTION_ERROR")
        self.query = query
