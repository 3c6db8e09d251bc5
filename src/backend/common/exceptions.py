"""
Exception hierarchy for the records sync backend.

Each error carries the HTTP status it maps to so the router layer can turn
it into a JSON `{error, errorData?}` body without re-deciding the status.
"""

from typing import Any


class RecordsSyncError(Exception):
    """Base exception for all records sync errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnauthorizedError(RecordsSyncError):
    """Raised when the request carries no customer identity."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class RecordValidationError(RecordsSyncError):
    """Raised when a required request field is missing or malformed."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class NotFoundError(RecordsSyncError):
    """Base class for lookups that came back empty."""

    status_code = 404


class ConnectionNotFoundError(NotFoundError):
    """Raised when the caller has no connection for an integration key."""

    def __init__(self, integration_key: str) -> None:
        super().__init__(
            f"No connection found for integration: {integration_key}",
            {"integration_key": integration_key},
        )
        self.integration_key = integration_key


class RecordNotFoundError(NotFoundError):
    """Raised when no local record exists for (id, customer_id)."""

    def __init__(self, record_id: str) -> None:
        super().__init__("Record not found", {"record_id": record_id})
        self.record_id = record_id


class ActionNotConfiguredError(NotFoundError):
    """Raised when a record action key is missing from RECORD_ACTIONS."""

    def __init__(self, action_key: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Action not found in configuration: {action_key}",
            {"action_key": action_key},
        )
        self.action_key = action_key


class SchemaNotFoundError(NotFoundError):
    """Raised when no default schema is registered for a record type."""

    def __init__(self, record_type: str) -> None:
        super().__init__(f"No schema found for record type: {record_type}")
        self.record_type = record_type


class RemoteActionError(RecordsSyncError):
    """Raised when an integration action invocation fails.

    `error_data` holds the raw platform payload when it carried a vendor
    fault, so clients can inspect the original structure.
    """

    status_code = 500

    def __init__(self, message: str, error_data: Any = None) -> None:
        super().__init__(message)
        self.error_data = error_data


class InternalError(RecordsSyncError):
    """Raised for failures that have no more specific category."""

    status_code = 500
