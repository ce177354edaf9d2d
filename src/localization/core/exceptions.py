"""Errors raised by the services and rendered by the API.

Services raise these directly and stay free of HTTP. Each error carries a
machine-readable `error_code` derived from the resource it concerns (for
example LANGUAGE_NOT_FOUND or TRANSLATION_EXISTS), the HTTP status the API
answers with, and a `details` dict. The handler in main.py turns any of them
into `{"error_code", "message", "details"}`.

Failures inside detached auto-translation jobs never take this path; they
are logged at the task boundary (see core.tasks).
"""

from typing import Any


class AppException(Exception):
    """Base of every error the API renders as JSON."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Response body for this error."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


def _resource_code(resource: str) -> str:
    return resource.upper().replace(" ", "_")


class AuthorizationError(AppException):
    """The injected authorization check refused the request."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, "FORBIDDEN", 403)


class ResourceNotFoundError(AppException):
    """An id, code or slug that resolves to nothing."""

    def __init__(self, resource: str, identifier: str | None = None):
        msg = f"{resource} not found"
        details: dict[str, Any] = {"resource": resource}
        if identifier:
            msg = f"{resource} not found: {identifier}"
            details["id"] = identifier
        super().__init__(msg, f"{_resource_code(resource)}_NOT_FOUND", 404, details)


class ResourceExistsError(AppException):
    """A write would duplicate a unique value (language code, slug, translation key)."""

    def __init__(self, resource: str, field: str | None = None, value: str | None = None):
        msg = f"{resource} already exists"
        details: dict[str, Any] = {"resource": resource}
        if field:
            msg = f"{resource} with this {field} already exists"
            details["field"] = field
        if value:
            msg = f"{msg}: {value}"
            details["value"] = value
        super().__init__(msg, f"{_resource_code(resource)}_EXISTS", 409, details)


class InvariantViolationError(AppException):
    """The write would break a registry invariant (e.g. removing the last language)."""

    def __init__(self, message: str, invariant: str | None = None):
        super().__init__(
            message,
            "INVARIANT_VIOLATION",
            409,
            {"invariant": invariant} if invariant else {},
        )


class ValidationError(AppException):
    """A value passed schema validation but breaks a domain rule (blank key, category cycle)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message,
            "VALIDATION_ERROR",
            422,
            {"field": field} if field else {},
        )


class ExternalServiceError(AppException):
    """External service is unavailable or failed."""

    def __init__(self, service: str, message: str | None = None):
        msg = f"{service} is unavailable"
        if message:
            msg = f"{service}: {message}"
        super().__init__(msg, "EXTERNAL_SERVICE_ERROR", 503, {"service": service})


class TranslatorUnavailableError(ExternalServiceError):
    """Machine translation provider is not configured or cannot be reached."""

    def __init__(self, message: str = "not configured"):
        super().__init__("Microsoft Translator", message)
