from __future__ import annotations

from typing import Any


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class MissingFieldsError(ValidationError):
    """Required fields were left out of a submission.

    ``missing_fields`` holds the labels in the form's field order so the
    client can show them as-is.
    """

    default_message = "Missing required fields"

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__()
        self.missing_fields = missing_fields

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["missing_fields"] = self.missing_fields
        return payload


class Unauthorized(AppError):
    status_code = 401
    default_message = "Authentication required"


class NotFound(AppError):
    status_code = 404
    default_message = "Form not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict, please retry"


class DuplicateKeyError(Exception):
    """Raised by a store when a unique key is already taken."""

    def __init__(self, key: str, value: str) -> None:
        super().__init__(f"{key}={value}")
        self.key = key
        self.value = value
