"""
Domain errors.

Services raise these; `core/error_handlers.py` turns them into JSON
responses. Each error carries:
- message: human readable text
- code: stable machine readable code (e.g. "VALIDATION_ERROR")
- status_code: HTTP status used by the handler
"""

from __future__ import annotations


class BiomasError(Exception):
    """Base class for every error the API reports on purpose."""

    status_code: int = 500

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or "BIOMAS_ERROR"
        super().__init__(self.message)

    def details(self) -> dict | None:
        return None


class ValidationError(BiomasError):
    """Missing or malformed input."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field

    def details(self) -> dict | None:
        return {"field": self.field} if self.field else None


class AuthorizationError(BiomasError):
    """The acting user does not own the resource."""

    status_code = 403

    def __init__(self, message: str = "Not allowed to modify this resource."):
        super().__init__(message, "FORBIDDEN")


class NotFoundError(BiomasError):
    """A referenced entity does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: object | None = None):
        msg = f"{resource} not found." if identifier is None else f"{resource} '{identifier}' not found."
        super().__init__(msg, "NOT_FOUND")
        self.resource = resource
        self.identifier = None if identifier is None else str(identifier)

    def details(self) -> dict | None:
        details = {"resource": self.resource}
        if self.identifier is not None:
            details["identifier"] = self.identifier
        return details


class ConflictError(BiomasError):
    """A unique value is already taken."""

    status_code = 409

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "CONFLICT")
        self.field = field

    def details(self) -> dict | None:
        return {"field": self.field} if self.field else None


class UploadTooLargeError(BiomasError):
    status_code = 413

    def __init__(self, max_bytes: int):
        super().__init__(f"File too large. Max is {max_bytes} bytes.", "UPLOAD_TOO_LARGE")
        self.max_bytes = max_bytes

    def details(self) -> dict | None:
        return {"max_bytes": self.max_bytes}


class InternalError(BiomasError):
    """Unexpected failure (database down, bug). Message is redacted outside development."""

    status_code = 500

    def __init__(self, message: str = "Internal server error."):
        super().__init__(message, "INTERNAL_ERROR")
