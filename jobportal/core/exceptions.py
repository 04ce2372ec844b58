"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to and a short tag, so the
FastAPI exception handler in main.py can render every failure the same way:

    {"detail": "<human readable message>", "error": "<tag>"}
"""


class PortalError(Exception):
    status_code = 500
    error = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PortalError):
    """Referenced job, application or profile does not exist."""
    status_code = 404
    error = "not_found"


class ForbiddenError(PortalError):
    """The acting identity does not own the resource."""
    status_code = 403
    error = "forbidden"


class ConflictError(PortalError):
    """Duplicate record, or a mutation against a terminal/existing state."""
    status_code = 409
    error = "conflict"


class ValidationError(PortalError):
    """Malformed status value or missing required field."""
    status_code = 422
    error = "validation"
