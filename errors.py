"""Typed failures raised by the service layer.

Routers never build HTTP errors for these themselves; ``main.py`` maps each
class to a status code through a single exception handler.
"""


class ServiceError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ServiceError):
    status_code = 404
    code = "not_found"


class ValidationError(ServiceError):
    status_code = 422
    code = "validation_error"


class InvalidState(ServiceError):
    """Operation not allowed in the entity's current state (e.g. a decided transfer)."""

    status_code = 409
    code = "invalid_state"


class DuplicateKey(ServiceError):
    status_code = 409
    code = "duplicate_key"


class UpstreamError(ServiceError):
    status_code = 502
    code = "upstream_error"

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class AuthenticationError(ServiceError):
    status_code = 401
    code = "authentication_error"


class PermissionDenied(ServiceError):
    status_code = 403
    code = "permission_denied"
