"""
Service-level errors, mapped to HTTP responses by the application
"""
from fastapi import status


class MicrofeedError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(MicrofeedError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class AuthenticationError(MicrofeedError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class AuthorizationError(MicrofeedError):
    """Opaque on purpose: the detail never says which check failed"""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Operation not permitted"

    def __init__(self, detail: str = None):
        super().__init__(self.default_detail)


class ConstraintViolation(MicrofeedError):
    """A uniqueness, check or foreign-key violation reported by the store"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Constraint violation"


class InvalidUpload(MicrofeedError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid upload"
