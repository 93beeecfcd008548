"""
Service Errors

Every business-rule failure raised by a service or engine derives from
PortalError. The FastAPI exception handler in main.py turns them into

    {"detail": {"error": <error_code>, "message": <message>}}

with the carried status code.
"""


class PortalError(Exception):
    """Base exception for portal service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(PortalError):
    """Malformed or missing input."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class AuthError(PortalError):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Invalid credentials.", error_code: str = "INVALID_CREDENTIALS"):
        super().__init__(message=message, error_code=error_code, status_code=401)


class ForbiddenError(PortalError):
    """Authenticated, but the role or ownership check failed."""

    def __init__(self, message: str = "Access denied.", error_code: str = "FORBIDDEN"):
        super().__init__(message=message, error_code=error_code, status_code=403)


class NotFoundError(PortalError):
    """Referenced resource does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ConflictError(PortalError):
    """Uniqueness violation (duplicate application, duplicate name)."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class DependencyError(PortalError):
    """Deletion blocked by existing child records."""

    def __init__(self, message: str, error_code: str = "HAS_DEPENDENTS"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class OfferNotExpiredError(PortalError):
    """Archive requested before the offer deadline passed."""

    def __init__(self, message: str = "This offer has not expired yet."):
        super().__init__(message=message, error_code="OFFER_NOT_EXPIRED", status_code=400)


class ArchiveWindowClosedError(PortalError):
    """Archive requested more than ARCHIVE_WINDOW_DAYS after the deadline."""

    def __init__(
        self,
        message: str = "This offer expired more than 2 weeks ago and can no longer be archived.",
    ):
        super().__init__(message=message, error_code="ARCHIVE_WINDOW_CLOSED", status_code=400)


class TransientIOError(PortalError):
    """
    A file or network operation failed in a way that may succeed later.

    Raised inside batches (document bundling, email fan-out) where it is
    logged and skipped rather than aborting the whole operation.
    """

    def __init__(self, message: str, error_code: str = "TRANSIENT_IO_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=503)


class InternalError(PortalError):
    """Unexpected failure. Details go to the log, never to the client."""

    def __init__(self, message: str = "An unexpected error occurred. Please try again later."):
        super().__init__(message=message, error_code="INTERNAL_ERROR", status_code=500)
