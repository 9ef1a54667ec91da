class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "authentication_failed"


class AuthorizationError(DomainError):
    """Raised when a student lacks permission for an action."""

    code = "forbidden"


class ConflictError(DomainError):
    """Raised when a second open session would be created for a student."""

    code = "conflict"


class NotFoundError(DomainError):
    """Raised when a record does not exist or belongs to someone else."""

    code = "not_found"


class AlreadyClosedError(DomainError):
    """Raised when closing a record that already has a clock-out."""

    code = "already_closed"


class InvalidOrderError(ValidationError):
    """Raised when a clock-out is not strictly after the clock-in."""

    code = "invalid_order"


class OutOfWindowError(ValidationError):
    """Raised when a retroactive clock-out falls outside 20:00-05:00."""

    code = "out_of_window"


class StoreUnavailableError(DomainError):
    """Raised when the database cannot be reached or a query fails."""

    code = "store_unavailable"


class FutureClockOutError(ValidationError):
    """Raised when a retroactive clock-out is later than the current time."""

    code = "clock_out_in_future"
