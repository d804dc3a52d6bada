"""Domain exceptions for the buyer leads service."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single validation failure tied to a field path."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class RowError:
    """Validation failures for one row of a batch (row numbers start at 1)."""

    row: int
    errors: tuple[FieldError, ...]

    def messages(self) -> list[str]:
        """Render the row's errors as "field: message" strings."""
        return [str(error) for error in self.errors]


class BuyerLeadsError(Exception):
    """Base exception for the buyer leads service."""

    pass


class ValidationError(BuyerLeadsError):
    """Raised when a single record fails field or cross-field validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors))


class BatchValidationError(BuyerLeadsError):
    """Raised when one or more rows of an import batch fail validation."""

    def __init__(self, row_errors: list[RowError]) -> None:
        self.row_errors = list(row_errors)
        super().__init__(f"{len(self.row_errors)} row(s) failed validation")


class BatchTooLargeError(BuyerLeadsError):
    """Raised when an import batch exceeds the row ceiling."""

    def __init__(self, received: int, limit: int) -> None:
        self.received = received
        self.limit = limit
        super().__init__(f"CSV file exceeds maximum of {limit} rows")


class NotFoundError(BuyerLeadsError):
    """Raised when a buyer lead does not exist."""

    pass


class AuthenticationError(BuyerLeadsError):
    """Raised when no actor identity accompanies a request that needs one."""

    pass


class AuthorizationError(BuyerLeadsError):
    """Raised when the actor may not perform the operation on the lead."""

    pass


class RateLimitExceeded(BuyerLeadsError):
    """Raised when a rate limiter denies the request."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__("Rate limit exceeded.")


class PersistenceError(BuyerLeadsError):
    """Raised when the store fails to apply or commit an atomic unit."""

    pass
