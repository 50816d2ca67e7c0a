"""forgepolicy exception classes."""


class ForgePolicyError(Exception):
    """Base exception for all forgepolicy errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(ForgePolicyError):
    """Raised when settings are invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(ForgePolicyError):
    """Raised when a record fails validation.

    ``errors`` maps a field name to the list of messages for that field.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        summary = "; ".join(
            f"{field} {message}"
            for field, messages in errors.items()
            for message in messages
        )
        super().__init__("VALIDATION_ERROR", summary)


class NotFoundError(ForgePolicyError):
    """Raised when a record is not found."""

    pass


class PersistenceError(ForgePolicyError):
    """Raised when a record cannot be created or saved."""

    pass


class InvalidTransitionError(ForgePolicyError):
    """Raised when an ownership transfer is rejected."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_TRANSITION", message)


class ThrottledError(ForgePolicyError):
    """Raised when too many records were created in a short time."""

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__("THROTTLED", message)
        self.retry_after = retry_after


class SignoffError(ForgePolicyError):
    """Raised when the merge request signoff site refuses a request."""

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code
