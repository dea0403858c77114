class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist."""


class RemoteFunctionError(DomainError):
    """Raised when a hosted function call fails or reports `success: false`."""

    def __init__(self, function_name: str, message: str):
        super().__init__(message)
        self.function_name = function_name


class UnexpectedContentTypeError(RemoteFunctionError):
    """Raised when a hosted function answers with something other than JSON."""

    def __init__(self, function_name: str, content_type: str | None):
        self.content_type = content_type or "unknown"
        super().__init__(
            function_name,
            f"A(z) {function_name} funkcióhívás váratlan tartalmat adott vissza: {self.content_type}",
        )


class StorageError(DomainError):
    """Raised when a file cannot be stored or read."""
