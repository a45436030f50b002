"""Application exception hierarchy."""

# Default user-facing messages
_DEFAULT_USER_MSG = "Internal server error"
_ACCESS_DENIED_MSG = "Workspace access denied"
_DEPENDENCY_MSG = "Could not verify workspace access"


class AppError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str = "Internal error",
        user_message: str = _DEFAULT_USER_MSG,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message


class ConfigurationError(AppError):
    """Raised when required configuration (e.g. the encryption key) is missing or malformed."""

    def __init__(
        self,
        message: str = "Configuration error",
        user_message: str = _DEFAULT_USER_MSG,
    ) -> None:
        super().__init__(message=message, user_message=user_message)


class AuthenticationError(AppError):
    """Raised when an encrypted blob fails tag verification (wrong key, tampering, truncation)."""

    def __init__(
        self,
        message: str = "Ciphertext failed authentication",
        user_message: str = _DEFAULT_USER_MSG,
    ) -> None:
        super().__init__(message=message, user_message=user_message)


class AccessDeniedError(AppError):
    """Raised when a user may not act within a workspace. Safe to show to the user (403)."""

    def __init__(self, message: str = _ACCESS_DENIED_MSG, user_message: str | None = None) -> None:
        super().__init__(message=message, user_message=user_message or message)


class DependencyError(AppError):
    """Raised when a backing store fails. Never means "denied"; maps to 5xx."""

    def __init__(
        self,
        message: str = "Dependency failure",
        user_message: str = _DEPENDENCY_MSG,
    ) -> None:
        super().__init__(message=message, user_message=user_message)
