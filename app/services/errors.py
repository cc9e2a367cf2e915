"""Domain errors raised by the task access service."""
from typing import Any, Dict, Optional


class TaskServiceError(Exception):
    """Base exception for recoverable, user-facing task errors."""
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class TaskValidationError(TaskServiceError):
    """Input rejected: blank title, over-length field or unknown enum value."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__("VALIDATION_ERROR", message, {"field": field} if field else None)
        self.field = field


class InvalidOwnerError(TaskServiceError):
    """The requesting user does not exist, so it cannot own a task."""
    def __init__(self, user_id: str):
        super().__init__("INVALID_OWNER", "Invalid user")
        self.user_id = user_id


class AuthCallbackError(Exception):
    """Base exception for failures while completing an OAuth login."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class TokenExchangeError(AuthCallbackError):
    """The identity provider did not return usable tokens for the code."""


class InvalidIdTokenError(AuthCallbackError):
    """The id_token could not be read or lacks a user id or email."""
