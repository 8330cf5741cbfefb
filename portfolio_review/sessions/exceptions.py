class SessionError(Exception):
    """Base exception for all session-related errors."""


class SessionValidationError(SessionError):
    """Raised when request input is missing or malformed."""


class SessionStateError(SessionValidationError):
    """Raised when a session is not in the status an operation requires."""


class SessionNotFoundError(SessionError):
    """Raised when a session id does not exist in the store."""


class DuplicateSessionError(SessionError):
    """Raised when creating a session whose id already exists."""
