class InterpretationError(Exception):
    """Raised when portfolio interpretation fails."""


class InterpretationNetworkError(InterpretationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
