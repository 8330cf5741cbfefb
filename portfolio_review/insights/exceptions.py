class InsightValidationError(Exception):
    """Raised when structured interpretation output violates Insight invariants."""
