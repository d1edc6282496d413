class SessionInvariantError(AssertionError):
    """A session invariant was broken. Indicates a defect, not a recoverable failure."""
