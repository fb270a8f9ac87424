class ShapeError(ValueError):
    """Raised when an operation's shape precondition is violated."""
