"""Custom exceptions for kg-transform-lib."""


class GraphError(Exception):
    """Base exception for graph transformation operations."""


class InvalidGraphError(GraphError):
    """Raised when graph input data fails validation."""
