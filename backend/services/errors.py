class ProductivityError(Exception):
    """Base class for errors raised by the productivity engine."""


class NotFound(ProductivityError):
    """Raised when a habit, task or review is absent or owned by someone else."""


class Conflict(ProductivityError):
    """Raised when a write collides with a uniqueness constraint."""


class InvalidState(ProductivityError, ValueError):
    """Raised when day/time input cannot be normalized or violates a precondition."""
