"""
Calculator error types.
"""


class InvalidInputError(ValueError):
    """Caller supplied values a calculator cannot accept."""


class StatementLayoutError(RuntimeError):
    """A static row layout references rows it cannot evaluate."""
