"""Exceptions raised by repository implementations."""


class PersistenceError(Exception):
    """A store operation failed. Any partial transaction has been rolled back."""
