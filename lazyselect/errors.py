"""Error taxonomy shared by the selection engine.

Only ``ProviderFailure`` is meant to reach the host application.
Cancellations and stale addresses are absorbed by the engine itself.
"""

from __future__ import annotations


class SelectError(Exception):
    """Base class for selection-engine errors."""


class TaskCancelled(SelectError):
    """Raised into a cancellable task's result when it was superseded."""

    def __init__(self, message: str = "Task cancelled", cancelled: bool = True) -> None:
        super().__init__(message)
        self.cancelled = cancelled


class ProviderFailure(SelectError):
    """An options provider or creation handler rejected for a real reason."""

    def __init__(self, query: str, original: BaseException) -> None:
        super().__init__(f"options provider failed for {query!r}: {original}")
        self.query = query
        self.original = original


class InvalidAddressError(SelectError, LookupError):
    """Address does not resolve against the current option tree."""

    def __init__(self, address: tuple[int, ...]) -> None:
        super().__init__(f"address {list(address)} does not resolve")
        self.address = address


def is_cancelled(exc: BaseException) -> bool:
    """Return whether ``exc`` is the cancellation signal of a superseded task."""
    return isinstance(exc, TaskCancelled) and exc.cancelled
