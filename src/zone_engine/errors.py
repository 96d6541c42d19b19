"""Exception types raised by the zone assignment engine."""

from __future__ import annotations


class CatalogLoadError(RuntimeError):
    """The geography catalog source is unreachable, malformed or inconsistent."""


class NotInitializedError(RuntimeError):
    """A zone assignment operation was called before the catalog finished loading."""


class WizardTransitionError(ValueError):
    """The requested wizard action is not permitted in the current state."""

    def __init__(self, message: str, *, state: str | None = None) -> None:
        super().__init__(message)
        self.state = state
