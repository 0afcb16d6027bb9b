"""Attempt lifecycle error taxonomy.

Each error maps to one HTTP status; ``main.py`` renders them as ``{"detail": ...}``.
None of them is retried internally.
"""

from __future__ import annotations

from typing import Any


class AttemptError(RuntimeError):
    """Base class for errors raised by the attempt state machine."""

    status_code = 400

    def __init__(self, detail: Any):
        super().__init__(detail if isinstance(detail, str) else repr(detail))
        self.detail = detail


class NotFoundError(AttemptError):
    """Unknown or inaccessible exam or attempt, always scoped to the requesting candidate."""

    status_code = 404


class ForbiddenError(AttemptError):
    """The exam exists but the candidate holds no access to it."""

    status_code = 403


class ValidationFailedError(AttemptError):
    status_code = 422


class ConflictError(AttemptError):
    """The attempt is no longer ``in_progress``, or concurrent writers kept winning the race."""

    status_code = 409


class StoreUnavailableError(RuntimeError):
    """The attempt store failed to commit; not part of the state machine's taxonomy."""
