"""Attempt store: owner-scoped lookups, atomic read-modify-write, serialization."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ...models.attempt import Attempt
from ...platform.config import settings
from ...platform.request_context import attempt_context
from .errors import AttemptError, ConflictError, NotFoundError, StoreUnavailableError

logger = logging.getLogger("hireperfect.attempts")

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return datetime as timezone-aware UTC for comparison."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def isoformat(dt: datetime | None) -> str | None:
    dt = ensure_utc(dt)
    return dt.isoformat() if dt else None


def is_past_deadline(attempt: Attempt, now: datetime | None = None) -> bool:
    return (now or utcnow()) > ensure_utc(attempt.ends_at)


def time_remaining_seconds(attempt: Attempt, now: datetime | None = None) -> int:
    if attempt.is_terminal:
        return 0
    remaining = (ensure_utc(attempt.ends_at) - (now or utcnow())).total_seconds()
    return max(0, int(remaining))


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

def get_attempt_for_candidate(db: Session, attempt_id: int, candidate_id: int) -> Attempt:
    """Owner-scoped lookup; another candidate's attempt reads as missing."""
    attempt = db.query(Attempt).filter(
        Attempt.id == attempt_id,
        Attempt.candidate_id == candidate_id,
    ).first()
    if not attempt:
        raise NotFoundError("Attempt not found")
    return attempt


def _load_for_update(db: Session, attempt_id: int, candidate_id: int) -> Attempt:
    attempt = (
        db.query(Attempt)
        .filter(Attempt.id == attempt_id, Attempt.candidate_id == candidate_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not attempt:
        raise NotFoundError("Attempt not found")
    return attempt


# ---------------------------------------------------------------------------
# Atomic read-modify-write
# ---------------------------------------------------------------------------

class TransitionThenConflict(Exception):
    """Raised by a mutation that changed the attempt and must still fail the request.

    The store commits the change first and raises ``error`` afterwards.
    """

    def __init__(self, error: AttemptError):
        super().__init__(str(error))
        self.error = error


def mutate_attempt(
    db: Session,
    attempt_id: int,
    candidate_id: int,
    mutation: Callable[[Attempt, datetime], T],
) -> T:
    """Run ``mutation`` against a locked, freshly read attempt and commit it.

    The commit is an UPDATE conditional on the row version that was read, so a
    write racing with another request on the same attempt either wins outright
    or raises StaleDataError; the loser is replayed against the winner's state.
    """
    with attempt_context(attempt_id):
        return _commit_with_retries(db, attempt_id, candidate_id, mutation)


def _commit_with_retries(
    db: Session,
    attempt_id: int,
    candidate_id: int,
    mutation: Callable[[Attempt, datetime], T],
) -> T:
    retries = max(0, int(settings.ATTEMPT_WRITE_RETRIES))
    for round_no in range(retries + 1):
        attempt = _load_for_update(db, attempt_id, candidate_id)
        now = utcnow()
        deferred: Optional[AttemptError] = None
        try:
            result = mutation(attempt, now)
        except TransitionThenConflict as exc:
            deferred = exc.error
            result = None
        except AttemptError:
            db.rollback()
            raise

        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(
                "Concurrent write lost on attempt %s (round %d); replaying",
                attempt_id,
                round_no + 1,
            )
            continue
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to persist attempt %s", attempt_id)
            raise StoreUnavailableError("Attempt store unavailable") from exc

        if deferred is not None:
            raise deferred
        return result

    raise ConflictError("Attempt is being modified concurrently; fetch fresh state")


# ---------------------------------------------------------------------------
# JSON column helpers (columns are reassigned, never mutated in place)
# ---------------------------------------------------------------------------

def upsert_answer(attempt: Attempt, answer: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Replace the answer for the same question id, or append a new one."""
    answers = [dict(a) for a in (attempt.answers or [])]
    for index, existing in enumerate(answers):
        if str(existing.get("question_id")) == str(answer["question_id"]):
            answers[index] = dict(answer)
            break
    else:
        answers.append(dict(answer))
    attempt.answers = answers
    return answers


def append_violation(attempt: Attempt, record: Dict[str, Any]) -> List[Dict[str, Any]]:
    violations = list(attempt.violations or [])
    violations.append(dict(record))
    attempt.violations = violations
    return violations


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def attempt_summary(attempt: Attempt, exam_title: str | None = None) -> Dict[str, Any]:
    """Attempt projection for dashboards and live monitoring."""
    return {
        "id": attempt.id,
        "exam_id": attempt.exam_id,
        "exam_title": exam_title,
        "status": attempt.status.value if hasattr(attempt.status, "value") else attempt.status,
        "score": attempt.score or 0.0,
        "warnings_count": attempt.warnings_count or 0,
        "violations": list(attempt.violations or []),
        "started_at": isoformat(attempt.started_at),
        "ends_at": isoformat(attempt.ends_at),
        "submitted_at": isoformat(attempt.submitted_at),
    }
