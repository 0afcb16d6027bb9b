"""Attempt lifecycle: start, answer, proctoring events, submit.

Every mutating operation runs through ``mutate_attempt`` so the
``in_progress`` check and the write commit as one unit.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Callable, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.attempt import Attempt, AttemptStatus, NavigationMode
from ...platform.config import settings
from ..catalog.service import (
    candidate_has_access,
    catalog_summary,
    exam_questions,
    get_active_exam,
    get_exam,
    ordered_question_views,
    question_ids,
)
from ..proctoring.policy import ViolationType, classify, remaining_warnings
from ..scoring.service import score_attempt
from .errors import ConflictError, ForbiddenError, NotFoundError, StoreUnavailableError, ValidationFailedError
from .repository import (
    TransitionThenConflict,
    append_violation,
    get_attempt_for_candidate,
    is_past_deadline,
    isoformat,
    mutate_attempt,
    time_remaining_seconds,
    upsert_answer,
    utcnow,
)

logger = logging.getLogger(__name__)

ANSWER_FIELDS = ("selected_option_id", "text_answer", "code_answer")

_shuffler = random.SystemRandom()


def _status_value(attempt: Attempt) -> str:
    return attempt.status.value if hasattr(attempt.status, "value") else str(attempt.status)


def _require_in_progress(attempt: Attempt) -> None:
    if attempt.is_terminal:
        raise ConflictError("Attempt already closed")


def _close(attempt: Attempt, status: AttemptStatus, now: datetime) -> None:
    attempt.status = status
    attempt.submitted_at = now


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------

def start_attempt(
    db: Session,
    candidate_id: int,
    exam_id: int,
    navigation_mode: str | NavigationMode = NavigationMode.FREE,
) -> Dict[str, Any]:
    """Create an attempt with a freshly shuffled question order and a fixed deadline."""
    exam = get_active_exam(db, exam_id)
    if not candidate_has_access(db, candidate_id, exam.id):
        raise ForbiddenError("Purchase/select this exam first")

    mode = NavigationMode(navigation_mode or NavigationMode.FREE)
    order = question_ids(exam)
    _shuffler.shuffle(order)

    now = utcnow()
    duration = exam.duration_minutes or settings.DEFAULT_EXAM_DURATION_MINUTES
    attempt = Attempt(
        candidate_id=candidate_id,
        exam_id=exam.id,
        status=AttemptStatus.IN_PROGRESS,
        started_at=now,
        ends_at=now + timedelta(minutes=duration),
        warnings_count=0,
        question_order=order,
        answers=[],
        violations=[],
        score=0.0,
        total_questions=len(order),
        navigation_mode=mode.value,
    )
    try:
        db.add(attempt)
        db.commit()
        db.refresh(attempt)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create attempt for candidate %s exam %s", candidate_id, exam.id)
        raise StoreUnavailableError("Attempt store unavailable") from exc

    logger.info(
        "Attempt started candidate=%s exam=%s questions=%d ends_at=%s",
        candidate_id,
        exam.id,
        len(order),
        isoformat(attempt.ends_at),
        extra={"attempt_id": attempt.id},
    )
    return {
        "attempt_id": attempt.id,
        "exam": {**catalog_summary(exam), "duration_minutes": duration, "navigation_mode": mode.value},
        "navigation_mode": mode.value,
        "started_at": isoformat(attempt.started_at),
        "ends_at": isoformat(attempt.ends_at),
        "questions": ordered_question_views(exam, order),
    }


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

def get_attempt_state(db: Session, attempt_id: int, candidate_id: int) -> Dict[str, Any]:
    attempt = get_attempt_for_candidate(db, attempt_id, candidate_id)
    exam = get_exam(db, attempt.exam_id)
    questions = ordered_question_views(exam, list(attempt.question_order or [])) if exam else []
    return {
        "attempt_id": attempt.id,
        "status": _status_value(attempt),
        "ends_at": isoformat(attempt.ends_at),
        "time_remaining_seconds": time_remaining_seconds(attempt),
        "warnings_count": attempt.warnings_count or 0,
        "navigation_mode": attempt.navigation_mode,
        "questions": questions,
        "answers": [dict(a) for a in (attempt.answers or [])],
    }


# ---------------------------------------------------------------------------
# Answer
# ---------------------------------------------------------------------------

def normalize_answer_payload(question_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Build the stored answer record; exactly one answer field must be populated."""
    populated = [field for field in ANSWER_FIELDS if payload.get(field) is not None]
    if len(populated) != 1:
        raise ValidationFailedError(
            "Provide exactly one of selected_option_id, text_answer, code_answer"
        )
    record = {"question_id": str(question_id)}
    for field in ANSWER_FIELDS:
        record[field] = payload.get(field)
    return record


def _answer_mutation(record: Dict[str, Any]) -> Callable[[Attempt, datetime], Dict[str, Any]]:
    def apply(attempt: Attempt, now: datetime) -> Dict[str, Any]:
        _require_in_progress(attempt)
        if is_past_deadline(attempt, now):
            # Score stays at 0 here; a later submit returns the closed result unchanged.
            _close(attempt, AttemptStatus.AUTO_SUBMITTED, now)
            logger.info("Attempt auto-submitted on late answer", extra={"attempt_id": attempt.id})
            raise TransitionThenConflict(ConflictError("Time is over, attempt auto-submitted"))
        upsert_answer(attempt, record)
        return {"message": "Answer saved", "question_id": record["question_id"]}

    return apply


def submit_answer(
    db: Session,
    attempt_id: int,
    candidate_id: int,
    question_id: str,
    payload: Dict[str, Any],
) -> Dict[str, Any]:
    record = normalize_answer_payload(question_id, payload)
    return mutate_attempt(db, attempt_id, candidate_id, _answer_mutation(record))


# ---------------------------------------------------------------------------
# Proctoring events
# ---------------------------------------------------------------------------

def _violation_mutation(violation_type: ViolationType) -> Callable[[Attempt, datetime], Dict[str, Any]]:
    classification = classify(violation_type)
    limit = settings.MAX_PROCTORING_WARNINGS

    def apply(attempt: Attempt, now: datetime) -> Dict[str, Any]:
        _require_in_progress(attempt)
        append_violation(attempt, {
            "type": violation_type.value,
            "severity": classification.severity.value,
            "message": classification.message,
            "timestamp": now.isoformat(),
        })

        if classification.is_critical:
            _close(attempt, AttemptStatus.TERMINATED, now)
            logger.info(
                "Attempt terminated by critical violation type=%s",
                violation_type.value,
                extra={"attempt_id": attempt.id},
            )
            return {
                "message": "Assessment terminated",
                "terminated": True,
                "warning": False,
                "warnings_count": attempt.warnings_count or 0,
                "remaining_warnings": remaining_warnings(attempt.warnings_count or 0, limit),
            }

        attempt.warnings_count = (attempt.warnings_count or 0) + 1
        if attempt.warnings_count >= limit:
            _close(attempt, AttemptStatus.TERMINATED, now)
            logger.info(
                "Attempt terminated after %d warnings",
                attempt.warnings_count,
                extra={"attempt_id": attempt.id},
            )
            return {
                "message": f"Assessment terminated after {limit} warnings",
                "terminated": True,
                "warning": True,
                "warnings_count": attempt.warnings_count,
                "remaining_warnings": 0,
            }

        return {
            "message": f"Warning {attempt.warnings_count}/{limit}",
            "terminated": False,
            "warning": True,
            "warnings_count": attempt.warnings_count,
            "remaining_warnings": remaining_warnings(attempt.warnings_count, limit),
        }

    return apply


def record_violation(
    db: Session,
    attempt_id: int,
    candidate_id: int,
    violation_type: ViolationType | str,
) -> Dict[str, Any]:
    try:
        vtype = ViolationType(violation_type)
    except ValueError:
        raise ValidationFailedError(f"Unknown violation type: {violation_type}")
    return mutate_attempt(db, attempt_id, candidate_id, _violation_mutation(vtype))


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------

def _submission_result(attempt: Attempt, already_submitted: bool) -> Dict[str, Any]:
    return {
        "message": "Attempt already submitted" if already_submitted else "Assessment submitted",
        "already_submitted": already_submitted,
        "status": _status_value(attempt),
        "score": attempt.score or 0.0,
        "warnings_count": attempt.warnings_count or 0,
        "violations": list(attempt.violations or []),
        "submitted_at": isoformat(attempt.submitted_at),
    }


def _submit_mutation(questions) -> Callable[[Attempt, datetime], Dict[str, Any]]:
    def apply(attempt: Attempt, now: datetime) -> Dict[str, Any]:
        if attempt.is_terminal:
            return _submission_result(attempt, already_submitted=True)
        attempt.score = score_attempt(questions, attempt.answers or [])
        status = AttemptStatus.AUTO_SUBMITTED if is_past_deadline(attempt, now) else AttemptStatus.COMPLETED
        _close(attempt, status, now)
        logger.info(
            "Attempt submitted status=%s score=%.2f",
            status.value,
            attempt.score,
            extra={"attempt_id": attempt.id},
        )
        return _submission_result(attempt, already_submitted=False)

    return apply


def submit_attempt(db: Session, attempt_id: int, candidate_id: int) -> Dict[str, Any]:
    """Score and close an attempt; repeated calls return the frozen result."""
    attempt = get_attempt_for_candidate(db, attempt_id, candidate_id)
    if attempt.is_terminal:
        return _submission_result(attempt, already_submitted=True)
    exam = get_exam(db, attempt.exam_id)
    if not exam:
        raise NotFoundError("Exam not found")
    return mutate_attempt(db, attempt_id, candidate_id, _submit_mutation(exam_questions(exam)))
