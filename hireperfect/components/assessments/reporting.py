"""Read-only attempt projections for the candidate dashboard and admin monitoring."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from ...models.attempt import Attempt, AttemptStatus
from ..catalog.service import accessible_exams
from .repository import attempt_summary, is_past_deadline, isoformat, utcnow


def candidate_dashboard(db: Session, candidate_id: int) -> Dict[str, Any]:
    exams = accessible_exams(db, candidate_id)
    attempts = (
        db.query(Attempt)
        .options(joinedload(Attempt.exam))
        .filter(Attempt.candidate_id == candidate_id)
        .order_by(Attempt.started_at.desc(), Attempt.id.desc())
        .all()
    )
    total = len(attempts)
    average = round(sum(a.score or 0.0 for a in attempts) / total, 2) if total else 0.0
    return {
        "exams": [
            {
                "id": exam.id,
                "title": exam.title,
                "category": exam.category,
                "sub_category": exam.sub_category,
                "duration_minutes": exam.duration_minutes,
            }
            for exam in exams
        ],
        "attempts": [attempt_summary(a, a.exam.title if a.exam else None) for a in attempts],
        "summary": {
            "total_attempts": total,
            "average_score": average,
            "total_violations": sum(len(a.violations or []) for a in attempts),
        },
    }


def live_monitoring(db: Session) -> Dict[str, Any]:
    """In-progress attempts, flagging those already past their deadline.

    Deadlines are enforced lazily, so a row can stay ``in_progress`` after
    ``ends_at`` until the candidate next answers or submits.
    """
    now = utcnow()
    open_attempts = (
        db.query(Attempt)
        .options(joinedload(Attempt.candidate), joinedload(Attempt.exam))
        .filter(Attempt.status == AttemptStatus.IN_PROGRESS)
        .order_by(Attempt.started_at.asc())
        .all()
    )
    return {
        "stats": {
            "attempts": db.query(Attempt).count(),
            "in_progress": len(open_attempts),
        },
        "live_monitoring": [
            {
                "attempt_id": a.id,
                "candidate": {
                    "id": a.candidate_id,
                    "name": a.candidate.full_name if a.candidate else None,
                    "email": a.candidate.email if a.candidate else None,
                },
                "exam": {"id": a.exam_id, "title": a.exam.title if a.exam else None},
                "warnings_count": a.warnings_count or 0,
                "status": a.status.value,
                "started_at": isoformat(a.started_at),
                "ends_at": isoformat(a.ends_at),
                "past_deadline": is_past_deadline(a, now),
            }
            for a in open_attempts
        ],
    }


def list_attempts(db: Session, status: Optional[AttemptStatus] = None) -> List[Dict[str, Any]]:
    query = db.query(Attempt).options(joinedload(Attempt.exam))
    if status is not None:
        query = query.filter(Attempt.status == status)
    attempts = query.order_by(Attempt.started_at.desc(), Attempt.id.desc()).all()
    rows = []
    for a in attempts:
        row = attempt_summary(a, a.exam.title if a.exam else None)
        row["candidate_id"] = a.candidate_id
        rows.append(row)
    return rows
