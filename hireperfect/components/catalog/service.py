"""Exam catalog lookups consumed by the attempt lifecycle.

The catalog is owned elsewhere (admin CRUD, purchase flow); this module only
reads it and never mutates exam rows.
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ...models.exam import Exam
from ...models.exam_access import ExamAccess
from ..assessments.errors import NotFoundError


def get_exam(db: Session, exam_id: int) -> Exam | None:
    return db.query(Exam).filter(Exam.id == exam_id).first()


def get_active_exam(db: Session, exam_id: int) -> Exam:
    """Return an active exam or raise NotFoundError."""
    exam = db.query(Exam).filter(Exam.id == exam_id, Exam.active.is_(True)).first()
    if not exam:
        raise NotFoundError("Exam not found")
    return exam


def candidate_has_access(db: Session, candidate_id: int, exam_id: int) -> bool:
    return (
        db.query(ExamAccess.id)
        .filter(ExamAccess.candidate_id == candidate_id, ExamAccess.exam_id == exam_id)
        .first()
        is not None
    )


def accessible_exams(db: Session, candidate_id: int) -> List[Exam]:
    return (
        db.query(Exam)
        .join(ExamAccess, ExamAccess.exam_id == Exam.id)
        .filter(ExamAccess.candidate_id == candidate_id)
        .order_by(Exam.title)
        .all()
    )


def exam_questions(exam: Exam) -> List[Dict[str, Any]]:
    return [q for q in (exam.questions or []) if isinstance(q, dict)]


def question_ids(exam: Exam) -> List[str]:
    return [str(q.get("id")) for q in exam_questions(exam)]


def question_index(exam: Exam) -> Dict[str, Dict[str, Any]]:
    return {str(q.get("id")): q for q in exam_questions(exam)}


def candidate_question_view(question: Dict[str, Any]) -> Dict[str, Any]:
    """Candidate-safe question payload: no correct option, no grader hints."""
    qtype = question.get("question_type")
    view: Dict[str, Any] = {
        "id": str(question.get("id")),
        "prompt": question.get("prompt", ""),
        "question_type": qtype,
        "options": [
            {"id": opt.get("id"), "text": opt.get("text")}
            for opt in (question.get("options") or [])
            if isinstance(opt, dict)
        ],
        "coding_meta": None,
    }
    if qtype == "coding":
        meta = question.get("coding_meta") or {}
        view["coding_meta"] = {
            "language": meta.get("language") or "",
            "starter_code": meta.get("starter_code") or "",
        }
    return view


def ordered_question_views(exam: Exam, order: List[str]) -> List[Dict[str, Any]]:
    """Candidate views in attempt order; ids no longer in the exam are skipped."""
    index = question_index(exam)
    return [candidate_question_view(index[qid]) for qid in order if qid in index]


def catalog_summary(exam: Exam) -> Dict[str, Any]:
    return {
        "id": exam.id,
        "title": exam.title,
        "category": exam.category,
        "sub_category": exam.sub_category,
        "duration_minutes": exam.duration_minutes,
    }
