"""Deterministic attempt scoring.

Each question contributes points according to its type; the total is
normalized by the number of questions in the exam (not the number answered)
and scaled to 100, rounded to two decimals.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from .rules import MAX_SCORE, QUESTION_POINTS, SCORE_DECIMALS, coding_min_chars, scenario_min_chars


def _trimmed_length(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    return len(value.strip())


def question_points(question: Mapping[str, Any], answer: Mapping[str, Any] | None) -> float:
    """Points a single answer earns against its catalog question."""
    if not answer:
        return 0.0
    qtype = question.get("question_type")
    if qtype == "mcq":
        selected = answer.get("selected_option_id")
        correct = question.get("correct_option_id")
        if selected is not None and correct is not None and selected == correct:
            return QUESTION_POINTS["mcq"]
        return 0.0
    if qtype == "scenario":
        if _trimmed_length(answer.get("text_answer")) > scenario_min_chars():
            return QUESTION_POINTS["scenario"]
        return 0.0
    if qtype == "coding":
        if _trimmed_length(answer.get("code_answer")) > coding_min_chars():
            return QUESTION_POINTS["coding"]
        return 0.0
    return 0.0


def _answers_by_question(answers: Iterable[Mapping[str, Any]] | None) -> Dict[str, Mapping[str, Any]]:
    indexed: Dict[str, Mapping[str, Any]] = {}
    for answer in answers or []:
        if not isinstance(answer, Mapping):
            continue
        qid = answer.get("question_id")
        if qid is None:
            continue
        indexed[str(qid)] = answer
    return indexed


def score_breakdown(
    questions: List[Mapping[str, Any]],
    answers: Iterable[Mapping[str, Any]] | None,
) -> List[Dict[str, Any]]:
    """Per-question contribution, in catalog order."""
    indexed = _answers_by_question(answers)
    rows = []
    for question in questions or []:
        qid = str(question.get("id"))
        answer = indexed.get(qid)
        rows.append({
            "question_id": qid,
            "question_type": question.get("question_type"),
            "answered": answer is not None,
            "points": question_points(question, answer),
        })
    return rows


def score_attempt(
    questions: List[Mapping[str, Any]],
    answers: Iterable[Mapping[str, Any]] | None,
) -> float:
    """Score in [0, 100]. Answers for question ids missing from the exam are ignored."""
    total_points = sum(row["points"] for row in score_breakdown(questions, answers))
    question_count = max(len(questions or []), 1)
    return round(MAX_SCORE * total_points / question_count, SCORE_DECIMALS)
