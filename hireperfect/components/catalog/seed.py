"""Default exam catalog and admin account seeding.

Both operations are idempotent: exams are matched by title and the admin
account by email, so re-running against a populated database is a no-op.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ...models.candidate import Candidate
from ...models.exam import Exam
from ..scoring.rules import QUESTION_TYPES

logger = logging.getLogger(__name__)

_CODING_APPROACH = "Use a clean and optimized approach with proper edge-case handling."


def _mcq(qid: str, prompt: str, options: List[str], correct: str) -> Dict[str, Any]:
    return {
        "id": qid,
        "prompt": prompt,
        "question_type": "mcq",
        "options": [{"id": letter, "text": text} for letter, text in zip("abcd", options)],
        "correct_option_id": correct,
    }


def _scenario(qid: str, prompt: str) -> Dict[str, Any]:
    return {"id": qid, "prompt": prompt, "question_type": "scenario", "options": []}


def _coding(qid: str, prompt: str, language: str, starter_code: str) -> Dict[str, Any]:
    return {
        "id": qid,
        "prompt": prompt,
        "question_type": "coding",
        "options": [],
        "coding_meta": {
            "language": language,
            "starter_code": starter_code,
            "expected_approach": _CODING_APPROACH,
        },
    }


DEFAULT_EXAMS: List[Dict[str, Any]] = [
    {
        "title": "Aptitude Fundamentals",
        "category": "Soft Skills",
        "sub_category": "Aptitude",
        "description": "Numerical and logical aptitude assessment.",
        "supports_coding": False,
        "questions": [
            _mcq("apt-1", "If 15% of x is 45, what is x?", ["300", "150", "45", "225"], "a"),
            _mcq("apt-2", "Find the next number: 2, 6, 12, 20, ?", ["28", "30", "36", "40"], "b"),
            _scenario("apt-3", "You have three urgent tasks due at the same time. Explain your prioritization approach."),
        ],
    },
    {
        "title": "Verbal Reasoning Essentials",
        "category": "Soft Skills",
        "sub_category": "Verbal Reasoning",
        "description": "Tests language clarity and reasoning.",
        "supports_coding": False,
        "questions": [
            _mcq("verbal-1", "Choose the antonym of 'concise'.", ["brief", "verbose", "clear", "exact"], "b"),
            _scenario("verbal-2", "A client misunderstood your email. Draft a concise corrective response."),
            _mcq(
                "verbal-3",
                "Pick the best sentence:",
                [
                    "Each of the players have arrived.",
                    "Each of the players has arrived.",
                    "Each of the player has arrived.",
                    "Each players has arrived.",
                ],
                "b",
            ),
        ],
    },
    {
        "title": "Java Developer Assessment",
        "category": "IT",
        "sub_category": "Java",
        "description": "Core Java + problem solving.",
        "supports_coding": True,
        "questions": [
            _mcq("java-1", "Which collection does not allow duplicates?", ["List", "Set", "Queue", "ArrayList"], "b"),
            _coding(
                "java-2",
                "Write a Java method to reverse a string without using built-in reverse.",
                "java",
                "public String reverse(String s) {\n  // TODO\n}",
            ),
            _scenario("java-3", "How would you improve performance in a Java service with high GC pauses?"),
        ],
    },
    {
        "title": "Python Developer Assessment",
        "category": "IT",
        "sub_category": "Python",
        "description": "Python fundamentals + coding.",
        "supports_coding": True,
        "questions": [
            _mcq(
                "python-1",
                "What is the output type of `{'a': 1}.keys()` in Python 3?",
                ["list", "tuple", "dict_keys", "set"],
                "c",
            ),
            _coding(
                "python-2",
                "Write a Python function to return the first non-repeating character.",
                "python",
                "def first_non_repeating(s: str):\n    # TODO\n    pass",
            ),
            _scenario("python-3", "Explain how you would structure exception handling in a REST API."),
        ],
    },
    {
        "title": "JavaScript Developer Assessment",
        "category": "IT",
        "sub_category": "JavaScript",
        "description": "JavaScript knowledge + coding.",
        "supports_coding": True,
        "questions": [
            _mcq(
                "js-1",
                "Which method creates a new array with all elements passing a test?",
                ["map", "filter", "reduce", "forEach"],
                "b",
            ),
            _coding(
                "js-2",
                "Implement debounce(fn, wait) in JavaScript.",
                "javascript",
                "function debounce(fn, wait) {\n  // TODO\n}",
            ),
            _scenario("js-3", "A page is slow due to heavy re-renders. How do you diagnose and fix it?"),
        ],
    },
    {
        "title": "MBA Finance Assessment",
        "category": "MBA",
        "sub_category": "Finance",
        "description": "Financial analysis fundamentals.",
        "supports_coding": False,
        "questions": [
            _mcq(
                "fin-1",
                "NPV stands for:",
                ["Net Present Value", "New Profit Value", "Net Profit Variable", "None"],
                "a",
            ),
            _scenario("fin-2", "A project has high ROI but high volatility. Explain your recommendation."),
            _mcq(
                "fin-3",
                "Which ratio measures short-term liquidity?",
                ["Current ratio", "Debt-to-equity", "ROE", "P/E"],
                "a",
            ),
        ],
    },
    {
        "title": "MBA Analytics Assessment",
        "category": "MBA",
        "sub_category": "Analytics",
        "description": "Business analytics reasoning.",
        "supports_coding": False,
        "questions": [
            _mcq(
                "analytics-1",
                "Which chart is best for trend over time?",
                ["Pie chart", "Line chart", "Scatter plot", "Histogram"],
                "b",
            ),
            _scenario("analytics-2", "Sales dropped 15% quarter-over-quarter. How do you investigate root causes?"),
            _mcq(
                "analytics-3",
                "A/B testing primarily helps in:",
                ["Causal inference", "Data cleaning", "ETL", "None"],
                "a",
            ),
        ],
    },
]


def validate_questions(questions: List[Dict[str, Any]]) -> None:
    """Raise ValueError for duplicate ids, unknown types, or an mcq answer key outside its options."""
    seen = set()
    for question in questions:
        qid = str(question.get("id"))
        if qid in seen:
            raise ValueError(f"Duplicate question id {qid!r}")
        seen.add(qid)
        qtype = question.get("question_type")
        if qtype not in QUESTION_TYPES:
            raise ValueError(f"Question {qid!r} has unknown type {qtype!r}")
        if qtype == "mcq":
            option_ids = {opt.get("id") for opt in question.get("options") or []}
            if question.get("correct_option_id") not in option_ids:
                raise ValueError(f"Question {qid!r} answer key is not one of its options")


def seed_default_exams(db: Session, duration_minutes: int = 30) -> int:
    """Insert any default exam whose title is not already in the catalog. Returns the count inserted."""
    existing = {title for (title,) in db.query(Exam.title).all()}
    inserted = 0
    for exam_def in DEFAULT_EXAMS:
        if exam_def["title"] in existing:
            continue
        validate_questions(exam_def["questions"])
        db.add(Exam(duration_minutes=duration_minutes, active=True, **exam_def))
        inserted += 1
    db.commit()
    logger.info("Seeded %d default exam(s), %d already present", inserted, len(DEFAULT_EXAMS) - inserted)
    return inserted


def seed_admin(db: Session, email: Optional[str], name: str) -> Optional[Candidate]:
    """Create the admin account, or promote an existing account with that email."""
    email = (email or "").strip().lower()
    if not email:
        return None
    account = db.query(Candidate).filter(Candidate.email == email).first()
    if account is None:
        account = Candidate(email=email, full_name=name.strip(), role="admin")
        db.add(account)
        logger.info("Seeded admin account %s", email)
    elif account.role != "admin":
        account.role = "admin"
        logger.info("Promoted existing account %s to admin", email)
    db.commit()
    db.refresh(account)
    return account
