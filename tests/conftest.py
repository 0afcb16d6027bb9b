import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from hireperfect.platform.database import Base, get_db
from hireperfect.main import app
from hireperfect.platform.middleware import _rate_limit_store
from hireperfect.platform.security import create_access_token
from hireperfect.models.attempt import Attempt
from hireperfect.models.candidate import Candidate
from hireperfect.models.exam import Exam
from hireperfect.models.exam_access import ExamAccess

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def default_questions():
    """Two mcq, one scenario, one coding question."""
    return [
        {
            "id": "q1",
            "prompt": "Which HTTP status means Conflict?",
            "question_type": "mcq",
            "options": [{"id": "a", "text": "404"}, {"id": "b", "text": "409"}, {"id": "c", "text": "422"}],
            "correct_option_id": "b",
        },
        {
            "id": "q2",
            "prompt": "Which keyword defines a generator?",
            "question_type": "mcq",
            "options": [{"id": "a", "text": "yield"}, {"id": "b", "text": "return"}],
            "correct_option_id": "a",
        },
        {
            "id": "q3",
            "prompt": "A teammate misses a deadline that blocks you. What do you do?",
            "question_type": "scenario",
            "options": [],
            "expected_approach": "Talk to them first, then escalate with context.",
        },
        {
            "id": "q4",
            "prompt": "Reverse a string.",
            "question_type": "coding",
            "options": [],
            "coding_meta": {
                "language": "python",
                "starter_code": "def reverse(s):\n    pass\n",
                "expected_approach": "Slice with a negative step.",
            },
        },
    ]


def create_candidate(db, email=None, full_name="Test Candidate", role="candidate") -> Candidate:
    candidate = Candidate(
        email=email or f"candidate-{_unique_id()}@test.com",
        full_name=full_name,
        role=role,
    )
    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    return candidate


def create_exam(db, questions=None, duration_minutes=30, active=True, **overrides) -> Exam:
    exam = Exam(
        title=overrides.get("title", f"Exam-{_unique_id()}"),
        category=overrides.get("category", "IT"),
        sub_category=overrides.get("sub_category", "Python"),
        description=overrides.get("description", "A test exam"),
        duration_minutes=duration_minutes,
        supports_coding=True,
        active=active,
        questions=default_questions() if questions is None else questions,
    )
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam


def grant_access(db, candidate_id: int, exam_id: int) -> ExamAccess:
    access = ExamAccess(candidate_id=candidate_id, exam_id=exam_id)
    db.add(access)
    db.commit()
    return access


def token_headers(candidate_id: int) -> dict:
    token = create_access_token({"sub": str(candidate_id)})
    return {"Authorization": f"Bearer {token}"}


def setup_candidate_with_exam(db, **exam_overrides):
    """Candidate who has access to a fresh exam. Returns (candidate, exam, headers)."""
    candidate = create_candidate(db)
    exam = create_exam(db, **exam_overrides)
    grant_access(db, candidate.id, exam.id)
    return candidate, exam, token_headers(candidate.id)


def start_attempt_via_api(client, headers, exam_id, navigation_mode="free"):
    return client.post(
        "/api/v1/assessment/start",
        json={"exam_id": exam_id, "navigation_mode": navigation_mode},
        headers=headers,
    )


def expire_attempt(attempt_id: int, seconds_ago: int = 5) -> None:
    """Move an attempt's deadline into the past directly in the test DB."""
    db = TestingSessionLocal()
    try:
        attempt = db.query(Attempt).filter(Attempt.id == attempt_id).first()
        attempt.ends_at = attempt.started_at - timedelta(seconds=seconds_ago)
        db.commit()
    finally:
        db.close()
