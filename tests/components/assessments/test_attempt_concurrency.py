"""Racing writes on one attempt resolve as if applied one after another.

Each test interleaves a second session's committed write between the first
session's read and its commit, which is the window the versioned UPDATE guards.
"""

import pytest
from sqlalchemy.exc import OperationalError

from hireperfect.components.assessments import repository, service
from hireperfect.components.assessments.errors import ConflictError, StoreUnavailableError
from hireperfect.components.proctoring.policy import ViolationType
from hireperfect.models.attempt import Attempt, AttemptStatus
from hireperfect.platform.config import settings
from tests.conftest import TestingSessionLocal, create_candidate, create_exam, default_questions, grant_access


@pytest.fixture
def other_session(db):
    session = TestingSessionLocal()
    yield session
    session.close()


def _started(db):
    candidate = create_candidate(db)
    exam = create_exam(db)
    grant_access(db, candidate.id, exam.id)
    attempt_id = service.start_attempt(db, candidate.id, exam.id)["attempt_id"]
    return candidate, attempt_id


def _interleaved(inner, competing_write, times=1):
    """Wrap ``inner`` so ``competing_write`` commits before the first ``times`` rounds write."""
    calls = {"n": 0}

    def mutation(attempt, now):
        calls["n"] += 1
        if calls["n"] <= times:
            competing_write()
        return inner(attempt, now)

    mutation.calls = calls
    return mutation


def _reload(db, attempt_id) -> Attempt:
    db.expire_all()
    return db.query(Attempt).filter(Attempt.id == attempt_id).one()


def test_racing_final_warnings_terminate_once(db, other_session):
    candidate, attempt_id = _started(db)
    limit = settings.MAX_PROCTORING_WARNINGS
    for _ in range(limit - 1):
        service.record_violation(db, attempt_id, candidate.id, "face_missing")

    mutation = _interleaved(
        service._violation_mutation(ViolationType.HEAD_MOVEMENT),
        lambda: service.record_violation(other_session, attempt_id, candidate.id, "eye_movement"),
    )
    with pytest.raises(ConflictError):
        repository.mutate_attempt(db, attempt_id, candidate.id, mutation)

    assert mutation.calls["n"] == 2
    attempt = _reload(db, attempt_id)
    assert attempt.status == AttemptStatus.TERMINATED
    assert attempt.warnings_count == limit
    assert len(attempt.violations) == limit
    assert attempt.violations[-1]["type"] == "eye_movement"


def test_submit_racing_termination_returns_terminated_result(db, other_session):
    candidate, attempt_id = _started(db)
    service.submit_answer(db, attempt_id, candidate.id, "q1", {"selected_option_id": "b"})

    mutation = _interleaved(
        service._submit_mutation(default_questions()),
        lambda: service.record_violation(other_session, attempt_id, candidate.id, "tab_switch"),
    )
    result = repository.mutate_attempt(db, attempt_id, candidate.id, mutation)

    assert result["already_submitted"] is True
    assert result["status"] == "terminated"
    assert result["score"] == 0.0
    attempt = _reload(db, attempt_id)
    assert attempt.status == AttemptStatus.TERMINATED
    assert attempt.score == 0.0


def test_racing_answers_both_survive(db, other_session):
    candidate, attempt_id = _started(db)
    record = service.normalize_answer_payload("q1", {"selected_option_id": "b"})
    mutation = _interleaved(
        service._answer_mutation(record),
        lambda: service.submit_answer(
            other_session, attempt_id, candidate.id, "q3", {"text_answer": "Raise it at standup."}
        ),
    )
    result = repository.mutate_attempt(db, attempt_id, candidate.id, mutation)

    assert result == {"message": "Answer saved", "question_id": "q1"}
    answers = _reload(db, attempt_id).answers
    assert sorted(a["question_id"] for a in answers) == ["q1", "q3"]


def test_retries_exhausted_conflicts_without_partial_write(db, other_session, monkeypatch):
    monkeypatch.setattr(settings, "ATTEMPT_WRITE_RETRIES", 1)
    candidate, attempt_id = _started(db)
    record = service.normalize_answer_payload("q1", {"selected_option_id": "b"})
    mutation = _interleaved(
        service._answer_mutation(record),
        lambda: service.record_violation(other_session, attempt_id, candidate.id, "face_missing"),
        times=2,
    )

    with pytest.raises(ConflictError) as excinfo:
        repository.mutate_attempt(db, attempt_id, candidate.id, mutation)
    assert "concurrently" in excinfo.value.detail

    attempt = _reload(db, attempt_id)
    assert attempt.answers == []
    assert attempt.warnings_count == 2
    assert attempt.status == AttemptStatus.IN_PROGRESS


def test_store_failure_surfaces_as_unavailable(db, monkeypatch):
    candidate, attempt_id = _started(db)

    def broken_commit():
        raise OperationalError("UPDATE attempts", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(StoreUnavailableError):
        service.record_violation(db, attempt_id, candidate.id, "face_missing")
    monkeypatch.undo()

    attempt = _reload(db, attempt_id)
    assert attempt.violations == []
    assert attempt.warnings_count == 0
