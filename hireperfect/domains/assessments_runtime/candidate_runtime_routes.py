"""Candidate attempt runtime: start, state, answer, proctor events, submit."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from ...components.assessments.service import (
    get_attempt_state,
    record_violation,
    start_attempt,
    submit_answer,
    submit_attempt,
)
from ...deps import get_current_candidate
from ...models.candidate import Candidate
from ...platform.database import get_db
from ...schemas.attempt import (
    AnswerRequest,
    AnswerResponse,
    AttemptStartRequest,
    AttemptStartResponse,
    AttemptStateResponse,
    ProctorEventRequest,
    ProctorEventResponse,
    SubmitResponse,
)

router = APIRouter()


@router.post("/start", response_model=AttemptStartResponse, status_code=status.HTTP_201_CREATED)
def start_attempt_endpoint(
    data: AttemptStartRequest,
    db: Session = Depends(get_db),
    candidate: Candidate = Depends(get_current_candidate),
):
    return start_attempt(db, candidate.id, data.exam_id, data.navigation_mode)


@router.get("/{attempt_id}", response_model=AttemptStateResponse)
def get_attempt_state_endpoint(
    attempt_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    candidate: Candidate = Depends(get_current_candidate),
):
    return get_attempt_state(db, attempt_id, candidate.id)


@router.post("/{attempt_id}/answer", response_model=AnswerResponse)
def submit_answer_endpoint(
    data: AnswerRequest,
    attempt_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    candidate: Candidate = Depends(get_current_candidate),
):
    """Save (or replace) the answer for one question. 409 once the attempt is closed."""
    return submit_answer(
        db,
        attempt_id,
        candidate.id,
        data.question_id,
        data.model_dump(exclude={"question_id"}),
    )


@router.post("/{attempt_id}/proctor-event", response_model=ProctorEventResponse)
def proctor_event_endpoint(
    data: ProctorEventRequest,
    attempt_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    candidate: Candidate = Depends(get_current_candidate),
):
    return record_violation(db, attempt_id, candidate.id, data.type)


@router.post("/{attempt_id}/submit", response_model=SubmitResponse)
def submit_attempt_endpoint(
    attempt_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    candidate: Candidate = Depends(get_current_candidate),
):
    """Score and close the attempt. Safe to retry: a closed attempt returns its frozen result."""
    return submit_attempt(db, attempt_id, candidate.id)
