"""Attempt summaries for the candidate dashboard and admin live monitoring."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...components.assessments.reporting import candidate_dashboard, list_attempts, live_monitoring
from ...deps import get_current_admin, get_current_candidate
from ...models.attempt import AttemptStatus
from ...models.candidate import Candidate
from ...platform.database import get_db
from ...schemas.reporting import AttemptListResponse, CandidateDashboardResponse, LiveMonitoringResponse

candidate_router = APIRouter(prefix="/candidate", tags=["Candidate"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"])


@candidate_router.get("/dashboard", response_model=CandidateDashboardResponse)
def get_candidate_dashboard(
    db: Session = Depends(get_db),
    candidate: Candidate = Depends(get_current_candidate),
):
    return candidate_dashboard(db, candidate.id)


@admin_router.get("/overview", response_model=LiveMonitoringResponse)
def get_admin_overview(
    db: Session = Depends(get_db),
    _admin: Candidate = Depends(get_current_admin),
):
    return live_monitoring(db)


@admin_router.get("/attempts", response_model=AttemptListResponse)
def get_admin_attempts(
    status: Optional[AttemptStatus] = Query(default=None),
    db: Session = Depends(get_db),
    _admin: Candidate = Depends(get_current_admin),
):
    return {"attempts": list_attempts(db, status)}
