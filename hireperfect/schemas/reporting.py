from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel

from .attempt import AttemptSummary


class ExamSummary(BaseModel):
    id: int
    title: str
    category: Optional[str] = None
    sub_category: Optional[str] = None
    duration_minutes: Optional[int] = None


class DashboardSummary(BaseModel):
    total_attempts: int
    average_score: float
    total_violations: int


class CandidateDashboardResponse(BaseModel):
    exams: List[ExamSummary]
    attempts: List[AttemptSummary]
    summary: DashboardSummary


class MonitoredCandidate(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class MonitoredExam(BaseModel):
    id: int
    title: Optional[str] = None


class LiveAttempt(BaseModel):
    attempt_id: int
    candidate: MonitoredCandidate
    exam: MonitoredExam
    warnings_count: int
    status: str
    started_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    past_deadline: bool


class MonitoringStats(BaseModel):
    attempts: int
    in_progress: int


class LiveMonitoringResponse(BaseModel):
    stats: MonitoringStats
    live_monitoring: List[LiveAttempt]


class AttemptListResponse(BaseModel):
    attempts: List[AttemptSummary]
