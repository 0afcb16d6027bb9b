from .attempt import (
    AnswerRequest,
    AnswerResponse,
    AttemptStartRequest,
    AttemptStartResponse,
    AttemptStateResponse,
    AttemptSummary,
    CandidateQuestion,
    ProctorEventRequest,
    ProctorEventResponse,
    SubmitResponse,
)
from .reporting import AttemptListResponse, CandidateDashboardResponse, LiveMonitoringResponse

__all__ = [
    "AttemptListResponse",
    "CandidateDashboardResponse",
    "LiveMonitoringResponse",
    "AnswerRequest",
    "AnswerResponse",
    "AttemptStartRequest",
    "AttemptStartResponse",
    "AttemptStateResponse",
    "AttemptSummary",
    "CandidateQuestion",
    "ProctorEventRequest",
    "ProctorEventResponse",
    "SubmitResponse",
]
