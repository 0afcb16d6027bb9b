from datetime import datetime
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field, model_validator

from ..components.proctoring.policy import ViolationType


class AttemptStartRequest(BaseModel):
    exam_id: int = Field(gt=0)
    navigation_mode: Literal["free", "sequential"] = "free"


class CodingMeta(BaseModel):
    language: str = ""
    starter_code: str = ""


class QuestionOption(BaseModel):
    id: str
    text: str


class CandidateQuestion(BaseModel):
    id: str
    prompt: str
    question_type: Literal["mcq", "scenario", "coding"]
    options: List[QuestionOption] = []
    coding_meta: Optional[CodingMeta] = None


class ExamHeader(BaseModel):
    id: int
    title: str
    category: Optional[str] = None
    sub_category: Optional[str] = None
    duration_minutes: int
    navigation_mode: str


class AttemptStartResponse(BaseModel):
    attempt_id: int
    exam: ExamHeader
    navigation_mode: str
    started_at: datetime
    ends_at: datetime
    questions: List[CandidateQuestion]


class AnswerRecord(BaseModel):
    question_id: str
    selected_option_id: Optional[str] = None
    text_answer: Optional[str] = None
    code_answer: Optional[str] = None


class AttemptStateResponse(BaseModel):
    attempt_id: int
    status: str
    ends_at: datetime
    time_remaining_seconds: int
    warnings_count: int
    navigation_mode: str
    questions: List[CandidateQuestion]
    answers: List[AnswerRecord]


class AnswerRequest(BaseModel):
    question_id: str = Field(min_length=1, max_length=64)
    selected_option_id: Optional[str] = Field(default=None, max_length=64)
    text_answer: Optional[str] = Field(default=None, max_length=20000)
    code_answer: Optional[str] = Field(default=None, max_length=100000)

    @model_validator(mode="after")
    def _exactly_one_answer(self):
        populated = [
            v for v in (self.selected_option_id, self.text_answer, self.code_answer) if v is not None
        ]
        if len(populated) != 1:
            raise ValueError("Provide exactly one of selected_option_id, text_answer, code_answer")
        return self


class AnswerResponse(BaseModel):
    message: str
    question_id: str


class ProctorEventRequest(BaseModel):
    type: ViolationType


class ProctorEventResponse(BaseModel):
    message: str
    terminated: bool
    warning: bool
    warnings_count: int
    remaining_warnings: int


class ViolationRecord(BaseModel):
    type: str
    severity: Literal["warning", "critical"]
    message: str
    timestamp: datetime


class SubmitResponse(BaseModel):
    message: str
    already_submitted: bool
    status: str
    score: float
    warnings_count: int
    violations: List[ViolationRecord]
    submitted_at: Optional[datetime] = None


class AttemptSummary(BaseModel):
    id: int
    exam_id: int
    exam_title: Optional[str] = None
    status: str
    score: float
    warnings_count: int
    violations: List[Dict[str, Any]] = []
    started_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    candidate_id: Optional[int] = None
