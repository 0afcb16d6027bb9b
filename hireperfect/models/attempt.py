from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Float, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..platform.database import Base
import enum


class AttemptStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    TERMINATED = "terminated"
    AUTO_SUBMITTED = "auto_submitted"


TERMINAL_STATUSES = frozenset(
    {AttemptStatus.COMPLETED, AttemptStatus.TERMINATED, AttemptStatus.AUTO_SUBMITTED}
)


class NavigationMode(str, enum.Enum):
    FREE = "free"
    SEQUENTIAL = "sequential"


class Attempt(Base):
    __tablename__ = "attempts"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    status = Column(
        Enum(AttemptStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=AttemptStatus.IN_PROGRESS,
        index=True,
    )
    started_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    submitted_at = Column(DateTime(timezone=True))
    warnings_count = Column(Integer, nullable=False, default=0)
    question_order = Column(JSON, nullable=False, default=list)
    # [{question_id, selected_option_id, text_answer, code_answer}]
    answers = Column(JSON, nullable=False, default=list)
    # [{type, severity, message, timestamp}], append-only
    violations = Column(JSON, nullable=False, default=list)
    score = Column(Float, nullable=False, default=0.0)
    total_questions = Column(Integer, nullable=False, default=0)
    navigation_mode = Column(String, nullable=False, default=NavigationMode.FREE.value)
    # Every UPDATE is conditional on the version it was read at
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    candidate = relationship("Candidate", back_populates="attempts")
    exam = relationship("Exam")

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
