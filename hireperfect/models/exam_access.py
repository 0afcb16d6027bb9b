from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..platform.database import Base


class ExamAccess(Base):
    """Purchased or assigned exam for a candidate."""

    __tablename__ = "exam_access"
    __table_args__ = (
        UniqueConstraint("candidate_id", "exam_id", name="uq_exam_access_candidate_exam"),
    )

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    granted_at = Column(DateTime(timezone=True), server_default=func.now())

    candidate = relationship("Candidate", back_populates="exam_access")
    exam = relationship("Exam")
