from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..platform.database import Base


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String)
    role = Column(String, nullable=False, default="candidate")  # "candidate" | "admin"
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exam_access = relationship("ExamAccess", back_populates="candidate", cascade="all, delete-orphan")
    attempts = relationship("Attempt", back_populates="candidate")
