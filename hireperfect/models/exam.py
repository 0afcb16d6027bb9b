from sqlalchemy import Column, Integer, String, DateTime, JSON, Text, Boolean
from sqlalchemy.sql import func
from ..platform.database import Base


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False)  # "Soft Skills" | "IT" | "MBA"
    sub_category = Column(String, nullable=False)
    description = Column(Text, default="")
    duration_minutes = Column(Integer, default=30)
    supports_coding = Column(Boolean, default=False)
    active = Column(Boolean, default=True, index=True)
    # [{id, prompt, question_type, options: [{id, text}], correct_option_id, coding_meta}]
    questions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
