from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, func
from gradebook.database import Base

class GradeRecord(Base):
    __tablename__ = "grade_records"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=False, index=True)
    competency_id = Column(Integer, ForeignKey("competencies.id"), nullable=False)
    activity = Column(String, nullable=False)
    score = Column(Float, nullable=False)        # only score and observation are correctable
    max_score = Column(Float, nullable=False, default=100.0)
    weight = Column(Float, nullable=False, default=1.0)
    observation = Column(Text, nullable=True)
    evaluated_at = Column(DateTime(timezone=True), nullable=False)
    graded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)
