from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, UniqueConstraint, func
from gradebook.database import Base

class PerformanceSnapshot(Base):
    """Cached PerformanceSummary. Grade records stay the source of truth."""
    __tablename__ = "performance_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=False)
    summary = Column(JSON, nullable=False)
    fingerprint = Column(String, nullable=True)  # state of grades and competencies it was built from
    computed_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("learner_id", "program_id", name="uq_snapshot_learner_program"),
    )
