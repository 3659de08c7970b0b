from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class CompetencyStatus(str, Enum):
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    FAILED = "failed"


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class PerformancePolicy(BaseModel):
    """Thresholds used by the aggregator and the certificate check."""
    approval_threshold: float = 70.0
    in_progress_threshold: float = 50.0
    certificate_min_average: float = 70.0
    trend_window: int = Field(3, ge=1)     # grades compared at each end of the timeline
    trend_tolerance: float = Field(2.0, ge=0)

    model_config = {"frozen": True}


class CompetencyBreakdown(BaseModel):
    competency_id: int
    record_count: int
    average: float
    status: CompetencyStatus

    model_config = {"frozen": True}


class PerformanceSummary(BaseModel):
    learner_id: int
    program_id: int
    overall_average: float
    approved_competencies: int
    total_competencies: int
    completion_percentage: float = Field(..., ge=0, le=100)
    competencies: List[CompetencyBreakdown]
    trend: Trend

    model_config = {"frozen": True}


class EligibilityResponse(BaseModel):
    learner_id: int
    program_id: int
    eligible: bool
    completion_percentage: float
    overall_average: float
    required_average: float
