from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime, timezone
from typing import Optional

class GradeRecordIn(BaseModel):
    """A grade as the aggregator sees it."""
    competency_id: int
    score: float = Field(..., ge=0)
    max_score: float = Field(100.0, gt=0)
    weight: float = Field(1.0, gt=0)
    evaluated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @field_validator("evaluated_at")
    @classmethod
    def evaluated_at_in_utc(cls, value: datetime) -> datetime:
        # naive timestamps are taken as UTC; SQLite drops offsets on storage
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def score_within_max(self):
        if self.score > self.max_score:
            raise ValueError("score must not exceed max_score")
        return self

class GradeCreate(GradeRecordIn):
    learner_id: int
    program_id: int
    activity: str = Field(..., min_length=1, max_length=150)
    observation: Optional[str] = None

class GradeCorrection(BaseModel):
    score: Optional[float] = Field(None, ge=0)
    observation: Optional[str] = None

    @model_validator(mode="after")
    def something_to_correct(self):
        if self.score is None and self.observation is None:
            raise ValueError("provide a score or an observation")
        return self

class GradeResponse(BaseModel):
    id: int
    learner_id: int
    program_id: int
    competency_id: int
    activity: str
    score: float
    max_score: float
    weight: float
    observation: Optional[str]
    evaluated_at: datetime
    graded_by_id: Optional[int]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
