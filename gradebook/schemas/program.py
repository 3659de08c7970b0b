from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

class ProgramCreate(BaseModel):
    code: str = Field(..., min_length=2, max_length=30)
    name: str = Field(..., min_length=3, max_length=150)
    description: Optional[str] = None

class CompetencyCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=30)
    name: str = Field(..., min_length=3, max_length=150)

class CompetencyResponse(BaseModel):
    id: int
    program_id: int
    code: str
    name: str

    model_config = {"from_attributes": True}

class ProgramResponse(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}

class ProgramDetailResponse(ProgramResponse):
    competencies: List[CompetencyResponse]

class EnrollmentCreate(BaseModel):
    learner_id: int

class EnrollmentResponse(BaseModel):
    id: int
    learner_id: int
    program_id: int
    status: str  # "active", "completed", "withdrawn"
    enrolled_at: datetime

    model_config = {"from_attributes": True}
