from pydantic import BaseModel
from datetime import datetime

class CertificateCreate(BaseModel):
    learner_id: int
    program_id: int

class CertificateResponse(BaseModel):
    id: int
    learner_id: int
    program_id: int
    verification_code: str
    overall_average: float
    issued_at: datetime

    model_config = {"from_attributes": True}

class CertificateVerification(BaseModel):
    valid: bool
    learner_name: str
    program_name: str
    overall_average: float
    issued_at: datetime
