from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gradebook.config import settings
from gradebook.database import get_db
from gradebook.core.auth import get_current_user, get_current_staff
from gradebook.core.exceptions import CertificateNotEligible, CertificateAlreadyIssued
from gradebook.models.certificate import Certificate
from gradebook.models.program import Program
from gradebook.models.user import User
from gradebook.schemas.certificate import CertificateCreate, CertificateResponse, CertificateVerification
from gradebook.services.certificates import issue_certificate
from gradebook.routers.programs import get_program_or_404

router = APIRouter(prefix="/certificates", tags=["certificates"])

@router.post("", response_model=CertificateResponse)
async def create_certificate(
    certificate_in: CertificateCreate,
    db: AsyncSession = Depends(get_db),
    staff = Depends(get_current_staff)
):
    await get_program_or_404(db, certificate_in.program_id)
    try:
        return await issue_certificate(
            db,
            certificate_in.learner_id,
            certificate_in.program_id,
            issued_by_id=staff.id,
            policy=settings.performance_policy,
        )
    except (CertificateNotEligible, CertificateAlreadyIssued) as e:
        raise HTTPException(409, str(e))

@router.get("/me", response_model=List[CertificateResponse])
async def get_my_certificates(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(Certificate)
        .where(Certificate.learner_id == current_user.id)
        .order_by(Certificate.issued_at.desc())
    )
    return result.scalars().all()

# Public: no auth, anyone holding the code can verify
@router.get("/verify/{code}", response_model=CertificateVerification)
async def verify_certificate(code: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Certificate, User, Program)
        .join(User, User.id == Certificate.learner_id)
        .join(Program, Program.id == Certificate.program_id)
        .where(Certificate.verification_code == code)
    )
    row = result.first()
    if not row:
        raise HTTPException(404, "Certificate not found")

    certificate, learner, program = row
    return CertificateVerification(
        valid=True,
        learner_name=learner.name or learner.email.split("@")[0],
        program_name=program.name,
        overall_average=round(certificate.overall_average, 2),
        issued_at=certificate.issued_at
    )
