import logging
import secrets
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy import exc as sa_exc
from gradebook.core.exceptions import CertificateNotEligible, CertificateAlreadyIssued
from gradebook.models.certificate import Certificate
from gradebook.models.program import Enrollment, Program
from gradebook.schemas.performance import PerformancePolicy
from gradebook.services.notifications import notify
from gradebook.services.performance import is_certificate_eligible
from gradebook.services.summaries import compute_summary

logger = logging.getLogger(__name__)

def generate_verification_code() -> str:
    return secrets.token_urlsafe(16)

async def issue_certificate(
    db: AsyncSession,
    learner_id: int,
    program_id: int,
    issued_by_id: int,
    policy: PerformancePolicy,
) -> Certificate:
    existing = await db.execute(
        select(Certificate)
        .where(Certificate.learner_id == learner_id)
        .where(Certificate.program_id == program_id)
    )
    if existing.scalar_one_or_none():
        raise CertificateAlreadyIssued("Certificate already issued for this program")

    # Eligibility is checked against fresh grades, never against a cached snapshot
    summary = await compute_summary(db, learner_id, program_id, policy)
    if not is_certificate_eligible(summary, policy):
        raise CertificateNotEligible(
            f"Requires 100% completion and an average of at least {policy.certificate_min_average:g} "
            f"(current: {summary.completion_percentage:.2f}% completion, {summary.overall_average:.2f} average)"
        )

    enrollment = await db.execute(
        select(Enrollment)
        .where(Enrollment.learner_id == learner_id)
        .where(Enrollment.program_id == program_id)
    )
    enrollment_obj = enrollment.scalar_one_or_none()
    if enrollment_obj:
        enrollment_obj.status = "completed"

    program = await db.get(Program, program_id)
    program_name = program.name if program else f"program {program_id}"

    # added after the lookups above so the insert is only flushed at commit
    certificate = Certificate(
        learner_id=learner_id,
        program_id=program_id,
        verification_code=generate_verification_code(),
        overall_average=summary.overall_average,
        issued_by_id=issued_by_id,
    )
    db.add(certificate)
    notify(db, learner_id, "certificate_issued", f"Your certificate for {program_name} has been issued")

    try:
        await db.commit()
    except sa_exc.IntegrityError:
        # a concurrent request issued it between the check above and this commit
        await db.rollback()
        raise CertificateAlreadyIssued("Certificate already issued for this program")
    await db.refresh(certificate)
    logger.info("Certificate %s issued to learner %s for program %s", certificate.id, learner_id, program_id)
    return certificate
