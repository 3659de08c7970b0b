import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gradebook.core.exceptions import NotEnrolled, CompetencyMismatch, ScoreOutOfRange
from gradebook.models.grade import GradeRecord
from gradebook.models.program import Competency, Enrollment
from gradebook.schemas.grade import GradeCreate, GradeCorrection
from gradebook.services.notifications import notify
from gradebook.services.summaries import invalidate_snapshot

logger = logging.getLogger(__name__)

async def _check_enrollment(db: AsyncSession, learner_id: int, program_id: int) -> None:
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.learner_id == learner_id)
        .where(Enrollment.program_id == program_id)
        .where(Enrollment.status == "active")
    )
    if not result.scalar_one_or_none():
        raise NotEnrolled(f"Learner {learner_id} has no active enrollment in program {program_id}")

async def _get_competency(db: AsyncSession, competency_id: int, program_id: int) -> Competency:
    result = await db.execute(
        select(Competency)
        .where(Competency.id == competency_id)
        .where(Competency.program_id == program_id)
    )
    competency = result.scalar_one_or_none()
    if not competency:
        raise CompetencyMismatch(f"Competency {competency_id} does not belong to program {program_id}")
    return competency

async def record_grade(db: AsyncSession, grade_in: GradeCreate, graded_by_id: int) -> GradeRecord:
    # score/max_score/weight bounds are already enforced by GradeCreate
    await _check_enrollment(db, grade_in.learner_id, grade_in.program_id)
    competency = await _get_competency(db, grade_in.competency_id, grade_in.program_id)

    grade = GradeRecord(
        learner_id=grade_in.learner_id,
        program_id=grade_in.program_id,
        competency_id=grade_in.competency_id,
        activity=grade_in.activity,
        score=grade_in.score,
        max_score=grade_in.max_score,
        weight=grade_in.weight,
        observation=grade_in.observation,
        evaluated_at=grade_in.evaluated_at,
        graded_by_id=graded_by_id,
    )
    db.add(grade)
    await invalidate_snapshot(db, grade_in.learner_id, grade_in.program_id)
    notify(
        db, grade_in.learner_id, "grade_posted",
        f"New grade for '{grade_in.activity}' in {competency.name}: {grade_in.score:g}/{grade_in.max_score:g}",
    )
    await db.commit()
    await db.refresh(grade)

    logger.info(
        "Grade %s recorded for learner %s (program %s, competency %s) by user %s",
        grade.id, grade.learner_id, grade.program_id, grade.competency_id, graded_by_id,
    )
    return grade

async def correct_grade(db: AsyncSession, grade: GradeRecord, correction: GradeCorrection) -> GradeRecord:
    if correction.score is not None:
        if correction.score > grade.max_score:
            raise ScoreOutOfRange(f"Score must be between 0 and {grade.max_score:g}")
        grade.score = correction.score
    if correction.observation is not None:
        grade.observation = correction.observation
    grade.updated_at = datetime.now(timezone.utc)

    db.add(grade)
    await invalidate_snapshot(db, grade.learner_id, grade.program_id)
    notify(db, grade.learner_id, "grade_corrected", f"Your grade for '{grade.activity}' was corrected")
    await db.commit()
    await db.refresh(grade)

    logger.info("Grade %s corrected", grade.id)
    return grade
