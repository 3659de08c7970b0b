import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy import exc as sa_exc
from gradebook.models.grade import GradeRecord
from gradebook.models.program import Competency
from gradebook.models.performance import PerformanceSnapshot
from gradebook.schemas.performance import PerformancePolicy, PerformanceSummary
from gradebook.services.performance import summarize

logger = logging.getLogger(__name__)

async def load_grade_records(db: AsyncSession, learner_id: int, program_id: int) -> List[GradeRecord]:
    result = await db.execute(
        select(GradeRecord)
        .where(GradeRecord.learner_id == learner_id)
        .where(GradeRecord.program_id == program_id)
        .order_by(GradeRecord.evaluated_at, GradeRecord.id)
    )
    return list(result.scalars().all())

async def load_program_competency_ids(db: AsyncSession, program_id: int) -> List[int]:
    result = await db.execute(
        select(Competency.id).where(Competency.program_id == program_id).order_by(Competency.id)
    )
    return list(result.scalars().all())

async def compute_summary(
    db: AsyncSession, learner_id: int, program_id: int, policy: PerformancePolicy
) -> PerformanceSummary:
    records = await load_grade_records(db, learner_id, program_id)
    competency_ids = await load_program_competency_ids(db, program_id)
    return summarize(learner_id, program_id, records, policy, program_competency_ids=competency_ids)

async def snapshot_fingerprint(db: AsyncSession, learner_id: int, program_id: int) -> str:
    """Cheap digest of everything a summary depends on.

    Any inserted or corrected grade, or any new competency, changes it.
    """
    grades = await db.execute(
        select(func.count(GradeRecord.id), func.max(GradeRecord.id), func.max(GradeRecord.updated_at))
        .where(GradeRecord.learner_id == learner_id)
        .where(GradeRecord.program_id == program_id)
    )
    grade_count, last_grade_id, last_correction = grades.one()

    competencies = await db.execute(
        select(func.count(Competency.id), func.max(Competency.id))
        .where(Competency.program_id == program_id)
    )
    competency_count, last_competency_id = competencies.one()

    return f"g{grade_count}:{last_grade_id}:{last_correction}|c{competency_count}:{last_competency_id}"

async def invalidate_snapshot(db: AsyncSession, learner_id: int, program_id: int) -> None:
    """Drop the cached summary; the caller commits."""
    await db.execute(
        delete(PerformanceSnapshot)
        .where(PerformanceSnapshot.learner_id == learner_id)
        .where(PerformanceSnapshot.program_id == program_id)
    )
    logger.info("Invalidated performance snapshot for learner %s in program %s", learner_id, program_id)

async def invalidate_program_snapshots(db: AsyncSession, program_id: int) -> None:
    """Drop every cached summary of a program; the caller commits."""
    await db.execute(
        delete(PerformanceSnapshot).where(PerformanceSnapshot.program_id == program_id)
    )
    logger.info("Invalidated all performance snapshots for program %s", program_id)

async def get_summary(
    db: AsyncSession, learner_id: int, program_id: int, policy: PerformancePolicy
) -> PerformanceSummary:
    """Cached summary if it is still current, otherwise compute it and store a snapshot."""
    # Taken before the records are read: a grade committed in between leaves
    # the stored fingerprint behind, so the next read recomputes.
    fingerprint = await snapshot_fingerprint(db, learner_id, program_id)

    result = await db.execute(
        select(PerformanceSnapshot)
        .where(PerformanceSnapshot.learner_id == learner_id)
        .where(PerformanceSnapshot.program_id == program_id)
    )
    snapshot: Optional[PerformanceSnapshot] = result.scalar_one_or_none()
    if snapshot and snapshot.fingerprint == fingerprint:
        return PerformanceSummary.model_validate(snapshot.summary)

    summary = await compute_summary(db, learner_id, program_id, policy)
    payload = summary.model_dump(mode="json")
    if snapshot:
        logger.info("Refreshing stale snapshot for learner %s in program %s", learner_id, program_id)
        snapshot.summary = payload
        snapshot.fingerprint = fingerprint
        snapshot.computed_at = func.now()
    else:
        db.add(PerformanceSnapshot(
            learner_id=learner_id,
            program_id=program_id,
            summary=payload,
            fingerprint=fingerprint,
        ))
    try:
        await db.commit()
    except sa_exc.IntegrityError:
        # another request stored the same snapshot first
        await db.rollback()
        logger.warning("Snapshot for learner %s in program %s already stored", learner_id, program_id)
    return summary
