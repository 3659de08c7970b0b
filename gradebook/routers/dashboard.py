from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from gradebook.config import settings
from gradebook.database import get_db
from gradebook.core.auth import get_current_user
from gradebook.models.program import Program, Enrollment
from gradebook.models.grade import GradeRecord
from gradebook.services.performance import is_certificate_eligible
from gradebook.services.summaries import get_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

async def learner_dashboard(db: AsyncSession, learner) -> dict:
    policy = settings.performance_policy
    result = await db.execute(
        select(Enrollment, Program)
        .join(Program, Program.id == Enrollment.program_id)
        .where(Enrollment.learner_id == learner.id)
        .order_by(Enrollment.enrolled_at)
    )

    programs = []
    for enrollment, program in result.all():
        summary = await get_summary(db, learner.id, program.id, policy)
        programs.append({
            "program_id": program.id,
            "program_name": program.name,
            "enrollment_status": enrollment.status,
            "overall_average": round(summary.overall_average, 2),
            "completion_percentage": round(summary.completion_percentage, 2),
            "trend": summary.trend.value,
            "certificate_eligible": is_certificate_eligible(summary, policy)
        })
    return {"programs": programs}

async def staff_dashboard(db: AsyncSession) -> dict:
    # Learner counts and raw mean score per program
    learners = await db.execute(
        select(Enrollment.program_id, func.count(Enrollment.id))
        .where(Enrollment.status == "active")
        .group_by(Enrollment.program_id)
    )
    learner_counts = dict(learners.all())

    scores = await db.execute(
        select(GradeRecord.program_id, func.avg(GradeRecord.score), func.count(GradeRecord.id))
        .group_by(GradeRecord.program_id)
    )
    score_stats = {program_id: (avg, count) for program_id, avg, count in scores.all()}

    programs = await db.execute(select(Program).order_by(Program.code))
    items = []
    for program in programs.scalars():
        avg_score, grade_count = score_stats.get(program.id, (None, 0))
        items.append({
            "program_id": program.id,
            "program_name": program.name,
            "active_learners": learner_counts.get(program.id, 0),
            "grades_recorded": grade_count,
            "average_score": round(float(avg_score), 2) if avg_score is not None else 0.0
        })
    return {"programs": items}

@router.get("")
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if current_user.role == "learner":
        body = await learner_dashboard(db, current_user)
    else:
        body = await staff_dashboard(db)

    return {
        "current_user": {
            "name": current_user.name or current_user.email.split("@")[0],
            "role": current_user.role
        },
        **body
    }
