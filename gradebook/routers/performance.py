from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from gradebook.config import settings
from gradebook.database import get_db
from gradebook.core.auth import get_current_user, ensure_can_view_learner
from gradebook.schemas.performance import PerformanceSummary, EligibilityResponse
from gradebook.services.performance import is_certificate_eligible
from gradebook.services.summaries import get_summary
from gradebook.routers.programs import get_program_or_404

router = APIRouter(prefix="/performance", tags=["performance"])

@router.get("/me/{program_id}", response_model=PerformanceSummary)
async def get_my_performance(
    program_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await get_program_or_404(db, program_id)
    return await get_summary(db, current_user.id, program_id, settings.performance_policy)

@router.get("/{learner_id}/{program_id}", response_model=PerformanceSummary)
async def get_learner_performance(
    learner_id: int,
    program_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    ensure_can_view_learner(current_user, learner_id)
    await get_program_or_404(db, program_id)
    return await get_summary(db, learner_id, program_id, settings.performance_policy)

@router.get("/{learner_id}/{program_id}/eligibility", response_model=EligibilityResponse)
async def get_certificate_eligibility(
    learner_id: int,
    program_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    ensure_can_view_learner(current_user, learner_id)
    await get_program_or_404(db, program_id)
    policy = settings.performance_policy
    summary = await get_summary(db, learner_id, program_id, policy)
    return EligibilityResponse(
        learner_id=learner_id,
        program_id=program_id,
        eligible=is_certificate_eligible(summary, policy),
        completion_percentage=round(summary.completion_percentage, 2),
        overall_average=round(summary.overall_average, 2),
        required_average=policy.certificate_min_average
    )
