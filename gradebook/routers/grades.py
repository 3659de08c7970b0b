from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from gradebook.database import get_db
from gradebook.core.auth import get_current_user, get_current_staff, ensure_can_view_learner
from gradebook.core.exceptions import NotEnrolled, CompetencyMismatch, ScoreOutOfRange
from gradebook.models.grade import GradeRecord
from gradebook.schemas.grade import GradeCreate, GradeCorrection, GradeResponse
from gradebook.services.grading import record_grade, correct_grade
from gradebook.services.summaries import load_grade_records

router = APIRouter(prefix="/grades", tags=["grades"])

@router.post("", response_model=GradeResponse)
async def create_grade(
    grade_in: GradeCreate,
    db: AsyncSession = Depends(get_db),
    staff = Depends(get_current_staff)
):
    try:
        return await record_grade(db, grade_in, graded_by_id=staff.id)
    except (NotEnrolled, CompetencyMismatch) as e:
        raise HTTPException(400, str(e))

@router.patch("/{grade_id}", response_model=GradeResponse)
async def update_grade(
    grade_id: int,
    correction: GradeCorrection,
    db: AsyncSession = Depends(get_db),
    staff = Depends(get_current_staff)
):
    grade = await db.get(GradeRecord, grade_id)
    if not grade:
        raise HTTPException(404, "Grade not found")
    try:
        return await correct_grade(db, grade, correction)
    except ScoreOutOfRange as e:
        raise HTTPException(400, str(e))

@router.get("/learner/{learner_id}/program/{program_id}", response_model=List[GradeResponse])
async def list_grades(
    learner_id: int,
    program_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    ensure_can_view_learner(current_user, learner_id)
    return await load_grade_records(db, learner_id, program_id)
