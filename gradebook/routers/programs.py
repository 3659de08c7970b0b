from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gradebook.database import get_db
from gradebook.core.auth import get_current_user, get_current_admin, get_current_staff
from gradebook.models.user import User
from gradebook.models.program import Program, Competency, Enrollment
from gradebook.schemas.program import (
    ProgramCreate, ProgramResponse, ProgramDetailResponse,
    CompetencyCreate, CompetencyResponse, EnrollmentCreate, EnrollmentResponse
)
from gradebook.services.summaries import invalidate_program_snapshots

router = APIRouter(prefix="/programs", tags=["programs"])

async def get_program_or_404(db: AsyncSession, program_id: int) -> Program:
    program = await db.get(Program, program_id)
    if not program:
        raise HTTPException(404, "Program not found")
    return program

@router.post("", response_model=ProgramResponse)
async def create_program(
    program_in: ProgramCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    existing = await db.execute(select(Program).where(Program.code == program_in.code))
    if existing.scalar_one_or_none():
        raise HTTPException(400, "Program code already exists")

    program = Program(code=program_in.code, name=program_in.name, description=program_in.description)
    db.add(program)
    await db.commit()
    await db.refresh(program)
    return program

@router.get("", response_model=List[ProgramResponse])
async def list_programs(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(Program).order_by(Program.code))
    return result.scalars().all()

@router.get("/{program_id}", response_model=ProgramDetailResponse)
async def get_program_detail(
    program_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    program = await get_program_or_404(db, program_id)
    competencies = await db.execute(
        select(Competency).where(Competency.program_id == program_id).order_by(Competency.id)
    )
    return ProgramDetailResponse(
        id=program.id,
        code=program.code,
        name=program.name,
        description=program.description,
        created_at=program.created_at,
        competencies=[CompetencyResponse.model_validate(c) for c in competencies.scalars()]
    )

@router.post("/{program_id}/competencies", response_model=CompetencyResponse)
async def add_competency(
    program_id: int,
    competency_in: CompetencyCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    await get_program_or_404(db, program_id)
    existing = await db.execute(
        select(Competency)
        .where(Competency.program_id == program_id)
        .where(Competency.code == competency_in.code)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(400, "Competency code already exists in this program")

    competency = Competency(program_id=program_id, code=competency_in.code, name=competency_in.name)
    db.add(competency)
    # completion percentages of the whole program change with the competency set
    await invalidate_program_snapshots(db, program_id)
    await db.commit()
    await db.refresh(competency)
    return competency

@router.post("/{program_id}/enrollments", response_model=EnrollmentResponse)
async def enroll_learner(
    program_id: int,
    enrollment_in: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
    staff = Depends(get_current_staff)
):
    await get_program_or_404(db, program_id)

    learner = await db.get(User, enrollment_in.learner_id)
    if not learner or learner.role != "learner":
        raise HTTPException(400, "Learner not found")

    existing = await db.execute(
        select(Enrollment)
        .where(Enrollment.learner_id == learner.id)
        .where(Enrollment.program_id == program_id)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(400, "Learner already enrolled")

    enrollment = Enrollment(learner_id=learner.id, program_id=program_id, status="active")
    db.add(enrollment)
    await db.commit()
    await db.refresh(enrollment)
    return enrollment

@router.get("/{program_id}/enrollments", response_model=List[EnrollmentResponse])
async def list_enrollments(
    program_id: int,
    db: AsyncSession = Depends(get_db),
    staff = Depends(get_current_staff)
):
    await get_program_or_404(db, program_id)
    result = await db.execute(
        select(Enrollment).where(Enrollment.program_id == program_id).order_by(Enrollment.enrolled_at)
    )
    return result.scalars().all()
