import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from gradebook.database import get_db
from gradebook.core.auth import get_current_admin
from gradebook.models.user import User
from gradebook.models.program import Program, Enrollment
from gradebook.models.grade import GradeRecord
from gradebook.models.certificate import Certificate
from gradebook.schemas.user import RoleUpdate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    role_in: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    if user.id == admin.id and role_in.role != "admin":
        raise HTTPException(400, "Admins cannot demote themselves")

    user.role = role_in.role
    await db.commit()
    await db.refresh(user)
    logger.info("User %s role set to %s by admin %s", user.id, user.role, admin.id)
    return user


@router.get("/dashboard")
async def admin_dashboard(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    users_by_role = await db.execute(
        select(User.role, func.count(User.id)).group_by(User.role)
    )
    role_counts = {role: count for role, count in users_by_role.all()}

    programs = await db.execute(select(func.count(Program.id)))
    active = await db.execute(
        select(func.count(Enrollment.id)).where(Enrollment.status == "active")
    )
    completed = await db.execute(
        select(func.count(Enrollment.id)).where(Enrollment.status == "completed")
    )
    grades = await db.execute(select(func.count(GradeRecord.id)))
    certificates = await db.execute(select(func.count(Certificate.id)))

    return {
        "users": {
            "admins": role_counts.get("admin", 0),
            "instructors": role_counts.get("instructor", 0),
            "learners": role_counts.get("learner", 0)
        },
        "programs": programs.scalar_one(),
        "enrollments": {
            "active": active.scalar_one(),
            "completed": completed.scalar_one()
        },
        "grades": grades.scalar_one(),
        "certificates": certificates.scalar_one()
    }
