# gradebook/core/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gradebook.database import get_db
from gradebook.models.user import User
from gradebook.core.security import decode_token

reusable_oauth2 = HTTPBearer()

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: HTTPAuthorizationCredentials = Depends(reusable_oauth2)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token.credentials)
        user_id: str = payload.get("sub")
        if user_id is None or payload.get("type") != "access":
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def require_roles(*roles: str):
    """Dependency factory: the current user must hold one of ``roles``."""
    async def checker(current_user = Depends(get_current_user)):
        if current_user.role not in roles:
            raise HTTPException(403, f"Requires role: {', '.join(roles)}")
        return current_user
    return checker


get_current_admin = require_roles("admin")
get_current_staff = require_roles("admin", "instructor")


def ensure_can_view_learner(current_user, learner_id: int):
    # learners only see their own records, staff see everyone's
    if current_user.role == "learner" and current_user.id != learner_id:
        raise HTTPException(403, "Not allowed to view another learner's records")
