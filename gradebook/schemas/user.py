from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class RefreshRequest(BaseModel):
    refresh_token: str

class RoleUpdate(BaseModel):
    role: str = Field(..., pattern="^(admin|instructor|learner)$")

class UserResponse(BaseModel):
    id: int
    email: EmailStr
    is_active: bool
    name: Optional[str]
    role: str

    model_config = {"from_attributes": True}

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: UserResponse
