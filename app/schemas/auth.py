from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from app.models.user import UserRole

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: UserRole
    tenant_id: str
    employee_id: Optional[str] = None

class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse

class AuthenticatedUser(BaseModel):
    """Identity resolved from a bearer token."""
    user_id: str
    email: str
    tenant_id: str
    role: UserRole
    employee_id: Optional[str] = None
