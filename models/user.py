from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from models.enums import UserRole

# Identity used by the workflow; immutable for the whole session
class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    fullname: str
    role: UserRole
    email: Optional[EmailStr] = None
    barangay: Optional[str] = None  # Jurisdiction for officials, home barangay for residents

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)

# Model for creating a user (registration)
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    fullname: str = Field(..., min_length=3)
    role: UserRole = UserRole.RESIDENT  # Default value
    barangay: Optional[str] = None

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
