from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, description="Public handle, unique")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, max_length=72, description="Plain password (will be hashed).")
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)

class UserResponse(BaseModel):
    id: int
    username: str
    email: EmailStr
    full_name: str
    phone: str
    created_at: datetime

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
