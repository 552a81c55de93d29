from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel

class RegisterRequest(CamelModel):
    email: str
    password: str
    name: str

class LoginRequest(CamelModel):
    email: str
    password: str

class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    avatar: Optional[str] = None

class UserRead(CamelModel):
    id: str
    email: str
    name: str
    avatar: Optional[str] = None
    created_at: datetime

class AuthResponse(CamelModel):
    user: UserRead
    token: str
