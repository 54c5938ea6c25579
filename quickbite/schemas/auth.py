from datetime import datetime
import uuid

from pydantic import BaseModel, ConfigDict

from quickbite.models.user import UserRole


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    role: str = UserRole.CUSTOMER.value  # customer | restaurant_owner


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserResponse(BaseModel):
    """Public view of a user; omits the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    phone: str
    role: UserRole
    is_verified: bool
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    token: str
    user: UserResponse
