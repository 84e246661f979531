from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, constr

from .base import APIResponse, CamelModel

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72  # bcrypt only reads the first 72 bytes


class LoginRequest(BaseModel):
    username: constr(min_length=1, strip_whitespace=True)
    password: constr(min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "admin",
                "password": "SecurePass123!"
            }
        }
    )


class RegisterAdminRequest(BaseModel):
    username: constr(min_length=3, max_length=150, strip_whitespace=True)
    password: constr(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    name: Optional[constr(max_length=150, strip_whitespace=True)] = None
    email: Optional[EmailStr] = None


class UserOut(CamelModel):
    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str


class AuthResponse(APIResponse):
    token: str
    user: UserOut


class UserResponse(APIResponse):
    user: UserOut
