from pydantic import EmailStr, Field
from app.constants.roles import UserRole
from app.schemas.base_schemas import APIModel, APIRequest


class UserRegister(APIRequest):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole


class UserLogin(APIRequest):
    email: EmailStr
    password: str


class UserPublic(APIModel):
    id: int
    name: str
    email: str
    role: str


class AuthResponse(APIModel):
    message: str
    user: UserPublic
    token: str


class ProfileResponse(APIModel):
    user: UserPublic
