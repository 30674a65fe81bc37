from fastapi import APIRouter, Depends, status
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from app.database import get_session
from app.exceptions import ConflictException, UnauthorizedException
from app.models.user import User
from app.schemas.user_schemas import AuthResponse, ProfileResponse, UserLogin, UserPublic, UserRegister
from app.utils.hash import hash_password, verify_password
from app.utils.token import create_access_token, get_current_user


router = APIRouter()


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def issue_token(user: User) -> str:
    return create_access_token({"user_id": user.id, "role": user.role})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    if find_user_by_email(session, payload.email):
        raise ConflictException("User already exists")

    user = User(
        name=payload.name,
        email=payload.email,
        password=hash_password(payload.password),
        role=payload.role.value,
    )

    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictException("User already exists")
    session.refresh(user)

    return AuthResponse(
        message="User created successfully",
        user=UserPublic.model_validate(user),
        token=issue_token(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = find_user_by_email(session, payload.email)

    if not user or not verify_password(payload.password, user.password):
        raise UnauthorizedException("Invalid credentials")

    return AuthResponse(
        message="Login successful",
        user=UserPublic.model_validate(user),
        token=issue_token(user),
    )


@router.get("/profile", response_model=ProfileResponse)
def profile(current_user: User = Depends(get_current_user)):
    return ProfileResponse(user=UserPublic.model_validate(current_user))
