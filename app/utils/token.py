from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from app.config import settings
from app.constants.roles import UserRole
from app.database import get_session
from app.exceptions import ForbiddenException, UnauthorizedException
from app.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    expire = datetime.utcnow() + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm
    )
    return encoded_jwt


def decode_access_token(token: str):
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return payload
    except JWTError:
        return None


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session)
) -> User:
    if not token:
        raise UnauthorizedException("Access token required")

    payload = decode_access_token(token)

    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    user_id = payload.get("user_id") or payload.get("sub")

    if user_id is None:
        raise UnauthorizedException("Invalid token payload")

    user = session.get(User, int(user_id))

    if user is None:
        raise UnauthorizedException("Invalid token - user not found")

    request.state.user_id = user.id
    return user


def require_role(*roles: str):
    """Dependency factory: the current user must hold one of ``roles``."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenException("Insufficient permissions")
        return current_user

    return dependency


get_current_buyer = require_role(UserRole.BUYER.value)
get_current_seller = require_role(UserRole.SELLER.value)
