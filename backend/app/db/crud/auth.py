from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException, status
from jose import JWTError

from app.db.models.user import UserModel
from app.schemas.login_request import LoginRequest
from app.schemas.shared import UserOut as User
from app.schemas.auth_response import AuthResponse
from app.core.auth import verify_password, decode_access_token, create_tokens_for_user


async def authenticate_user(db: AsyncSession, login_data: LoginRequest) -> UserModel | None:
    result = await db.execute(select(UserModel).where(UserModel.email == login_data.email))
    user = result.scalar_one_or_none()
    if not user:
        return None
    if not verify_password(login_data.password, user.password_hash):
        return None
    return user


async def get_user_from_token(db: AsyncSession, token: str) -> User:
    """Validates token and returns user if valid."""
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user_id = payload.get("sub")
    user = await db.get(UserModel, user_id) if user_id else None
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return User.model_validate(user, from_attributes=True)


async def refresh_user_token(db: AsyncSession, refresh_token: str) -> AuthResponse:
    """Refreshes user tokens using a refresh token."""
    if not refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing refresh token")
    try:
        payload = decode_access_token(refresh_token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user_id = payload.get("sub")
    user = await db.get(UserModel, user_id) if user_id else None
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return create_tokens_for_user(user)
