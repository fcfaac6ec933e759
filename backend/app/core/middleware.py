from fastapi import Request, HTTPException
import logging

from jose import JWTError

from .auth import decode_access_token
from app.db.session import get_db_session

logger = logging.getLogger(__name__)

# List of paths that should be excluded from authentication checks
PUBLIC_PATHS = [
    "/auth/login",
    "/auth/refresh",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc"
]


def _user_from_token(token: str):
    try:
        token_data = decode_access_token(token)
    except JWTError:
        logger.debug("Ignoring invalid or expired token")
        return None
    return {
        "user_id": token_data.get("sub"),
        "role": token_data.get("role"),
    }


async def verify_token_middleware(request: Request, call_next):
    """
    Middleware to check the session cookie and add the authenticated user to request state.
    This doesn't block unauthenticated requests, but just adds user info if authenticated.
    """
    request.state.user = None

    # Skip authentication for public paths
    if any(request.url.path.startswith(public_path) for public_path in PUBLIC_PATHS):
        return await call_next(request)

    session_cookie = request.cookies.get("session")
    if session_cookie:
        request.state.user = _user_from_token(session_cookie)
    # Check for Authorization header if session cookie is not present
    else:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            request.state.user = _user_from_token(auth_header.split(" ", 1)[1])

    response = await call_next(request)
    return response

# FastAPI dependency for protected routes
def get_current_user(request: Request):
    """
    Dependency to use in FastAPI route functions that require authentication.
    This will raise an HTTPException if the user is not authenticated.
    """
    user = getattr(request.state, "user", None)
    if not user or not user.get("user_id"):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user

# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session
