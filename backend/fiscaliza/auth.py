# Auth module with basic JWT support
from datetime import timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from .config import settings
from .lib.dates import utcnow
from .schemas import UserAccount, UserRole

# Security scheme
security = HTTPBearer(auto_error=False)

# Acts on behalf of unauthenticated requests in development
DEV_USER = UserAccount(id="dev-user", name="Sistema", username="dev", role=UserRole.ADMIN)


def create_access_token(user: UserAccount, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token carrying the user's id, display name and role."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": user.id,
        "name": user.name,
        "username": user.username,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> UserAccount:
    """
    Decode JWT token and return current user.
    For development, returns the system user if no token is provided.
    """
    if settings.ENVIRONMENT == "development" and not credentials:
        return DEV_USER

    if not credentials:
        raise _unauthorized("Not authenticated")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        raise _unauthorized("Invalid authentication credentials")

    user_id = payload.get("sub", "")
    if not user_id:
        raise _unauthorized("Invalid authentication credentials")
    try:
        role = UserRole(payload.get("role", UserRole.INSPECTOR.value))
    except ValueError:
        raise _unauthorized("Invalid authentication credentials")
    return UserAccount(
        id=user_id,
        name=payload.get("name", ""),
        username=payload.get("username", ""),
        role=role,
    )


async def get_current_admin(current_user: UserAccount = Depends(get_current_user)) -> UserAccount:
    """Require admin privileges."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
