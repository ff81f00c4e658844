"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes and role checks
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from ats.api.deps import get_user_repository
from ats.core.config import Settings, get_settings
from ats.core.exceptions import DuplicateUserError
from ats.schemas.schemas import UserRole
from ats.services.user_repository import UserRepository

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()

# Roles allowed to change applicant data and send mail
STAFF_ROLES = (UserRole.admin, UserRole.hr_manager)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise credentials_exception

    user = users.get_by_id(int(user_id))
    if not user:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return {
        "user_id": user["user_id"],
        "email": user["email"],
        "name": user["name"],
        "role": user["role"],
    }


def require_roles(*roles: UserRole):
    """
    Dependency factory - allow only the given roles.

    Usage:
        @router.post("/x")
        async def route(user: dict = Depends(require_roles(UserRole.admin))):
            ...
    """
    allowed = {r.value for r in roles}

    async def checker(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] not in allowed:
            raise HTTPException(
                status_code=403,
                detail=f"Requires role: {', '.join(sorted(allowed))}",
            )
        return user

    return checker


def seed_default_users(users: UserRepository, config: Settings = None) -> int:
    """
    Create the HR manager and admin accounts when no users exist.

    Returns:
        Number of accounts created
    """
    config = config or settings
    if users.count() > 0:
        return 0

    defaults = [
        ("hr@ongc.co.in", config.default_hr_password, "HR Manager", UserRole.hr_manager, "Human Resources", "HR001"),
        ("admin@ongc.co.in", config.default_admin_password, "System Administrator", UserRole.admin, "IT", "IT001"),
    ]
    created = 0
    for email, password, name, role, department, employee_id in defaults:
        try:
            users.create(email, hash_password(password), name, role.value, department, employee_id)
            created += 1
        except DuplicateUserError:
            logger.warning(f"Default user {email} already exists")
    logger.info(f"Default users created: {created}")
    return created
