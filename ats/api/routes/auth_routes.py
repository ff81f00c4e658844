"""
Authentication Routes

POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
PUT /auth/change-password - Change own password
POST /auth/register - Create a portal user (admin only)
GET /auth/users - List portal users (admin only)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ats.api.deps import get_user_repository
from ats.core.auth import (
    create_access_token, get_current_user, hash_password, require_roles, verify_password
)
from ats.core.exceptions import DuplicateUserError
from ats.schemas.schemas import (
    ChangePasswordRequest, LoginRequest, MessageResponse, RegisterRequest, TokenResponse,
    UserResponse, UserRole
)
from ats.services.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _to_response(user: dict) -> UserResponse:
    return UserResponse(
        user_id=user["user_id"], email=user["email"], name=user["name"], role=user["role"],
        department=user["department"], employee_id=user["employee_id"],
        is_active=user["is_active"], last_login=user["last_login"], created_at=user["created_at"]
    )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = users.get_by_email(request.email)

    if not user or not verify_password(request.password, user["password_hash"]):
        logger.warning(f"Failed login for {request.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    users.record_login(user["user_id"])
    token = create_access_token(data={"sub": str(user["user_id"]), "role": user["role"], "email": user["email"]})
    logger.info(f"🔐 {user['email']} logged in")

    return TokenResponse(access_token=token, user=_to_response(users.get_by_id(user["user_id"])))


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user), users: UserRepository = Depends(get_user_repository)):
    """Get current authenticated user's info."""
    return _to_response(users.get_by_id(user["user_id"]))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    user: dict = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    """Change own password after confirming the current one."""
    stored = users.get_by_id(user["user_id"])
    if not verify_password(request.current_password, stored["password_hash"]):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    users.update_password(user["user_id"], hash_password(request.new_password))
    return MessageResponse(message="Password updated successfully")


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    request: RegisterRequest,
    admin: dict = Depends(require_roles(UserRole.admin)),
    users: UserRepository = Depends(get_user_repository),
):
    """Create a new HR portal account. Admins only."""
    try:
        created = users.create(
            email=request.email,
            password_hash=hash_password(request.password),
            name=request.name,
            role=request.role.value,
            department=request.department,
            employee_id=request.employee_id,
        )
    except DuplicateUserError:
        raise HTTPException(status_code=400, detail="Email or employee ID already registered")

    logger.info(f"👤 {admin['email']} registered {created['email']} as {created['role']}")
    return _to_response(created)


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    admin: dict = Depends(require_roles(UserRole.admin)),
    users: UserRepository = Depends(get_user_repository),
):
    """List all portal accounts. Admins only."""
    return [_to_response(u) for u in users.list_users()]
