"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import hash_password, verify_password, create_access_token, get_current_user
from jobportal.core.exceptions import ConflictError
from jobportal.services.mongo_service import UserStore, public_doc
from jobportal.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    After registration, login to get access token, then create profile.
    """
    try:
        UserStore().insert({
            "email": request.email.lower(),
            "password_hash": hash_password(request.password),
            "role": request.role,
            "first_name": request.first_name,
            "last_name": request.last_name,
            "is_active": True,
            "created_at": datetime.utcnow(),
        })
    except DuplicateKeyError:
        raise ConflictError("Email already registered")

    logger.info("Registered new %s account", request.role)
    return MessageResponse(message=f"Registered successfully as {request.role}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = UserStore().find_by_email(request.email)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_id = str(user["_id"])
    token = create_access_token(data={"sub": user_id, "role": user["role"]})

    return TokenResponse(access_token=token, user_id=user_id, role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return UserResponse(**public_doc(user))
