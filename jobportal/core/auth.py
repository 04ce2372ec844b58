"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes, including the actor resolver
  that turns a token's role claim into an EmployerActor or JobSeekerActor
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobportal.core.config import get_settings
from jobportal.core.exceptions import ForbiddenError, NotFoundError
from jobportal.core.permissions import (
    EMPLOYER, JOBSEEKER, Actor, EmployerActor, JobSeekerActor,
)
from jobportal.services.mongo_service import (
    UserStore, EmployerStore, JobSeekerStore, to_object_id,
)

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user document.

    Usage:
        @app.get("/protected")
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

    user_id = to_object_id(payload.get("sub"))
    if user_id is None:
        raise credentials_exception

    # Verify user exists
    user = UserStore().find_by_id(user_id)
    if not user:
        raise credentials_exception

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account deactivated")

    return user


def resolve_actor(user: dict) -> Actor:
    """Map a user's role to its tagged actor, looking up the profile once."""
    if user["role"] == EMPLOYER:
        profile = EmployerStore().find_by_user(user["_id"])
        if not profile:
            raise NotFoundError("Employer profile not found. Create profile first.")
        return EmployerActor(user_id=user["_id"], profile_id=profile["_id"])
    if user["role"] == JOBSEEKER:
        profile = JobSeekerStore().find_by_user(user["_id"])
        if not profile:
            raise NotFoundError("Job seeker profile not found. Create profile first.")
        return JobSeekerActor(user_id=user["_id"], profile_id=profile["_id"])
    raise ForbiddenError(f"Unsupported role: {user['role']}")


async def get_current_actor(user: dict = Depends(get_current_user)) -> Actor:
    """Dependency - Any authenticated user with a profile."""
    return resolve_actor(user)


def require_role(role: str):
    """Dependency - Require a role on the raw user (used before a profile exists)."""
    async def dependency(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] != role:
            raise ForbiddenError(f"Access denied. {role.capitalize()} access only.")
        return user
    return dependency


async def get_current_employer(user: dict = Depends(require_role(EMPLOYER))) -> EmployerActor:
    """Dependency - Require employer role and resolve the employer profile."""
    return resolve_actor(user)


async def get_current_jobseeker(user: dict = Depends(require_role(JOBSEEKER))) -> JobSeekerActor:
    """Dependency - Require job seeker role and resolve the job seeker profile."""
    return resolve_actor(user)
