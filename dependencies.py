# dependencies.py
import logging
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from database import get_database
from crud.course import CourseCRUD
from crud.enrollment import EnrollmentCRUD
from crud.profile import ProfileCRUD
from crud.tutoring_session import TutoringSessionCRUD
from models.profile import Profile
from services.dashboard import DataAccess
from services.profile_gate import is_profile_complete
from utils.errors import StoreError
from utils.security import verify_token

# OAuth2 scheme for token endpoint - use this consistently
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

logger = logging.getLogger(__name__)

async def get_profile_crud(db=Depends(get_database)) -> ProfileCRUD:
    return ProfileCRUD(db)

async def get_course_crud(db=Depends(get_database)) -> CourseCRUD:
    return CourseCRUD(db)

async def get_enrollment_crud(db=Depends(get_database)) -> EnrollmentCRUD:
    return EnrollmentCRUD(db)

async def get_session_crud(db=Depends(get_database)) -> TutoringSessionCRUD:
    return TutoringSessionCRUD(db)

async def get_data_access(
    profiles: ProfileCRUD = Depends(get_profile_crud),
    courses: CourseCRUD = Depends(get_course_crud),
    enrollments: EnrollmentCRUD = Depends(get_enrollment_crud),
    sessions: TutoringSessionCRUD = Depends(get_session_crud),
) -> DataAccess:
    return DataAccess(profiles, courses, enrollments, sessions)

async def resolve_user(token: Optional[str], crud: ProfileCRUD) -> Optional[Profile]:
    """Profile for a bearer token; store failures propagate as ``StoreError``"""
    if not token:
        return None
    payload = verify_token(token)
    if not payload or not payload.get("sub"):
        return None
    return await crud.get_profile(payload["sub"])

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    crud: ProfileCRUD = Depends(get_profile_crud),
) -> Profile:
    try:
        user = await resolve_user(token, crud)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not reach the data store",
        )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

async def get_session(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    crud: ProfileCRUD = Depends(get_profile_crud),
) -> Tuple[Optional[Profile], bool]:
    """Current user (or None) and whether the session could be resolved.

    A token whose profile can't be read yet is unresolved rather than
    signed out, so the client keeps it and asks again.
    """
    try:
        return await resolve_user(token, crud), True
    except StoreError:
        logger.warning("Session lookup deferred: data store unavailable")
        return None, False

async def require_complete_profile(current_user: Profile = Depends(get_current_user)) -> Profile:
    if not is_profile_complete(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Complete your profile first",
        )
    return current_user
