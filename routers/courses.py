# routers/courses.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from crud.course import CourseCRUD
from crud.enrollment import EnrollmentCRUD
from dependencies import get_course_crud, get_enrollment_crud, require_complete_profile
from models.course import EnrollmentWithCourse
from models.profile import Profile
from services.catalog import CourseCatalogScreen
from services.course_details import CourseDetailsScreen, EnrollOutcome
from utils.errors import StoreError
from utils.responses import screen_response

router = APIRouter(tags=["courses"])

# Outcome -> HTTP status for the enroll action
_ENROLL_STATUS = {
    EnrollOutcome.enrolled: status.HTTP_201_CREATED,
    EnrollOutcome.already_enrolled: status.HTTP_409_CONFLICT,
    EnrollOutcome.failed: status.HTTP_502_BAD_GATEWAY,
}

@router.get("/courses")
async def get_catalog(
    search: str = Query("", description="Matches title, subject or grade level"),
    crud: CourseCRUD = Depends(get_course_crud),
    current_user: Profile = Depends(require_complete_profile)
):
    screen = CourseCatalogScreen(crud)
    await screen.load()
    screen.search(search)
    return screen_response(screen.render())

@router.get("/courses/{course_id}")
async def get_course_details(
    course_id: str,
    courses: CourseCRUD = Depends(get_course_crud),
    enrollments: EnrollmentCRUD = Depends(get_enrollment_crud),
    current_user: Profile = Depends(require_complete_profile)
):
    screen = CourseDetailsScreen(courses, enrollments, current_user.id, course_id)
    await screen.load()
    return screen_response(screen.render())

@router.post("/courses/{course_id}/enroll")
async def enroll_in_course(
    course_id: str,
    courses: CourseCRUD = Depends(get_course_crud),
    enrollments: EnrollmentCRUD = Depends(get_enrollment_crud),
    current_user: Profile = Depends(require_complete_profile)
):
    """Enroll current user in a course"""
    screen = CourseDetailsScreen(courses, enrollments, current_user.id, course_id)
    await screen.load()
    outcome = await screen.enroll()
    payload = screen.render()
    payload["outcome"] = outcome.value
    if outcome == EnrollOutcome.unavailable:
        # Course missing or could not be loaded
        return screen_response(payload)
    return screen_response(payload, status_code=_ENROLL_STATUS[outcome])

@router.get("/enrollments", response_model=List[EnrollmentWithCourse])
async def get_my_enrollments(
    crud: EnrollmentCRUD = Depends(get_enrollment_crud),
    current_user: Profile = Depends(require_complete_profile)
):
    try:
        return await crud.get_user_enrollments_with_courses(current_user.id)
    except StoreError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to load enrollments")
