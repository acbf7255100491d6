# services/course_details.py
import asyncio
import enum
import logging
from typing import Optional

from crud.course import CourseCRUD
from crud.enrollment import EnrollmentCRUD
from models.course import Course, Enrollment
from services.screen import Screen
from utils.errors import DuplicateKeyStoreError, StoreError

logger = logging.getLogger(__name__)

class EnrollOutcome(str, enum.Enum):
    enrolled = "enrolled"
    already_enrolled = "already_enrolled"
    failed = "failed"
    unavailable = "unavailable"


class CourseDetailsScreen(Screen):
    """Course record plus the current user's enrollment in it.

    Both are fetched concurrently on load and fill separate parts of the
    screen. Enrolling is only possible once both have settled and no other
    enroll request is running.
    """

    def __init__(self, courses: CourseCRUD, enrollments: EnrollmentCRUD, user_id: str, course_id: Optional[str]):
        super().__init__()
        self.courses = courses
        self.enrollments = enrollments
        self.user_id = user_id
        self.course_id = course_id
        self.course: Optional[Course] = None
        self.enrollment: Optional[Enrollment] = None
        self.course_loading = True
        self.enrollment_loading = True
        self.enrolling = False

    async def load(self) -> None:
        await asyncio.gather(self._fetch_course(), self._fetch_enrollment())

    async def _fetch_course(self) -> None:
        course = None
        try:
            course = await self.courses.get_course(self.course_id)
        except StoreError:
            logger.exception("Error loading course %s", self.course_id)
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
        if not self.closed:
            self.course = course
            self.course_loading = False

    async def _fetch_enrollment(self) -> None:
        try:
            enrollment = await self.enrollments.get_user_course_enrollment(self.user_id, self.course_id)
        except StoreError:
            logger.exception("Error loading enrollment for course %s", self.course_id)
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
                self.enrollment_loading = False
            return
        if not self.closed:
            self.enrollment = enrollment
            self.enrollment_loading = False

    @property
    def not_found(self) -> bool:
        return not self.course_loading and self.course is None and not self.load_failed

    @property
    def is_enrolled(self) -> bool:
        return self.enrollment is not None

    @property
    def can_enroll(self) -> bool:
        return (
            self.course is not None
            and not self.course_loading
            and not self.enrollment_loading
            and not self.enrolling
        )

    async def enroll(self) -> EnrollOutcome:
        if not self.can_enroll:
            return EnrollOutcome.unavailable

        if self.is_enrolled:
            self.notify("already_enrolled")
            return EnrollOutcome.already_enrolled

        self.enrolling = True
        try:
            await self.enrollments.create_enrollment(self.user_id, self.course_id)
        except DuplicateKeyStoreError:
            self.notify("already_enrolled")
            return EnrollOutcome.already_enrolled
        except StoreError:
            logger.exception("Error enrolling %s in course %s", self.user_id, self.course_id)
            self.notify("enroll_failed")
            return EnrollOutcome.failed
        finally:
            self.enrolling = False

        self.notify("enrolled")
        # Refresh from the store so the status reflects what was written
        self.enrollment_loading = True
        await self._fetch_enrollment()
        return EnrollOutcome.enrolled

    def render(self) -> dict:
        if self.course_loading:
            status = "loading"
        elif self.load_failed and self.course is None:
            status = "error"
        elif self.not_found:
            status = "not-found"
        else:
            status = "ready"

        payload = {
            "screen": "course-details",
            "status": status,
            "course_id": self.course_id,
            "course": self.course.model_dump() if self.course else None,
            "enrolled": self.is_enrolled,
            "enrollment": self.enrollment.model_dump() if self.enrollment else None,
            "can_enroll": self.can_enroll and not self.is_enrolled,
            "notifications": [n.model_dump() for n in self.notifications],
        }
        if status == "not-found":
            payload["recovery"] = {"label": "Back to Catalog", "event": "back"}
        return payload
