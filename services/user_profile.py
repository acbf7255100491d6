# services/user_profile.py
import asyncio
import logging
from typing import List, Optional

from crud.enrollment import EnrollmentCRUD
from crud.profile import ProfileCRUD
from models.course import EnrollmentStatus, EnrollmentWithCourse
from models.profile import Profile
from services.screen import Screen
from utils.errors import StoreError, ValidationFailed

logger = logging.getLogger(__name__)

def learning_stats(enrollments: List[EnrollmentWithCourse]) -> dict:
    return {
        "enrolled": len(enrollments),
        "completed": sum(1 for e in enrollments if e.status == EnrollmentStatus.completed.value),
    }


class UserProfileScreen(Screen):
    def __init__(self, profiles: ProfileCRUD, enrollments: EnrollmentCRUD, user_id: str):
        super().__init__()
        self.profiles = profiles
        self.enrollments_crud = enrollments
        self.user_id = user_id
        self.profile: Optional[Profile] = None
        self.enrollments: List[EnrollmentWithCourse] = []
        self.profile_loading = True
        self.editing = False
        self.edit_name = ""

    async def load(self) -> None:
        await asyncio.gather(self._fetch_profile(), self._fetch_enrollments())

    async def _fetch_profile(self) -> None:
        try:
            profile = await self.profiles.get_profile(self.user_id)
        except StoreError:
            logger.exception("Error fetching profile %s", self.user_id)
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
                self.profile_loading = False
            return
        if not self.closed:
            self.profile = profile
            self.profile_loading = False

    async def _fetch_enrollments(self) -> None:
        try:
            enrollments = await self.enrollments_crud.get_user_enrollments_with_courses(self.user_id)
        except StoreError:
            logger.exception("Error fetching enrollments for %s", self.user_id)
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
            return
        if not self.closed:
            self.enrollments = enrollments

    def start_edit(self) -> None:
        self.editing = True
        self.edit_name = (self.profile.full_name or "") if self.profile else ""

    def cancel_edit(self) -> None:
        self.editing = False

    async def save(self) -> bool:
        """Persist the edited full name; other profile fields are not touched here"""
        if self.profile is None:
            return False
        if not self.edit_name.strip():
            self.notify("profile_incomplete")
            raise ValidationFailed(["full_name"])

        try:
            updated = await self.profiles.update_profile(self.user_id, {"full_name": self.edit_name.strip()})
        except StoreError:
            logger.exception("Error updating profile %s", self.user_id)
            self.notify("profile_update_failed")
            return False
        if updated is None:
            self.notify("profile_update_failed")
            return False

        self.notify("profile_updated")
        self.editing = False
        await self._fetch_profile()
        return True

    def render(self) -> dict:
        if self.profile_loading:
            status = "loading"
        elif self.profile is None:
            status = "error" if self.load_failed else "not-found"
        else:
            status = "ready"
        return {
            "screen": "profile",
            "status": status,
            "profile": self.profile.model_dump() if self.profile else None,
            "editing": self.editing,
            "edit_name": self.edit_name if self.editing else None,
            "stats": learning_stats(self.enrollments),
            "enrollments": [e.model_dump() for e in self.enrollments],
            "notifications": [n.model_dump() for n in self.notifications],
        }
