# services/dashboard.py
import logging
from typing import Optional

from crud.course import CourseCRUD
from crud.enrollment import EnrollmentCRUD
from crud.profile import ProfileCRUD
from crud.tutoring_session import TutoringSessionCRUD
from models.profile import Profile
from services.catalog import CourseCatalogScreen
from services.course_details import CourseDetailsScreen
from services.profile_gate import ProfileGate
from services.screen import Screen
from services.tutoring import TutoringSessionsScreen
from services.user_profile import UserProfileScreen
from services.view_router import (
    NAVIGATION, CourseDetailsView, ProfileView, TutoringView,
    View, ViewRouter, view_params,
)

logger = logging.getLogger(__name__)


def index_page(user: Optional[Profile], resolving: bool = False) -> dict:
    """Top-level page for the session: loading, login or the dashboard"""
    if resolving:
        return {"page": "loading"}
    if user is None:
        return {"page": "login"}
    return {"page": "dashboard", "user": {"id": user.id, "email": user.email}}


class DataAccess:
    """The data access objects a dashboard needs"""

    def __init__(self, profiles: ProfileCRUD, courses: CourseCRUD,
                 enrollments: EnrollmentCRUD, sessions: TutoringSessionCRUD):
        self.profiles = profiles
        self.courses = courses
        self.enrollments = enrollments
        self.sessions = sessions


class DashboardShell:
    """Gate first, then the screen for the current view."""

    def __init__(self, data: DataAccess, user: Profile, view: Optional[View] = None):
        self.data = data
        self.user = user
        self.router = ViewRouter(view)
        self.gate = ProfileGate(data.profiles, user.id)
        self.screen: Optional[Screen] = None

    def build_screen(self, view: View) -> Screen:
        if isinstance(view, CourseDetailsView):
            return CourseDetailsScreen(self.data.courses, self.data.enrollments, self.user.id, view.course_id)
        if isinstance(view, TutoringView):
            return TutoringSessionsScreen(self.data.sessions, self.user.id)
        if isinstance(view, ProfileView):
            return UserProfileScreen(self.data.profiles, self.data.enrollments, self.user.id)
        return CourseCatalogScreen(self.data.courses, on_course_select=self.router.select_course)

    async def render(self) -> dict:
        await self.gate.load()
        payload = {
            "page": "dashboard",
            "gate": self.gate.render(),
            "view": view_params(self.router.current),
            "navigation": NAVIGATION,
        }
        if not self.gate.released:
            return payload

        if self.screen is not None:
            self.screen.close()
        logger.debug("Rendering %s for %s", self.router.current.name.value, self.user.id)
        self.screen = self.build_screen(self.router.current)
        await self.screen.load()
        payload["screen"] = self.screen.render()
        return payload

    def close(self) -> None:
        self.gate.close()
        if self.screen is not None:
            self.screen.close()
