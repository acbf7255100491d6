# services/view_router.py
import enum
from dataclasses import dataclass
from typing import Optional, Union


class ViewName(str, enum.Enum):
    catalog = "catalog"
    course_details = "course-details"
    tutoring = "tutoring"
    profile = "profile"


@dataclass(frozen=True)
class CatalogView:
    name = ViewName.catalog


@dataclass(frozen=True)
class CourseDetailsView:
    course_id: str
    name = ViewName.course_details


@dataclass(frozen=True)
class TutoringView:
    name = ViewName.tutoring


@dataclass(frozen=True)
class ProfileView:
    name = ViewName.profile


View = Union[CatalogView, CourseDetailsView, TutoringView, ProfileView]

# Top navigation entries, in display order
NAVIGATION = [
    {"view": ViewName.catalog.value, "label": "Courses"},
    {"view": ViewName.tutoring.value, "label": "Tutoring"},
    {"view": ViewName.profile.value, "label": "Profile"},
]


def make_view(name: Union[ViewName, str], course_id: Optional[str] = None) -> View:
    """Build a view from a name and an optional course id.

    Course details without a course id can't be shown, so it becomes the
    catalog. Unknown names raise ``ValueError``.
    """
    name = ViewName(name)
    if name == ViewName.course_details:
        return CourseDetailsView(course_id) if course_id else CatalogView()
    if name == ViewName.tutoring:
        return TutoringView()
    if name == ViewName.profile:
        return ProfileView()
    return CatalogView()


def select_course(current: View, course_id: str) -> View:
    return make_view(ViewName.course_details, course_id)


def back(current: View) -> View:
    return CatalogView()


def navigate(current: View, target: Union[ViewName, str], course_id: Optional[str] = None) -> View:
    return make_view(target, course_id)


def view_params(view: View) -> dict:
    return {
        "view": view.name.value,
        "course_id": view.course_id if isinstance(view, CourseDetailsView) else None,
    }


class ViewRouter:
    """Holds the dashboard's current view and applies navigation events."""

    def __init__(self, initial: Optional[View] = None):
        self.current: View = initial or CatalogView()

    def select_course(self, course_id: str) -> View:
        self.current = select_course(self.current, course_id)
        return self.current

    def back(self) -> View:
        self.current = back(self.current)
        return self.current

    def navigate(self, target: Union[ViewName, str], course_id: Optional[str] = None) -> View:
        self.current = navigate(self.current, target, course_id)
        return self.current

    def dispatch(self, event: str, course_id: Optional[str] = None, view: Optional[str] = None) -> View:
        if event == "select_course":
            if not course_id:
                raise ValueError("select_course needs a course_id")
            return self.select_course(course_id)
        if event == "back":
            return self.back()
        if event == "navigate":
            if view is None:
                raise ValueError("navigate needs a view")
            return self.navigate(view, course_id)
        raise ValueError(f"Unknown view event: {event}")
