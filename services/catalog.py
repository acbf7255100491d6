# services/catalog.py
import logging
from typing import Callable, Iterable, List, Optional

from crud.course import CourseCRUD
from models.course import Course
from services.screen import Screen
from utils.errors import StoreError

logger = logging.getLogger(__name__)

def course_matches(course: Course, term: str) -> bool:
    needle = term.lower()
    return (
        needle in course.title.lower()
        or needle in course.subject.lower()
        or needle in course.grade_level.lower()
    )

def filter_courses(courses: Iterable[Course], term: str) -> List[Course]:
    """Courses whose title, subject or grade level contain the term, ignoring case"""
    return [course for course in courses if course_matches(course, term or "")]


class CourseCatalogScreen(Screen):
    def __init__(self, courses: CourseCRUD, on_course_select: Optional[Callable[[str], None]] = None):
        super().__init__()
        self.crud = courses
        self.on_course_select = on_course_select
        self.courses: List[Course] = []
        self.loading = True
        self.search_term = ""

    async def load(self) -> None:
        try:
            courses = await self.crud.get_courses()
        except StoreError:
            logger.exception("Error loading course catalog")
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
                self.loading = False
            return

        if self.closed:
            return
        self.courses = courses
        self.loading = False

    def search(self, term: str) -> List[Course]:
        self.search_term = term or ""
        return self.filtered

    @property
    def filtered(self) -> List[Course]:
        return filter_courses(self.courses, self.search_term)

    def select(self, course_id: str) -> None:
        if self.on_course_select is not None:
            self.on_course_select(course_id)

    def render(self) -> dict:
        filtered = [] if self.loading else self.filtered
        if self.loading:
            status = "loading"
        elif self.load_failed:
            status = "error"
        elif not self.courses:
            status = "empty"
        elif not filtered:
            status = "no-matches"
        else:
            status = "ready"

        return {
            "screen": "catalog",
            "status": status,
            "search": self.search_term,
            "total": len(self.courses),
            "courses": [c.model_dump() for c in filtered],
            "notifications": [n.model_dump() for n in self.notifications],
        }
