# crud/course.py
import logging
from typing import List, Optional
from pymongo.errors import PyMongoError

from crud.base import BaseCRUD, to_object_id
from models.course import Course
from utils.errors import StoreError

logger = logging.getLogger(__name__)

class CourseCRUD(BaseCRUD):
    """Courses are read-only for the application"""

    async def get_courses(self) -> List[Course]:
        try:
            courses_data = await self.db.courses.find({}).sort("title", 1).to_list(length=None)
        except PyMongoError as e:
            logger.error("Error getting courses: %s", e)
            raise StoreError(str(e)) from e
        return [Course(**self._convert_objectids_to_strings(c)) for c in courses_data]

    async def get_course(self, course_id: Optional[str]) -> Optional[Course]:
        oid = to_object_id(course_id)
        if oid is None:
            return None
        try:
            course_data = await self.db.courses.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error("Error getting course %s: %s", course_id, e)
            raise StoreError(str(e)) from e
        return Course(**self._convert_objectids_to_strings(course_data)) if course_data else None
