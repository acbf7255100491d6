# crud/enrollment.py
import logging
from typing import List, Optional
from datetime import datetime
from pymongo.errors import DuplicateKeyError, PyMongoError

from crud.base import BaseCRUD, to_object_id
from models.course import Enrollment, EnrollmentStatus, EnrollmentWithCourse
from utils.errors import StoreError, DuplicateKeyStoreError

logger = logging.getLogger(__name__)

COURSE_SUMMARY_FIELDS = ["title", "subject", "grade_level", "instructor_name"]

class EnrollmentCRUD(BaseCRUD):
    @property
    def collection(self):
        return self.db.enrollments

    async def create_enrollment(self, user_id: str, course_id: str) -> Enrollment:
        """Insert an enrollment; the unique (user_id, course_id) index rejects repeats"""
        enrollment_data = {
            "user_id": to_object_id(user_id),
            "course_id": to_object_id(course_id),
            "status": EnrollmentStatus.active.value,
            "enrolled_at": datetime.utcnow(),
        }
        try:
            result = await self.collection.insert_one(enrollment_data)
        except DuplicateKeyError as e:
            logger.info("User %s already enrolled in course %s", user_id, course_id)
            raise DuplicateKeyStoreError("Already enrolled") from e
        except PyMongoError as e:
            logger.error("Error creating enrollment: %s", e)
            raise StoreError(str(e)) from e

        enrollment_data["_id"] = result.inserted_id
        return Enrollment(**self._convert_objectids_to_strings(enrollment_data))

    async def get_user_course_enrollment(self, user_id: str, course_id: Optional[str]) -> Optional[Enrollment]:
        user_oid, course_oid = to_object_id(user_id), to_object_id(course_id)
        if user_oid is None or course_oid is None:
            return None
        try:
            enrollment = await self.collection.find_one({"user_id": user_oid, "course_id": course_oid})
        except PyMongoError as e:
            logger.error("Error getting enrollment: %s", e)
            raise StoreError(str(e)) from e
        return Enrollment(**self._convert_objectids_to_strings(enrollment)) if enrollment else None

    async def get_user_enrollments_with_courses(self, user_id: str) -> List[EnrollmentWithCourse]:
        """Enrollments of a user, newest first, each joined with its course"""
        user_oid = to_object_id(user_id)
        if user_oid is None:
            return []

        pipeline = [
            {"$match": {"user_id": user_oid}},
            {"$sort": {"enrolled_at": -1}},
            {"$lookup": {
                "from": "courses",
                "localField": "course_id",
                "foreignField": "_id",
                "as": "course",
            }},
            {"$unwind": {"path": "$course", "preserveNullAndEmptyArrays": True}},
            {"$project": {
                "user_id": 1, "course_id": 1, "status": 1, "enrolled_at": 1,
                **{f"course.{field}": 1 for field in ["_id"] + COURSE_SUMMARY_FIELDS},
            }},
        ]
        try:
            rows = await self.collection.aggregate(pipeline).to_list(length=None)
        except PyMongoError as e:
            logger.error("Error getting enrollments for %s: %s", user_id, e)
            raise StoreError(str(e)) from e

        enrollments = []
        for row in rows:
            course = row.pop("course", None)
            data = self._convert_objectids_to_strings(row)
            if course:
                data["course"] = self._convert_objectids_to_strings(course)
            enrollments.append(EnrollmentWithCourse(**data))
        return enrollments
