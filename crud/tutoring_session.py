# crud/tutoring_session.py
import logging
from typing import List
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from crud.base import BaseCRUD, to_object_id
from models.course import TutoringSession
from utils.errors import StoreError, ValidationFailed

logger = logging.getLogger(__name__)

class TutoringSessionCRUD(BaseCRUD):
    @property
    def collection(self):
        return self.db.tutoring_sessions

    async def get_user_sessions(self, user_id: str) -> List[TutoringSession]:
        """Sessions where the user is the student or the teacher, earliest first"""
        user_oid = to_object_id(user_id)
        if user_oid is None:
            return []
        try:
            cursor = self.collection.find(
                {"$or": [{"student_id": user_oid}, {"teacher_id": user_oid}]}
            ).sort("scheduled_at", ASCENDING)
            sessions_data = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Error getting sessions for %s: %s", user_id, e)
            raise StoreError(str(e)) from e
        return [TutoringSession(**self._convert_objectids_to_strings(s)) for s in sessions_data]

    async def create_session(self, session_data: dict) -> TutoringSession:
        session_dict = dict(session_data)
        for key in ("student_id", "teacher_id"):
            oid = to_object_id(session_dict.get(key))
            if oid is None:
                raise ValidationFailed([key])
            session_dict[key] = oid
        try:
            result = await self.collection.insert_one(session_dict)
        except PyMongoError as e:
            logger.error("Error creating tutoring session: %s", e)
            raise StoreError(str(e)) from e

        session_dict["_id"] = result.inserted_id
        return TutoringSession(**self._convert_objectids_to_strings(session_dict))
