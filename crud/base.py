# crud/base.py
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

# Reference fields stored as ObjectId
OBJECT_ID_FIELDS = ['user_id', 'course_id', 'student_id', 'teacher_id']

def to_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """Return an ObjectId, or None when the value can't be one"""
    if not value:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None

class BaseCRUD:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    def _convert_objectids_to_strings(self, data: dict) -> dict:
        if not data:
            return data

        converted = data.copy()

        if '_id' in converted and converted['_id']:
            converted['id'] = str(converted['_id'])
            del converted['_id']

        for key in OBJECT_ID_FIELDS:
            if key in converted and isinstance(converted[key], ObjectId):
                converted[key] = str(converted[key])

        return converted
