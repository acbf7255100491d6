# crud/profile.py
import logging
from typing import Optional
from datetime import datetime
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from crud.base import BaseCRUD, to_object_id
from models.profile import Profile
from utils.errors import StoreError, DuplicateKeyStoreError

logger = logging.getLogger(__name__)

# Profile fields the application may write
WRITABLE_FIELDS = {"full_name", "role"}

class ProfileCRUD(BaseCRUD):
    @property
    def collection(self):
        return self.db.profiles

    def _to_profile(self, data: dict) -> Profile:
        data = self._convert_objectids_to_strings(data)
        data.pop("password_hash", None)
        return Profile(**data)

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        try:
            profile_data = await self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error("Error getting profile %s: %s", user_id, e)
            raise StoreError(str(e)) from e
        return self._to_profile(profile_data) if profile_data else None

    async def get_credentials(self, email: str) -> Optional[dict]:
        """Return id and password hash for sign-in"""
        try:
            profile_data = await self.collection.find_one(
                {"email": email.lower()},
                {"_id": 1, "password_hash": 1}
            )
        except PyMongoError as e:
            logger.error("Error getting credentials: %s", e)
            raise StoreError(str(e)) from e
        if not profile_data:
            return None
        return {"id": str(profile_data["_id"]), "password_hash": profile_data.get("password_hash", "")}

    async def create_profile(self, email: str, password_hash: str) -> Profile:
        """Create the bare profile at account creation - name and role come later"""
        profile_dict = {
            "email": email.lower(),
            "password_hash": password_hash,
            "full_name": None,
            "role": None,
            "created_at": datetime.utcnow(),
        }
        try:
            result = await self.collection.insert_one(profile_dict)
        except DuplicateKeyError as e:
            logger.warning("Profile already exists for %s", email)
            raise DuplicateKeyStoreError("Email already registered") from e
        except PyMongoError as e:
            logger.error("Error creating profile: %s", e)
            raise StoreError(str(e)) from e

        profile_dict["_id"] = result.inserted_id
        return self._to_profile(profile_dict)

    async def update_profile(self, user_id: str, update_data: dict) -> Optional[Profile]:
        update_data = {k: v for k, v in update_data.items() if k in WRITABLE_FIELDS}
        oid = to_object_id(user_id)
        if oid is None or not update_data:
            return None

        update_data["updated_at"] = datetime.utcnow()
        try:
            result = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error("Error updating profile %s: %s", user_id, e)
            raise StoreError(str(e)) from e
        return self._to_profile(result) if result else None
