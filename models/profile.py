# models/profile.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr
import enum

class RoleEnum(str, enum.Enum):
    student = "student"
    teacher = "teacher"

class Profile(BaseModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None  # unset until the completion form is saved
    role: Optional[RoleEnum] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
