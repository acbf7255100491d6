# schemas/profile.py
from typing import Optional
from pydantic import BaseModel, EmailStr

from models.profile import RoleEnum

class ProfileCompletion(BaseModel):
    # Presence is checked by the gate so a blank form gets a notification, not a 422 from pydantic
    full_name: str = ""
    role: Optional[str] = None

class ProfileNameUpdate(BaseModel):
    full_name: str

class ProfileOut(BaseModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    role: Optional[RoleEnum] = None

    class Config:
        from_attributes = True
        use_enum_values = True

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[ProfileOut] = None
