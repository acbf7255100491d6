# schemas/dashboard.py
from typing import Optional
from pydantic import BaseModel, Field

class ViewEvent(BaseModel):
    """A navigation event applied to the view the client is showing"""
    event: str = Field(pattern="^(select_course|back|navigate)$")
    current_view: str = "catalog"
    current_course_id: Optional[str] = None
    view: Optional[str] = None
    course_id: Optional[str] = None
