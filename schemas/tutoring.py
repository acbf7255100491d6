# schemas/tutoring.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class SessionBooking(BaseModel):
    # Required fields are checked by the screen so a missing one gets a notification
    subject: str = ""
    date: Optional[datetime] = None
    duration: str = "1"
    teacher_id: Optional[str] = None
