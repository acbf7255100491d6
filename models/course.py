# models/course.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
import enum

class EnrollmentStatus(str, enum.Enum):
    active = "active"
    completed = "completed"

class SessionStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"

class StoreModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class Course(StoreModel):
    id: str
    title: str
    subject: str
    grade_level: str
    description: Optional[str] = None
    instructor_name: Optional[str] = None
    rating: Optional[float] = None
    student_count: int = 0
    duration_hours: Optional[float] = None
    language: str = "en"

class CourseSummary(StoreModel):
    """Course columns shown next to an enrollment"""
    id: str
    title: str
    subject: str
    grade_level: str
    instructor_name: Optional[str] = None

class Enrollment(StoreModel):
    id: str
    user_id: str
    course_id: str
    # Any status string the store holds is accepted; new rows are "active"
    status: str = EnrollmentStatus.active.value
    enrolled_at: datetime = Field(default_factory=datetime.utcnow)

class EnrollmentWithCourse(Enrollment):
    course: Optional[CourseSummary] = None

class TutoringSession(StoreModel):
    id: str
    student_id: str
    teacher_id: str
    subject: str
    scheduled_at: datetime
    duration_hours: int = 1
    status: Optional[str] = None  # absent means scheduled
