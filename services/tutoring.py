# services/tutoring.py
import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from crud.base import to_object_id
from crud.tutoring_session import TutoringSessionCRUD
from models.course import SessionStatus, TutoringSession
from services.screen import Screen
from utils.errors import StoreError, ValidationFailed

logger = logging.getLogger(__name__)

DURATION_CHOICES = ("1", "2", "3")
DEFAULT_DURATION = "1"

STATUS_COLORS = {
    SessionStatus.scheduled.value: "blue",
    SessionStatus.completed.value: "green",
    SessionStatus.cancelled.value: "red",
}

def session_status(session: TutoringSession) -> str:
    return session.status or SessionStatus.scheduled.value

def status_badge(session: TutoringSession) -> dict:
    status = session_status(session)
    return {"label": status, "color": STATUS_COLORS.get(status, "gray")}

def duration_label(hours: int) -> str:
    return f"{hours} hour{'s' if hours > 1 else ''}"


class BookingForm(BaseModel):
    subject: str = ""
    date: Optional[datetime] = None
    duration: str = DEFAULT_DURATION

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.subject.strip():
            missing.append("subject")
        if self.date is None:
            missing.append("date")
        if self.duration not in DURATION_CHOICES:
            missing.append("duration")
        return missing


class TutoringSessionsScreen(Screen):
    def __init__(self, sessions: TutoringSessionCRUD, user_id: Optional[str]):
        super().__init__()
        self.crud = sessions
        self.user_id = user_id
        self.sessions: List[TutoringSession] = []
        self.loading = True
        self.dialog_open = False
        self.form = BookingForm()

    async def load(self) -> None:
        if not self.user_id:
            return
        try:
            sessions = await self.crud.get_user_sessions(self.user_id)
        except StoreError:
            logger.exception("Error fetching sessions for %s", self.user_id)
            if not self.closed:
                self.load_failed = True
                self.notify("load_failed")
                self.loading = False
            return
        if not self.closed:
            self.sessions = sessions
            self.loading = False

    def open_form(self) -> None:
        self.dialog_open = True

    def reset_form(self) -> None:
        self.dialog_open = False
        self.form = BookingForm()

    async def book(self, subject: str, date: Optional[datetime], duration=DEFAULT_DURATION,
                   teacher_id: Optional[str] = None) -> TutoringSession:
        """Book a session for the current user.

        Missing fields, or a malformed teacher id, raise
        ``ValidationFailed`` before anything is written.
        Without a teacher the student is booked as their own teacher.
        """
        self.form = BookingForm(subject=subject or "", date=date, duration=str(duration))
        missing = self.form.missing_fields()
        if not self.user_id:
            missing.insert(0, "user")
        if teacher_id and to_object_id(teacher_id) is None:
            missing.append("teacher_id")
        if missing:
            self.notify("session_incomplete")
            raise ValidationFailed(missing)

        try:
            session = await self.crud.create_session({
                "student_id": self.user_id,
                "teacher_id": teacher_id or self.user_id,
                "subject": self.form.subject.strip(),
                "scheduled_at": self.form.date,
                "duration_hours": int(self.form.duration),
                "status": SessionStatus.scheduled.value,
            })
        except StoreError:
            logger.exception("Error booking session for %s", self.user_id)
            self.notify("booking_failed")
            raise

        self.notify("session_booked")
        self.reset_form()
        await self.load()
        return session

    def render(self) -> dict:
        return {
            "screen": "tutoring",
            "status": "loading" if self.loading else ("error" if self.load_failed else "ready"),
            "sessions": [
                {
                    **s.model_dump(),
                    "status": session_status(s),
                    "badge": status_badge(s),
                    "duration_label": duration_label(s.duration_hours),
                }
                for s in self.sessions
            ],
            "form": {
                "open": self.dialog_open,
                "subject": self.form.subject,
                "date": self.form.date.isoformat() if self.form.date else None,
                "duration": self.form.duration,
                "durations": list(DURATION_CHOICES),
            },
            "notifications": [n.model_dump() for n in self.notifications],
        }
