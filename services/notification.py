# services/notification.py
from pydantic import BaseModel

class Notification(BaseModel):
    """A dismissable message shown to the user"""
    kind: str
    title: str
    description: str
    variant: str = "default"

# kind -> (title, description, variant)
_NOTIFICATIONS = {
    "enrolled": ("Enrollment Successful", "You have been enrolled in the course!", "default"),
    "already_enrolled": ("Already Enrolled", "You are already enrolled in this course.", "destructive"),
    "enroll_failed": ("Enrollment Failed", "There was an error enrolling in the course.", "destructive"),
    "profile_completed": ("Profile Updated", "Your profile has been completed successfully!", "default"),
    "profile_updated": ("Profile Updated", "Your profile has been updated successfully.", "default"),
    "profile_incomplete": ("Incomplete Information", "Please fill in all required fields.", "destructive"),
    "profile_complete_failed": ("Update Failed", "There was an error updating your profile. Please try again.", "destructive"),
    "profile_update_failed": ("Update Failed", "There was an error updating your profile.", "destructive"),
    "session_booked": ("Session Booked", "Your tutoring session has been scheduled!", "default"),
    "session_incomplete": ("Incomplete Information", "Please enter a subject, pick a date and choose a valid teacher.", "destructive"),
    "booking_failed": ("Booking Failed", "There was an error booking your session.", "destructive"),
    "load_failed": ("Loading Failed", "There was an error loading your data. Please try again.", "destructive"),
}

def build_notification(kind: str) -> Notification:
    title, description, variant = _NOTIFICATIONS.get(
        kind, ("Notification", "You have a new notification", "default")
    )
    return Notification(kind=kind, title=title, description=description, variant=variant)
