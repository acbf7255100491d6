"""
Shared fixtures: in-memory data access doubles and an API client wired to them.
"""

import asyncio
from datetime import datetime
from itertools import count

import pytest
from fastapi.testclient import TestClient

from models.course import Course, CourseSummary, Enrollment, EnrollmentWithCourse, TutoringSession
from models.profile import Profile
from utils.errors import DuplicateKeyStoreError, StoreError


class FakeProfiles:
    def __init__(self, *profiles):
        self.profiles = {p.id: p for p in profiles}
        self.passwords = {}
        self.fail_reads = False
        self.fail_writes = False
        self.update_calls = []
        self._ids = count(100)

    async def get_profile(self, user_id):
        if self.fail_reads:
            raise StoreError("store unavailable")
        profile = self.profiles.get(user_id)
        return profile.model_copy() if profile else None

    async def get_credentials(self, email):
        for profile in self.profiles.values():
            if profile.email == email.lower():
                return {"id": profile.id, "password_hash": self.passwords.get(profile.id, "")}
        return None

    async def create_profile(self, email, password_hash):
        if any(p.email == email.lower() for p in self.profiles.values()):
            raise DuplicateKeyStoreError("Email already registered")
        profile = Profile(id=f"user-{next(self._ids)}", email=email.lower(), created_at=datetime.utcnow())
        self.profiles[profile.id] = profile
        self.passwords[profile.id] = password_hash
        return profile

    async def update_profile(self, user_id, update_data):
        self.update_calls.append((user_id, dict(update_data)))
        if self.fail_writes:
            raise StoreError("write rejected")
        profile = self.profiles.get(user_id)
        if profile is None:
            return None
        updated = profile.model_copy(update=update_data)
        self.profiles[user_id] = updated
        return updated


class FakeCourses:
    def __init__(self, courses):
        self.courses = {c.id: c for c in courses}
        self.fail = False

    async def get_courses(self):
        if self.fail:
            raise StoreError("store unavailable")
        return list(self.courses.values())

    async def get_course(self, course_id):
        if self.fail:
            raise StoreError("store unavailable")
        return self.courses.get(course_id) if course_id else None


class FakeEnrollments:
    """Enforces one row per (user, course) like the unique index."""

    def __init__(self, courses=None):
        self.rows = []
        self.courses = courses
        self.fail_writes = False
        self._ids = count(1)

    async def create_enrollment(self, user_id, course_id):
        await asyncio.sleep(0)
        if self.fail_writes:
            raise StoreError("write rejected")
        if any(r.user_id == user_id and r.course_id == course_id for r in self.rows):
            raise DuplicateKeyStoreError("Already enrolled")
        row = Enrollment(id=str(next(self._ids)), user_id=user_id, course_id=course_id,
                         enrolled_at=datetime.utcnow())
        self.rows.append(row)
        return row

    async def get_user_course_enrollment(self, user_id, course_id):
        for row in self.rows:
            if row.user_id == user_id and row.course_id == course_id:
                return row
        return None

    async def get_user_enrollments_with_courses(self, user_id):
        result = []
        for row in sorted(self.rows, key=lambda r: r.enrolled_at, reverse=True):
            if row.user_id != user_id:
                continue
            course = self.courses.courses.get(row.course_id) if self.courses else None
            summary = CourseSummary(**course.model_dump()) if course else None
            result.append(EnrollmentWithCourse(**row.model_dump(), course=summary))
        return result


class FakeSessions:
    def __init__(self, *sessions):
        self.rows = list(sessions)
        self.fail_writes = False
        self.create_calls = 0
        self._ids = count(1)

    async def get_user_sessions(self, user_id):
        mine = [s for s in self.rows if user_id in (s.student_id, s.teacher_id)]
        return sorted(mine, key=lambda s: s.scheduled_at)

    async def create_session(self, session_data):
        self.create_calls += 1
        if self.fail_writes:
            raise StoreError("write rejected")
        session = TutoringSession(id=f"s{next(self._ids)}", **session_data)
        self.rows.append(session)
        return session


@pytest.fixture
def complete_profile():
    return Profile(id="user-1", email="ada@example.com", full_name="Ada Lovelace",
                   role="student", created_at=datetime(2024, 1, 1))


@pytest.fixture
def bare_profile():
    return Profile(id="user-2", email="new@example.com", created_at=datetime(2024, 2, 1))


@pytest.fixture
def courses():
    return [
        Course(id="c1", title="Algebra Foundations", subject="Mathematics", grade_level="Grade 8",
               instructor_name="Dr. Smith", rating=4.8, student_count=120, duration_hours=12),
        Course(id="c2", title="Intro to Chemistry", subject="Science", grade_level="Grade 10",
               instructor_name="Ms. Lee", rating=4.5, student_count=80, duration_hours=20),
        Course(id="c3", title="World History", subject="History", grade_level="Grade 9",
               instructor_name="Mr. Brown", rating=4.2, student_count=45, duration_hours=15),
    ]


@pytest.fixture
def fake_courses(courses):
    return FakeCourses(courses)


@pytest.fixture
def fake_enrollments(fake_courses):
    return FakeEnrollments(fake_courses)


@pytest.fixture
def fake_sessions():
    return FakeSessions()


@pytest.fixture
def fake_profiles(complete_profile, bare_profile):
    return FakeProfiles(complete_profile, bare_profile)


@pytest.fixture
def app(fake_profiles, fake_courses, fake_enrollments, fake_sessions):
    from main import create_app
    from dependencies import (
        get_course_crud, get_enrollment_crud, get_profile_crud, get_session_crud
    )

    app = create_app()
    app.dependency_overrides[get_profile_crud] = lambda: fake_profiles
    app.dependency_overrides[get_course_crud] = lambda: fake_courses
    app.dependency_overrides[get_enrollment_crud] = lambda: fake_enrollments
    app.dependency_overrides[get_session_crud] = lambda: fake_sessions
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def login_as(app):
    """Make every request run as the given profile."""
    from dependencies import get_current_user

    def _login(profile):
        app.dependency_overrides[get_current_user] = lambda: profile
    return _login
