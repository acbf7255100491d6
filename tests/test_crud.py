from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from crud.course import CourseCRUD
from crud.enrollment import EnrollmentCRUD
from crud.profile import ProfileCRUD
from crud.tutoring_session import TutoringSessionCRUD
from utils.errors import DuplicateKeyStoreError, StoreError, ValidationFailed


@pytest.fixture
def db():
    return MagicMock()


@pytest.mark.asyncio
async def test_get_profile_hides_password_hash(db):
    oid = ObjectId()
    db.profiles.find_one = AsyncMock(return_value={
        "_id": oid, "email": "ada@example.com", "full_name": "Ada", "role": "student",
        "password_hash": "$2b$secret", "created_at": datetime(2024, 1, 1),
    })

    profile = await ProfileCRUD(db).get_profile(str(oid))

    assert profile.id == str(oid)
    assert profile.role == "student"
    assert not hasattr(profile, "password_hash")
    db.profiles.find_one.assert_awaited_once_with({"_id": oid})


@pytest.mark.asyncio
async def test_update_profile_only_writes_known_fields(db):
    oid = ObjectId()
    db.profiles.find_one_and_update = AsyncMock(return_value={
        "_id": oid, "email": "ada@example.com", "full_name": "Ada King", "role": "student",
    })

    await ProfileCRUD(db).update_profile(str(oid), {"full_name": "Ada King", "email": "evil@example.com"})

    update = db.profiles.find_one_and_update.call_args.args[1]["$set"]
    assert update["full_name"] == "Ada King"
    assert "email" not in update


@pytest.mark.asyncio
async def test_store_errors_are_wrapped(db):
    db.profiles.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
    with pytest.raises(StoreError):
        await ProfileCRUD(db).get_profile(str(ObjectId()))


@pytest.mark.asyncio
async def test_invalid_course_id_is_not_found(db):
    db.courses.find_one = AsyncMock()
    assert await CourseCRUD(db).get_course("not-an-object-id") is None
    assert await CourseCRUD(db).get_course(None) is None
    db.courses.find_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_duplicate_enrollment_maps_to_duplicate_key(db):
    db.enrollments.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key", code=11000))

    with pytest.raises(DuplicateKeyStoreError) as exc:
        await EnrollmentCRUD(db).create_enrollment(str(ObjectId()), str(ObjectId()))

    assert exc.value.code == 11000


@pytest.mark.asyncio
async def test_create_enrollment_returns_string_ids(db):
    user_id, course_id = str(ObjectId()), str(ObjectId())
    db.enrollments.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))

    enrollment = await EnrollmentCRUD(db).create_enrollment(user_id, course_id)

    assert enrollment.user_id == user_id
    assert enrollment.course_id == course_id
    assert enrollment.status == "active"


@pytest.mark.asyncio
async def test_enrollments_joined_with_course(db):
    user_oid, course_oid = ObjectId(), ObjectId()
    db.enrollments.aggregate.return_value.to_list = AsyncMock(return_value=[{
        "_id": ObjectId(), "user_id": user_oid, "course_id": course_oid, "status": "completed",
        "enrolled_at": datetime(2024, 3, 1),
        "course": {"_id": course_oid, "title": "Algebra", "subject": "Math",
                   "grade_level": "Grade 8", "instructor_name": "Dr. Smith"},
    }])

    rows = await EnrollmentCRUD(db).get_user_enrollments_with_courses(str(user_oid))

    assert rows[0].course.id == str(course_oid)
    assert rows[0].course.title == "Algebra"
    pipeline = db.enrollments.aggregate.call_args.args[0]
    assert pipeline[0] == {"$match": {"user_id": user_oid}}
    assert pipeline[1] == {"$sort": {"enrolled_at": -1}}


@pytest.mark.asyncio
async def test_sessions_query_student_or_teacher(db):
    user_oid = ObjectId()
    cursor = db.tutoring_sessions.find.return_value.sort.return_value
    cursor.to_list = AsyncMock(return_value=[{
        "_id": ObjectId(), "student_id": user_oid, "teacher_id": ObjectId(), "subject": "Physics",
        "scheduled_at": datetime(2030, 1, 1), "duration_hours": 1,
    }])

    sessions = await TutoringSessionCRUD(db).get_user_sessions(str(user_oid))

    query = db.tutoring_sessions.find.call_args.args[0]
    assert query == {"$or": [{"student_id": user_oid}, {"teacher_id": user_oid}]}
    db.tutoring_sessions.find.return_value.sort.assert_called_once_with("scheduled_at", 1)
    assert sessions[0].student_id == str(user_oid)
    assert sessions[0].status is None


@pytest.mark.asyncio
async def test_create_session_refuses_malformed_ids(db):
    db.tutoring_sessions.insert_one = AsyncMock()

    with pytest.raises(ValidationFailed) as exc:
        await TutoringSessionCRUD(db).create_session({
            "student_id": str(ObjectId()), "teacher_id": "nobody", "subject": "Algebra",
            "scheduled_at": datetime(2030, 1, 1), "duration_hours": 2, "status": "scheduled",
        })

    assert exc.value.missing == ["teacher_id"]
    db.tutoring_sessions.insert_one.assert_not_awaited()
