# routers/profile.py
from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from crud.enrollment import EnrollmentCRUD
from crud.profile import ProfileCRUD
from dependencies import (
    get_current_user, get_enrollment_crud, get_profile_crud, require_complete_profile
)
from models.profile import Profile
from schemas.profile import ProfileCompletion, ProfileNameUpdate
from services.profile_gate import ProfileGate
from services.user_profile import UserProfileScreen
from utils.errors import ValidationFailed
from utils.responses import screen_response

router = APIRouter(prefix="/profile", tags=["profile"])

# Gate state - any signed-in user, complete or not
@router.get("/gate")
async def get_gate(
    current_user: Profile = Depends(get_current_user),
    crud: ProfileCRUD = Depends(get_profile_crud)
):
    gate = ProfileGate(crud, current_user.id)
    await gate.load()
    return gate.render()

@router.post("/complete")
async def complete_profile(
    form: ProfileCompletion,
    current_user: Profile = Depends(get_current_user),
    crud: ProfileCRUD = Depends(get_profile_crud)
):
    gate = ProfileGate(crud, current_user.id)
    await gate.load()
    if gate.released:
        # Role is fixed once set; the name is edited from the profile screen
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=jsonable_encoder(gate.render()))
    try:
        await gate.submit(form.full_name, form.role)
    except ValidationFailed as e:
        payload = gate.render()
        payload["missing"] = e.missing
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=jsonable_encoder(payload))

    if not gate.released:
        # Save failed; the form stays so the user can retry
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=jsonable_encoder(gate.render()))
    return gate.render()

@router.get("")
async def get_profile_screen(
    current_user: Profile = Depends(require_complete_profile),
    profiles: ProfileCRUD = Depends(get_profile_crud),
    enrollments: EnrollmentCRUD = Depends(get_enrollment_crud)
):
    screen = UserProfileScreen(profiles, enrollments, current_user.id)
    await screen.load()
    return screen_response(screen.render())

# Only the full name is editable from the profile screen
@router.put("")
async def update_profile_name(
    update: ProfileNameUpdate,
    current_user: Profile = Depends(require_complete_profile),
    profiles: ProfileCRUD = Depends(get_profile_crud),
    enrollments: EnrollmentCRUD = Depends(get_enrollment_crud)
):
    screen = UserProfileScreen(profiles, enrollments, current_user.id)
    await screen.load()
    screen.start_edit()
    screen.edit_name = update.full_name
    try:
        saved = await screen.save()
    except ValidationFailed as e:
        payload = screen.render()
        payload["missing"] = e.missing
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=jsonable_encoder(payload))

    if not saved:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=jsonable_encoder(screen.render()))
    return screen_response(screen.render())
