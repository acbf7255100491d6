# routers/tutoring.py
from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from crud.tutoring_session import TutoringSessionCRUD
from dependencies import get_session_crud, require_complete_profile
from models.profile import Profile
from schemas.tutoring import SessionBooking
from services.tutoring import TutoringSessionsScreen
from utils.errors import StoreError, ValidationFailed
from utils.responses import screen_response

router = APIRouter(prefix="/tutoring-sessions", tags=["tutoring"])

@router.get("")
async def get_sessions(
    crud: TutoringSessionCRUD = Depends(get_session_crud),
    current_user: Profile = Depends(require_complete_profile)
):
    screen = TutoringSessionsScreen(crud, current_user.id)
    await screen.load()
    return screen_response(screen.render())

@router.post("")
async def book_session(
    booking: SessionBooking,
    crud: TutoringSessionCRUD = Depends(get_session_crud),
    current_user: Profile = Depends(require_complete_profile)
):
    screen = TutoringSessionsScreen(crud, current_user.id)
    await screen.load()
    screen.open_form()
    try:
        session = await screen.book(booking.subject, booking.date, booking.duration, booking.teacher_id)
    except ValidationFailed as e:
        payload = screen.render()
        payload["missing"] = e.missing
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=jsonable_encoder(payload))
    except StoreError:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=jsonable_encoder(screen.render()))

    payload = screen.render()
    payload["booked"] = session.model_dump()
    return screen_response(payload, status_code=status.HTTP_201_CREATED)
