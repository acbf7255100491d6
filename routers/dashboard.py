# routers/dashboard.py
import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dependencies import get_current_user, get_data_access, get_session
from models.profile import Profile
from schemas.dashboard import ViewEvent
from services.dashboard import DashboardShell, DataAccess, index_page
from services.view_router import ViewName, ViewRouter, make_view, view_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])

def _view_or_400(name: str, course_id: Optional[str]):
    try:
        return make_view(name, course_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown view '{name}'. Choose one of: {', '.join(v.value for v in ViewName)}"
        )

@router.get("/")
async def index(session: Tuple[Optional[Profile], bool] = Depends(get_session)):
    current_user, resolved = session
    return index_page(current_user, resolving=not resolved)

@router.get("/dashboard")
async def render_dashboard(
    view: str = Query(ViewName.catalog.value),
    course_id: Optional[str] = Query(None),
    data: DataAccess = Depends(get_data_access),
    current_user: Profile = Depends(get_current_user)
):
    shell = DashboardShell(data, current_user, _view_or_400(view, course_id))
    try:
        return await shell.render()
    finally:
        shell.close()

@router.post("/dashboard/transition")
async def transition(event: ViewEvent, current_user: Profile = Depends(get_current_user)):
    router_state = ViewRouter(_view_or_400(event.current_view, event.current_course_id))
    try:
        new_view = router_state.dispatch(event.event, course_id=event.course_id, view=event.view)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.debug("View transition for %s: %s -> %s", current_user.id, event.current_view, new_view.name.value)
    return view_params(new_view)
