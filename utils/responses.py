# utils/responses.py
from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

# Screen status -> HTTP status
_STATUS_CODES = {
    "not-found": status.HTTP_404_NOT_FOUND,
    "error": status.HTTP_502_BAD_GATEWAY,
}

def screen_response(payload: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Render a screen payload, using 404/502 when the screen could not be shown"""
    code = _STATUS_CODES.get(payload.get("status"), status_code)
    return JSONResponse(status_code=code, content=jsonable_encoder(payload))
