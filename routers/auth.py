# routers/auth.py
import logging
from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import EmailStr, TypeAdapter, ValidationError

from crud.profile import ProfileCRUD
from dependencies import get_current_user, get_profile_crud
from models.profile import Profile
from schemas.profile import ProfileOut, Token
from utils.errors import DuplicateKeyStoreError, StoreError
from utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

_email_adapter = TypeAdapter(EmailStr)

# Signup - creates the account and a bare profile; name and role are collected by the gate
@router.post("/signup", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
async def signup(
    email: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(...),
    crud: ProfileCRUD = Depends(get_profile_crud)
):
    try:
        email = _email_adapter.validate_python(email.strip())
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid email address")
    if not password:
        raise HTTPException(status_code=400, detail="Password is required")
    if password != confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    try:
        profile = await crud.create_profile(email, hash_password(password))
    except DuplicateKeyStoreError:
        raise HTTPException(status_code=400, detail="Email already registered")
    except StoreError:
        raise HTTPException(status_code=502, detail="Failed to create account")

    logger.info("✅ Account created: %s", profile.email)
    return profile

# Login - No authentication required
@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    crud: ProfileCRUD = Depends(get_profile_crud)
):
    email = form_data.username.strip().lower()
    try:
        credentials = await crud.get_credentials(email)
        if not credentials or not verify_password(form_data.password, credentials["password_hash"]):
            logger.info("Failed sign-in for %s", email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        profile = await crud.get_profile(credentials["id"])
    except StoreError:
        raise HTTPException(status_code=502, detail="Could not reach the data store")

    access_token = create_access_token(data={"sub": credentials["id"]})
    return Token(access_token=access_token, user=ProfileOut.model_validate(profile) if profile else None)

# Sign-out - tokens are stateless, the client drops its copy
@router.post("/logout")
async def logout(current_user: Profile = Depends(get_current_user)):
    logger.info("Signed out: %s", current_user.email)
    return {"message": "Signed out", "page": "login"}

@router.get("/me", response_model=ProfileOut)
async def me(current_user: Profile = Depends(get_current_user)):
    return current_user
