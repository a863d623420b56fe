"""API routes for admin authentication and the admin profile."""
import logging
import time
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from jose import JWTError
from typing import Annotated, Optional

from . import schemas
from . import security as auth_security
from . import service as auth_service
from .models import Admin

logger = logging.getLogger(__name__)
router = APIRouter(
    tags=["Authentication"],
    prefix="/auth"
)


@router.post("/token", response_model=schemas.Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
):
    admin = await auth_service.get_admin_by_username(username=form_data.username)
    if not admin or not auth_security.verify_password(form_data.password, admin.hashed_password):
        logger.info(f"Failed sign-in attempt for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = auth_security.create_access_token(data={"sub": admin.username})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/check-auth", response_model=schemas.AuthStatus, response_model_by_alias=True)
async def check_auth(
    token: Annotated[Optional[str], Depends(auth_security.optional_oauth2_scheme)]
):
    unauthenticated = schemas.AuthStatus(is_authenticated=False, username_password_verified=False)
    if not token:
        return unauthenticated
    try:
        payload = auth_security.decode_access_token(token)
    except JWTError:
        return unauthenticated
    expires_in = int(payload.get("exp", 0)) - int(time.time())
    if expires_in <= 0:
        return unauthenticated
    return schemas.AuthStatus(
        is_authenticated=True, username_password_verified=True, expires_in=expires_in
    )


@router.post("/validate-pin", response_model=schemas.MessageResponse)
async def validate_pin(
    pin_in: schemas.PinRequest,
    current_admin: Annotated[Admin, Depends(auth_security.get_current_admin)],
):
    if not auth_security.verify_pin(pin_in.pin, current_admin.hashed_pin):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid PIN")
    return {"message": "PIN validated successfully"}


@router.post("/logout", response_model=schemas.MessageResponse)
async def logout(response: Response):
    response.delete_cookie("token", path="/", httponly=True)
    return {"message": "Logout successful"}


@router.get("/admin-name", response_model=schemas.AdminNameResponse, response_model_by_alias=True)
async def get_admin_name():
    admin = await auth_service.get_admin()
    return schemas.AdminNameResponse(full_name=admin.full_name)


@router.get("/admin", response_model=schemas.AdminProfileResponse)
async def get_admin_profile(
    current_admin: Annotated[Admin, Depends(auth_security.get_current_admin)],
):
    return auth_service.mask_profile(current_admin)


@router.put("/admin", response_model=schemas.MessageResponse)
async def update_admin_profile(
    update: schemas.AdminUpdate,
    current_admin: Annotated[Admin, Depends(auth_security.get_current_admin)],
):
    hashed_password = auth_security.get_password_hash(update.password) if update.password else None
    hashed_pin = auth_security.get_pin_hash(update.pin) if update.pin else None
    try:
        await auth_service.update_admin(current_admin, update, hashed_password, hashed_pin)
    except Exception as e:
        logger.error(f"Updating admin data failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating admin data",
        )
    return {"message": "Admin data updated successfully"}
