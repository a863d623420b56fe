"""Business logic for the admin account: lookup, profile and credential updates."""
from typing import Optional

from fastapi import HTTPException, status

from . import models, schemas


async def get_admin_by_username(username: str) -> Optional[models.Admin]:
    """Retrieves the admin by username.

    Args:
        username: The username to look up.

    Returns:
        The Admin object if found, otherwise None.
    """
    return await models.Admin.get_or_none(username=username)


async def get_admin() -> models.Admin:
    """Returns the single admin account, or raises 404 if none was created yet."""
    admin = await models.Admin.all().order_by("id").first()
    if admin is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")
    return admin


async def create_admin(
    full_name: str, username: str, hashed_password: str, hashed_pin: str,
    password_length: int, pin_length: int,
) -> models.Admin:
    return await models.Admin.create(
        full_name=full_name,
        username=username,
        hashed_password=hashed_password,
        hashed_pin=hashed_pin,
        password_length=password_length,
        pin_length=pin_length,
    )


def mask_profile(admin: models.Admin) -> schemas.AdminProfileResponse:
    return schemas.AdminProfileResponse(
        full_name=admin.full_name,
        username=admin.username,
        password="*" * admin.password_length,
        pin="*" * admin.pin_length,
    )


async def update_admin(
    admin: models.Admin, update: schemas.AdminUpdate,
    hashed_password: Optional[str], hashed_pin: Optional[str],
) -> models.Admin:
    """Updates the profile; password and PIN only change when supplied."""
    admin.full_name = update.full_name
    admin.username = update.username
    if hashed_password:
        admin.hashed_password = hashed_password
        admin.password_length = len(update.password)
    if hashed_pin:
        admin.hashed_pin = hashed_pin
        admin.pin_length = len(update.pin)
    await admin.save()
    return admin
