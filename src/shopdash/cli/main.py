import asyncio
import logging
import typer
from tortoise import Tortoise
from tortoise.exceptions import IntegrityError

from shopdash.core.config import DATABASE_URL
from shopdash.features.auth import service as auth_service
from shopdash.features.auth.models import Admin
from shopdash.features.auth.security import get_password_hash, get_pin_hash
from shopdash.main import TORTOISE_ORM_CONFIG

logger = logging.getLogger(__name__)

app = typer.Typer(name="shopdash-cli", help="CLI for managing the Shopdash admin backend.")


# Shared async context manager for database connection
class DBConnection:
    async def __aenter__(self):
        await Tortoise.init(config=TORTOISE_ORM_CONFIG)
        await Tortoise.generate_schemas(safe=True)  # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


# Admin account commands
admin_app = typer.Typer(name="admin", help="Manage the administrator account.")
app.add_typer(admin_app)


@admin_app.command("create")
def create_admin_command(
    full_name: str = typer.Option(..., prompt=True, help="Display name of the admin."),
    username: str = typer.Option(..., prompt=True, help="Username for signing in."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password, at least 8 characters."),
    pin: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="PIN required for sensitive actions."),
):
    """Creates the administrator account."""
    if len(password) < 8:
        typer.secho("Error: the password must be at least 8 characters long.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    asyncio.run(_create_admin(full_name, username, password, pin))


async def _create_admin(full_name: str, username: str, password: str, pin: str):
    async with DBConnection():
        typer.echo(f"Attempting to create admin '{username}'...")
        if await Admin.all().exists():
            typer.secho("Error: an admin account already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        try:
            admin = await auth_service.create_admin(
                full_name=full_name,
                username=username,
                hashed_password=get_password_hash(password),
                hashed_pin=get_pin_hash(pin),
                password_length=len(password),
                pin_length=len(pin),
            )
        except IntegrityError as e:
            typer.secho(f"Error creating admin: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.secho(f"Admin '{admin.username}' created with ID: {admin.public_id}", fg=typer.colors.GREEN)


@admin_app.command("set-pin")
def set_pin_command(
    username: str = typer.Argument(..., help="The admin's username."),
    pin: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="The new PIN."),
):
    """Replaces the admin's PIN."""
    asyncio.run(_set_pin(username, pin))


async def _set_pin(username: str, pin: str):
    async with DBConnection():
        admin = await auth_service.get_admin_by_username(username)
        if not admin:
            typer.secho(f"Error: admin '{username}' not found.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        admin.hashed_pin = get_pin_hash(pin)
        admin.pin_length = len(pin)
        await admin.save(update_fields=["hashed_pin", "pin_length", "updated_at"])
        typer.secho(f"PIN updated for '{username}'.", fg=typer.colors.GREEN)


@admin_app.command("reset-password")
def reset_password_command(
    username: str = typer.Argument(..., help="The admin's username."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="The new password."),
):
    """Replaces the admin's password."""
    if len(password) < 8:
        typer.secho("Error: the password must be at least 8 characters long.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    asyncio.run(_reset_password(username, password))


async def _reset_password(username: str, password: str):
    async with DBConnection():
        admin = await auth_service.get_admin_by_username(username)
        if not admin:
            typer.secho(f"Error: admin '{username}' not found.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        admin.hashed_password = get_password_hash(password)
        admin.password_length = len(password)
        await admin.save(update_fields=["hashed_password", "password_length", "updated_at"])
        typer.secho(f"Password reset for '{username}'.", fg=typer.colors.GREEN)


@app.command("test-db-connection")
def test_db_connection_command_sync():
    """Tests the database connection and reports the admin account."""
    asyncio.run(test_db_connection_command())


async def test_db_connection_command():
    async with DBConnection():
        typer.echo(f"Successfully connected to {DATABASE_URL}.")
        admin_count = await Admin.all().count()
        typer.echo(f"Found {admin_count} admin account(s) in the database.")
        if admin_count > 0:
            admin = await Admin.first()
            typer.echo(f"Admin: {admin.full_name} ({admin.username})")


if __name__ == "__main__":
    app()
