# flake8: noqa
# scripts/create_admin.py

"""
Bootstraps the first admin account (registration is admin-only).

    python -m scripts.create_admin --email admin@example.com --username admin
"""

import asyncio
import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import AsyncSessionLocal, create_db_and_tables
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserRole

cli = typer.Typer()


async def create_admin_user(db: AsyncSession, user_in: usr_schemas.UserCreate) -> bool:
    """Creates the admin user unless the e-mail or username is taken."""
    if await usr_crud.user.get_by_email(db, email=user_in.email):
        typer.secho(f"Error: e-mail already registered: {user_in.email}", fg=typer.colors.RED)
        return False
    if await usr_crud.user.get_by_username(db, username=user_in.username):
        typer.secho(f"Error: username already taken: {user_in.username}", fg=typer.colors.RED)
        return False

    await usr_crud.user.create(db, obj_in=user_in)
    typer.secho(f"Admin account created: {user_in.email} ({user_in.username})", fg=typer.colors.GREEN)
    return True


@cli.command()
def main(
    email: str = typer.Option(..., '--email', '-e', prompt="Admin e-mail", help="E-mail address of the admin account."),
    username: str = typer.Option(..., '--username', '-u', prompt="Admin username", help="Login name of the admin account."),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="Admin password",
        hide_input=True,
        confirmation_prompt=True,
        help="Password of the admin account (at least 8 characters)."
    ),
    full_name: str = typer.Option("Admin", '--name', '-n', help="Display name of the admin."),
    create_tables: bool = typer.Option(False, '--create-tables', help="Create missing tables first."),
):
    """
    Creates a new admin account for the StockBill API.
    """
    if len(password) < 8:
        typer.secho("Error: the password must be at least 8 characters long.", fg=typer.colors.RED)
        raise typer.Abort()

    user_data = usr_schemas.UserCreate(
        email=email,
        username=username,
        password=password,
        full_name=full_name,
        role=UserRole.ADMIN,
    )

    async def run_creation() -> bool:
        if create_tables:
            await create_db_and_tables()
        async with AsyncSessionLocal() as db:
            return await create_admin_user(db=db, user_in=user_data)

    if not asyncio.run(run_creation()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
