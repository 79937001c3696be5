from __future__ import annotations

from pathlib import Path
import sys
from typing import Optional

import typer
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from sehd_api.db import engine, init_db  # noqa: E402
from sehd_api.models import User, UserRoleEnum  # noqa: E402
from sehd_api.routers.health import count_entities  # noqa: E402
from sehd_api.security import hash_password  # noqa: E402
from sehd_api.seed import ensure_demo_data  # noqa: E402

APP = typer.Typer(add_completion=False, help="Operator commands for the SEHD admissions database.")


@APP.command("init-db")
def init_db_command() -> None:
    """Create any missing tables."""
    try:
        init_db()
    except SQLAlchemyError as exc:
        typer.secho(f"Could not initialise the database: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho("Schema ready.", fg=typer.colors.GREEN)


@APP.command("seed")
def seed_command() -> None:
    """Create tables and load departments, terms, programs, admission figures and users."""
    init_db()
    ensure_demo_data()
    with Session(engine) as session:
        counts = count_entities(session)
    for name, value in counts.items():
        typer.echo(f"{name}: {value}")


@APP.command("create-user")
def create_user_command(
    email: str = typer.Option(..., prompt=True),
    role: UserRoleEnum = typer.Option(UserRoleEnum.viewer, case_sensitive=False),
    first_name: Optional[str] = typer.Option(None),
    last_name: Optional[str] = typer.Option(None),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create a user, or reset the password and role of an existing one."""
    normalized_email = email.strip()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == normalized_email)).first()
        if user:
            typer.echo(f"Updating existing user {normalized_email}.")
        else:
            user = User(email=normalized_email, password_hash="", role=role.value)
        user.password_hash = hash_password(password)
        user.role = role.value
        user.is_active = True
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        session.add(user)
        session.commit()
        session.refresh(user)
        typer.secho(f"User {user.email} ({user.role}) saved with id {user.id}.", fg=typer.colors.GREEN)


@APP.command("hash-password")
def hash_password_command(password: str = typer.Argument(...)) -> None:
    """Print the stored credential for a plaintext password using the configured scheme."""
    typer.echo(hash_password(password))


if __name__ == "__main__":
    APP()
