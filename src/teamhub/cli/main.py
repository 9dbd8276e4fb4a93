"""TeamHub admin CLI — database setup and account maintenance.

Usage:
    teamhub init-db                                  # Create missing tables
    teamhub seed                                     # Demo admin + member accounts
    teamhub create-user a@x.com --name Ada --role admin
    teamhub set-password a@x.com                     # Prompted, never echoed
    teamhub serve                                    # Run the API with uvicorn

Talks to the database named by TEAMHUB_DATABASE_URL directly, not to a
running server, so it works before the first deploy.
"""

from __future__ import annotations

import asyncio
import sys

import click

from teamhub.config import settings

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

DEMO_USERS = [
    {
        "email": "admin@example.com",
        "password": "admin123",
        "name": "Admin User",
        "role": "admin",
        "skills": "Management,Leadership",
    },
    {
        "email": "user@example.com",
        "password": "user123",
        "name": "Regular User",
        "role": "user",
        "skills": "React,Node.js",
    },
]


def _run(coro):
    """Run an async coroutine from a synchronous Click handler."""
    return asyncio.run(coro)


async def _init_db() -> None:
    from teamhub.db.engine import engine, init_models

    await init_models(engine)
    await engine.dispose()


async def _seed() -> list[tuple[str, str]]:
    """Create or refresh the demo accounts. Both end up approved."""
    from teamhub.db.engine import async_session_factory, engine, init_models
    from teamhub.db.models import STATUS_APPROVED
    from teamhub.services.auth_service import AuthService

    results = []
    try:
        await init_models(engine)
        async with async_session_factory() as db:
            svc = AuthService(db)
            for demo in DEMO_USERS:
                user = await svc.store.find_by_email(demo["email"])
                if user is None:
                    user = await svc.signup(**demo)
                    action = "created"
                else:
                    await svc.set_password(user.id, demo["password"])
                    action = "updated"
                if user.status != STATUS_APPROVED:
                    await svc.store.update_status(user.id, STATUS_APPROVED)
                results.append((demo["email"], action))
    finally:
        await engine.dispose()
    return results


async def _create_user(email: str, name: str, role: str, password: str, skills: str) -> int:
    from teamhub.db.engine import async_session_factory, engine
    from teamhub.services.auth_service import AuthService

    try:
        async with async_session_factory() as db:
            user = await AuthService(db).signup(
                email=email, password=password, name=name, role=role, skills=skills
            )
    finally:
        await engine.dispose()
    return user.id


async def _set_password(email: str, password: str) -> bool:
    from teamhub.db.engine import async_session_factory, engine
    from teamhub.services.auth_service import AuthService

    try:
        async with async_session_factory() as db:
            svc = AuthService(db)
            user = await svc.store.find_by_email(email)
            if user is not None:
                await svc.set_password(user.id, password)
    finally:
        await engine.dispose()
    return user is not None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="teamhub")
def cli():
    """TeamHub — team collaboration portal backend."""


@cli.command("init-db")
def init_db():
    """Create any tables that don't exist yet."""
    _run(_init_db())
    click.secho(f"Database ready: {settings.database_url}", fg="green")


@cli.command()
def seed():
    """Create (or reset) the demo admin and member accounts."""
    for email, action in _run(_seed()):
        click.echo(f"  {action:8s} {email}")
    click.secho("Demo users ready.", fg="green")


@cli.command("create-user")
@click.argument("email")
@click.option("--name", required=True, help="Display name")
@click.option(
    "--role",
    type=click.Choice(["admin", "user"]),
    default="user",
    show_default=True,
)
@click.option("--skills", default="", help="Comma-separated skills")
@click.password_option(help="Account password (prompted if omitted)")
def create_user(email: str, name: str, role: str, skills: str, password: str):
    """Register an account without going through the signup form."""
    from teamhub.errors import TeamHubError

    try:
        user_id = _run(_create_user(email, name, role, password, skills))
    except TeamHubError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Created {role} {email} (id {user_id})", fg="green")


@cli.command("set-password")
@click.argument("email")
@click.password_option(help="New password (prompted if omitted)")
def set_password(email: str, password: str):
    """Overwrite an account's password."""
    if not _run(_set_password(email, password)):
        click.secho(f"Error: no account for {email}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Password updated for {email}", fg="green")


@cli.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", default=None, type=int, help="Port (default from settings)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "teamhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


def main():
    cli()


if __name__ == "__main__":
    main()
