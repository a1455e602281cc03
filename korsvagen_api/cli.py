"""Admin tooling exposed as ``flask`` commands."""
from datetime import timedelta

import click
from flask import Flask
from flask.cli import with_appcontext

from korsvagen_api.config.flask_config import get_app_settings, get_auth_components
from korsvagen_api.infrastructure.database.models.admin_user_model import AdminRole, AdminUserModel
from korsvagen_api.infrastructure.database.session import db_session, get_database
from korsvagen_api.repositories.admin_session_repository import AdminSessionRepository
from korsvagen_api.repositories.admin_user_repository import AdminUserRepository


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the auth tables."""
    get_database().create_all()
    click.echo("Database tables created.")


@click.command("create-admin")
@with_appcontext
@click.argument("username")
@click.option("--email", required=True)
@click.option(
    "--role",
    type=click.Choice([r.value for r in AdminRole]),
    default=AdminRole.ADMIN.value,
    show_default=True,
)
@click.password_option()
def create_admin_command(username: str, email: str, role: str, password: str):
    """Seed an admin account."""
    if not 3 <= len(username) <= 50:
        raise click.BadParameter("username must be 3-50 characters", param_hint="USERNAME")
    if len(password) < 8:
        raise click.BadParameter("password must be at least 8 characters", param_hint="--password")

    components = get_auth_components()
    with db_session() as session:
        repo = AdminUserRepository(session, clock=components.clock)
        if repo.get_by_username(username) is not None:
            raise click.ClickException(f"Admin '{username}' already exists.")

        user = repo.add(
            AdminUserModel(
                username=username,
                email=email,
                role=role,
                password_hash=components.password_hasher.hash_password(password),
                is_active=True,
            )
        )
        user_id = user.id

    click.echo(f"Admin '{username}' created ({user_id}).")


@click.command("purge-sessions")
@with_appcontext
@click.option("--retention-days", type=int, default=None, help="Defaults to SESSION_RETENTION_DAYS.")
def purge_sessions_command(retention_days: int | None):
    """Delete revoked or expired sessions past the retention window."""
    days = retention_days if retention_days is not None else get_app_settings().session_retention_days
    clock = get_auth_components().clock

    with db_session() as session:
        removed = AdminSessionRepository(session, clock=clock).purge_stale(
            older_than=clock() - timedelta(days=days)
        )

    click.echo(f"Purged {removed} session(s).")


def register_cli(app: Flask) -> None:
    app.cli.add_command(init_db_command)
    app.cli.add_command(create_admin_command)
    app.cli.add_command(purge_sessions_command)
