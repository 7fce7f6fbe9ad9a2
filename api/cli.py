"""
Maintenance commands, e.g.:

    flask --app api cleanup-tokens
    flask --app api create-admin "Jane Admin" admin@example.com S3cretPass
    flask --app api seed-db --user-count 10 --form-count 25 --clear
"""
import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from api.extensions import get_storage
from models.user import Role, User
from utils.security import hash_password
from utils.seed import run_seed
from utils.tokens import cleanup_expired_tokens


@click.command("cleanup-tokens")
@with_appcontext
def cleanup_tokens_command():
    """Delete expired and revoked refresh tokens."""
    deleted = cleanup_expired_tokens(get_storage())
    click.echo(f"Deleted {deleted} refresh token(s)")


@click.command("create-admin")
@with_appcontext
@click.argument("name")
@click.argument("email")
@click.argument("password")
def create_admin_command(name, email, password):
    """Create an active admin account."""
    storage = get_storage()
    user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=hash_password(password),
        role=Role.ADMIN,
        is_active=True,
    )
    storage.new(user)
    try:
        storage.save()
    except IntegrityError:
        raise click.ClickException(f"Email already registered: {email}")
    click.echo(f"Created admin {user.email} (id={user.id})")


@click.command("seed-db")
@with_appcontext
@click.option("--user-count", default=10, show_default=True, type=int)
@click.option("--form-count", default=25, show_default=True, type=int)
@click.option("--clear", is_flag=True, help="Delete existing data first.")
def seed_db_command(user_count, form_count, clear):
    """Fill the database with sample users, forms and refresh tokens."""
    results = run_seed(
        get_storage(),
        user_count=user_count,
        form_count=form_count,
        clear_data=clear,
        password=current_app.config["SEED_DEFAULT_PASSWORD"],
    )
    for key, value in results.items():
        click.echo(f"{key}: {value}")


def register_commands(app):
    app.cli.add_command(cleanup_tokens_command)
    app.cli.add_command(create_admin_command)
    app.cli.add_command(seed_db_command)
