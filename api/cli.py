import click
from flask import current_app
from flask.cli import with_appcontext

from models import storage
from models.seed import seed_all
from services.tokens import TokenService


@click.command("init-db")
@with_appcontext
def init_db():
    """Create all tables."""
    storage.reload()
    click.echo("Database initialized")


@click.command("seed-db")
@with_appcontext
def seed_db():
    """Insert demo categories, products and users (skips non-empty tables)."""
    counts = seed_all(storage)
    click.echo(
        "Seeded {categories} categories, {products} products, {users} users".format(**counts)
    )


@click.command("purge-tokens")
@with_appcontext
def purge_tokens():
    """Delete expired and revoked refresh tokens."""
    removed = TokenService.from_config(storage, current_app.config).purge_expired_tokens()
    click.echo(f"Purged {removed} refresh tokens")


def register_cli(app):
    app.cli.add_command(init_db)
    app.cli.add_command(seed_db)
    app.cli.add_command(purge_tokens)
