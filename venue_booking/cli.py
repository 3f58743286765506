import click

from .database import db
from .errors import ApiError


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    def create_admin_command(email, password):
        """Bootstrap an administrator without the HTTP route."""
        auth = app.extensions["venue_booking"].auth
        try:
            admin = auth.register({"email": email, "password": password})
        except ApiError as error:
            raise click.ClickException(error.message) from error
        click.echo(f"Administrator created: id={admin.id} email={admin.email}")
