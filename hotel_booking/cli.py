# hotel_booking/cli.py
import click

from hotel_booking import db
from hotel_booking.models import Role, TokenBlacklist, User
from hotel_booking.security import set_password


def register_commands(app):

    @app.cli.command('purge-revoked-tokens')
    def purge_revoked_tokens():
        """Delete revoked-token records whose tokens have expired."""
        purged = TokenBlacklist.purge_expired()
        db.session.commit()
        click.echo(f'Purged {purged} revoked token(s)')

    @app.cli.command('create-admin')
    @click.argument('name')
    @click.argument('email')
    @click.argument('password')
    def create_admin(name, email, password):
        """Create the first admin account."""
        if User.query.filter_by(email=email).first():
            raise click.ClickException('User already exists')
        user = User(name=name, email=email, role=Role.ADMIN)
        set_password(user, password)
        db.session.add(user)
        db.session.commit()
        click.echo(f'Admin {email} created')
