import click
from flask.cli import with_appcontext
from networks import db
from networks.models import User


@click.command('create-user')
@click.option('--email', required=True, help='Login email (unique)')
@click.option('--display-name', required=True, help='Name shown to other users')
@click.password_option(help='Initial password')
@with_appcontext
def create_user(email, display_name, password):
    """
    Creates a user account from the command line.
    """
    email = email.strip().lower()

    # Check if user already exists
    existing_user = User.query.filter_by(email=email).first()
    if existing_user:
        click.echo(f"Error: User with email '{email}' already exists (ID {existing_user.id})")
        return

    try:
        user = User(email=email, display_name=display_name.strip())
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Successfully created user: {user.display_name} (ID {user.id})")
    except Exception as e:
        db.session.rollback()
        click.echo(f"Error creating user: {e}")
        raise click.Abort()
