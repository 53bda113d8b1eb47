# storefront/cli.py
import click
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash

from .extensions import db
from .model import Admin


@click.command("create-admin")
@click.option("--username", required=True)
@click.option("--password", required=True)
@with_appcontext
def create_admin(username, password):
    username = username.strip()
    if Admin.query.filter_by(username=username).first():
        click.echo("Username already exists"); return
    a = Admin(username=username, password=generate_password_hash(password))
    db.session.add(a); db.session.commit()
    click.echo(f"Admin created: {a.admin_id} {a.username}")


def register_cli(app):
    app.cli.add_command(create_admin)
