"""``owo config`` and ``owo auth`` sub-applications."""

import typer

from owo.ui.auth_commands import auth_app
from owo.ui.config_commands import config_app

management_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Manage owo settings and credentials.",
)
management_app.add_typer(config_app, name="config")
management_app.add_typer(auth_app, name="auth")
