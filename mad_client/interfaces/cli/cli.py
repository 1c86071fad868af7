"""Main CLI entry point for the Anomaly Detector client."""

import logging
import sys

from collections.abc import Callable

import click

from mad_client.application.exceptions import ConfigurationException
from mad_client.common.logging import setup_logging
from mad_client.infrastructure.config.settings import get_settings
from mad_client.interfaces.cli.commands.model_commands import get_model_commands


logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: str | None = None):
    """mad-client - Multivariate Anomaly Detection model management.

    Lists and deletes models through the Anomaly Detector REST API.
    """
    try:
        settings = get_settings()
    except ConfigurationException as e:
        click.echo(f"Configuration Error: {str(e)}", err=True)
        click.echo("Please check your configuration settings.", err=True)
        sys.exit(2)

    # Initialize structured logging
    setup_logging(
        log_level=log_level or settings.log_level,
        json_format=settings.is_production,
    )


def register_commands(cli_group: click.Group) -> None:
    """Register all commands.

    Args:
        cli_group: Click group to register commands to
    """
    command_getters: list[Callable[[], list[click.Command]]] = [
        get_model_commands,
    ]

    for getter in command_getters:
        for command in getter():
            cli_group.add_command(command)


register_commands(cli)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
