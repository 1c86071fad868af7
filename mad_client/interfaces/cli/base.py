"""Base classes and decorators for CLI commands."""

import sys

from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import click

from mad_client.application.exceptions import ConfigurationException
from mad_client.domain.exceptions import MADClientException
from mad_client.domain.value_objects.vendor_error_code import VendorErrorCode
from mad_client.infrastructure.exceptions import (
    ExternalServiceException,
    NetworkException,
)


P = ParamSpec("P")
T = TypeVar("T")


class BaseCommand:
    """Base class for CLI commands with common functionality."""

    @staticmethod
    def handle_errors(f: Callable[P, T]) -> Callable[P, T]:
        """Decorator to map client errors to exit codes."""

        @wraps(f)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return f(*args, **kwargs)
            except ConfigurationException as e:
                click.echo(f"Configuration Error: {str(e)}", err=True)
                click.echo("Please check your configuration settings.", err=True)
                sys.exit(2)
            except NetworkException as e:
                click.echo(f"Connection Error: {str(e)}", err=True)
                click.echo("Please check your network connection.", err=True)
                sys.exit(3)
            except ExternalServiceException as e:
                if VendorErrorCode.MODEL_NOT_EXIST.matches(e):
                    click.echo(f"Not Found: {str(e)}", err=True)
                    sys.exit(4)
                click.echo(f"Service Error: {str(e)}", err=True)
                sys.exit(1)
            except MADClientException as e:
                click.echo(f"Error: {str(e)}", err=True)
                sys.exit(1)
            except KeyboardInterrupt:
                click.echo("\nOperation cancelled by user", err=True)
                sys.exit(0)

        return wrapper

    @staticmethod
    def success(message: str) -> None:
        """Show a success message."""
        click.echo(f"✓ {message}")

    @staticmethod
    def warning(message: str) -> None:
        """Show a warning message."""
        click.echo(f"⚠ {message}", err=True)
