"""Commands for listing and deleting multivariate models"""

import json
import logging
import sys

import click

from mad_client.infrastructure.config.settings import get_settings
from mad_client.infrastructure.external.anomaly_detector_client import (
    AnomalyDetectorClient,
)
from mad_client.interfaces.cli.base import BaseCommand


logger = logging.getLogger(__name__)


def get_model_commands() -> list[click.Command]:
    """Get all model-related commands

    Returns:
        List of Click commands
    """
    return [
        ModelCommands.list_models,
        ModelCommands.delete_model,
        ModelCommands.cleanup,
    ]


def create_client() -> AnomalyDetectorClient:
    """Create a client from validated settings."""
    settings = get_settings()
    settings.validate()
    return AnomalyDetectorClient.from_settings(settings)


class ModelCommands(BaseCommand):
    """Commands for multivariate anomaly detection models"""

    @staticmethod
    @click.command("list-models")
    @click.option("--top", type=click.IntRange(min=1), help="Page size")
    @click.option("--skip", type=click.IntRange(min=0), help="Models to skip")
    @click.option(
        "--all", "fetch_all", is_flag=True, help="Follow nextLink across all pages"
    )
    @click.option("--json", "as_json", is_flag=True, help="Print the raw JSON body")
    @BaseCommand.handle_errors
    def list_models(
        top: int | None = None,
        skip: int | None = None,
        fetch_all: bool = False,
        as_json: bool = False,
    ):
        """List trained models."""
        params: dict[str, str] = {}
        if top is not None:
            params["top"] = str(top)
        if skip is not None:
            params["skip"] = str(skip)

        client = create_client()
        with client.executor:
            if as_json:
                click.echo(client.list_models_raw(params))
                return

            if fetch_all:
                models = list(client.iter_models(params))
                click.echo(f"Models: {len(models)}")
            else:
                page = client.list_models(params)
                models = page.models
                click.echo(f"Models: {page.current_count}/{page.max_count}")

            for model in models:
                click.echo(
                    f"{model.model_id}\t{model.status}\t{model.created_time}\t"
                    f"{model.display_name or '-'}\t{model.variables_count}"
                )

    @staticmethod
    @click.command("delete-model")
    @click.argument("model_id")
    @BaseCommand.handle_errors
    def delete_model(model_id: str):
        """Delete a model by id."""
        client = create_client()
        with client.executor:
            client.delete_model(model_id)
        ModelCommands.success(f"Deleted model {model_id}")

    @staticmethod
    @click.command("cleanup")
    @click.argument("model_ids", nargs=-1, required=True)
    @BaseCommand.handle_errors
    def cleanup(model_ids: tuple[str, ...]):
        """Delete several models, reporting any that could not be removed."""
        client = create_client()
        with client.executor:
            failed = client.delete_models(model_ids)

        deleted = len(model_ids) - len(failed)
        logger.info(f"Cleanup finished: {deleted} deleted, {len(failed)} failed")
        ModelCommands.success(f"Deleted {deleted} of {len(model_ids)} models")
        if failed:
            ModelCommands.warning(f"Failed to delete: {json.dumps(failed)}")
            sys.exit(1)
