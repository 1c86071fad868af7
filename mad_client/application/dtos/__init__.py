"""Data transfer objects."""

from mad_client.application.dtos.mad_model_dto import ListModelsResponse, MADModel


__all__ = [
    "ListModelsResponse",
    "MADModel",
]
