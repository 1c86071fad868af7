"""CLI commands package"""

from .model_commands import get_model_commands


__all__ = [
    "get_model_commands",
]
