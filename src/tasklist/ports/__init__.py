"""Ports - interfaces/protocols for external dependencies."""

from .key_value_store import KeyValueStore
from .presenter import Presenter

__all__ = [
    "KeyValueStore",
    "Presenter",
]
