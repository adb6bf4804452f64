"""Persistence of finished topic universes."""

from .errors import PersistenceError
from .repository import TopicUniverseRepository

__all__ = ["PersistenceError", "TopicUniverseRepository"]
