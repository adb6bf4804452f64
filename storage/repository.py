"""JSON file storage for finished topic universes."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from config import settings
from contracts import TopicUniverse

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class TopicUniverseRepository:
    """Stores each universe as `<id>.json` under one directory."""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        self.directory = Path(directory) if directory is not None else settings.get_universes_path()

    def path_for(self, universe_id: str) -> Path:
        return self.directory / f"{universe_id}.json"

    def save(self, universe: TopicUniverse) -> Path:
        """Write the universe to its default location and return the path."""
        return self.save_to_path(universe, self.path_for(universe.id))

    def save_to_path(self, universe: TopicUniverse, path: Union[str, Path]) -> Path:
        """Write the universe to an explicit path (used for export)."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(universe.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not save universe '{universe.name}' to {path}: {e}") from e
        logger.debug("Saved universe %s to %s", universe.id, path)
        return path

    def load(self, universe_id: str) -> Optional[TopicUniverse]:
        """Load a universe by id. None if it does not exist."""
        path = self.path_for(universe_id)
        if not path.exists():
            return None
        return self.load_from_path(path)

    def load_from_path(self, path: Union[str, Path]) -> TopicUniverse:
        path = Path(path)
        try:
            return TopicUniverse.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e
        except ValidationError as e:
            raise PersistenceError(f"{path} is not a valid topic universe: {e}") from e

    def list_all(self) -> List[TopicUniverse]:
        """All readable universes, newest first. Unreadable files are skipped."""
        if not self.directory.exists():
            return []
        universes = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                universes.append(self.load_from_path(path))
            except PersistenceError as e:
                logger.warning("Skipping %s: %s", path.name, e)
        return sorted(universes, key=lambda u: u.created_at, reverse=True)

    def exists(self, universe_id: str) -> bool:
        return self.path_for(universe_id).exists()
