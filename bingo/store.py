"""Game document storage, optionally mirrored to one JSON file per game."""

from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from bingo.models import GameDocument

logger = logging.getLogger(__name__)


class GameStore:
    def __init__(self, directory: str | None = None):
        self.directory = directory
        self._documents: dict[str, GameDocument] = {}

    def _path(self, game_id: str) -> str:
        return os.path.join(self.directory, f"{game_id}.json")

    def load(self) -> list[GameDocument]:
        """Read every stored document from disk, skipping unreadable files."""
        if self.directory is None or not os.path.isdir(self.directory):
            return []
        loaded = []
        for filename in sorted(os.listdir(self.directory)):
            if not filename.endswith(".json"):
                continue
            path = os.path.join(self.directory, filename)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    doc = GameDocument.model_validate(json.load(f))
            except (OSError, json.JSONDecodeError, ValidationError) as exc:
                logger.warning("Skipping unreadable game file %s: %s", path, exc)
                continue
            self._documents[doc.id] = doc
            loaded.append(doc)
        logger.info("Loaded %d games from %s", len(loaded), self.directory)
        return loaded

    def save(self, doc: GameDocument):
        self._documents[doc.id] = doc
        if self.directory is None:
            return
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(doc.id)
        # Replace the old file only once the new one is fully written
        tmp_path = path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(doc.model_dump(by_alias=True), f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

    def get(self, game_id: str) -> GameDocument | None:
        return self._documents.get(game_id)

    def delete(self, game_id: str):
        self._documents.pop(game_id, None)
        if self.directory is None:
            return
        try:
            os.remove(self._path(game_id))
        except FileNotFoundError:
            pass

    def all(self) -> list[GameDocument]:
        return list(self._documents.values())
