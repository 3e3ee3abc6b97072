"""Game repository holding serialized snapshots.

Documents live in memory; durable storage belongs to whatever store the
driver is deployed against. Saves can be made conditional on the stored
version so that a stale or duplicate host cannot overwrite a newer state.
"""

import copy
import logging
import threading
from typing import Any

from pigs.errors import StaleSnapshotError
from pigs.models.enums import GamePhase
from pigs.models.game import GameSnapshot
from pigs.services.game_serializer import deserialize_snapshot, serialize_snapshot

logger = logging.getLogger(__name__)


class GameRepository:
    """Repository for game snapshots.

    Every successful save bumps the document version by one and returns the
    snapshot as stored.
    """

    def __init__(self) -> None:
        """Initialize repository."""
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def save(self, snapshot: GameSnapshot, expected_version: int | None = None) -> GameSnapshot:
        """Save a snapshot (upsert).

        Args:
            snapshot: Snapshot to store
            expected_version: Only save if the stored version equals this
                (0 means the game must not exist yet); None saves unconditionally

        Returns:
            The stored snapshot, carrying its new version

        Raises:
            StaleSnapshotError: If the stored version is not the expected one

        """
        with self._lock:
            current = self._documents.get(snapshot.game_id)
            current_version = current["version"] if current else 0

            if expected_version is not None and current_version != expected_version:
                raise StaleSnapshotError(
                    f"Game {snapshot.game_id} is at version {current_version}, "
                    f"expected {expected_version}"
                )

            document = serialize_snapshot(snapshot)
            document["version"] = current_version + 1
            self._documents[snapshot.game_id] = document

        logger.debug(
            "Game %s saved (version %d, phase %s)",
            snapshot.game_id,
            document["version"],
            document["phase"],
        )
        return deserialize_snapshot(copy.deepcopy(document))

    def create(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Save a new game; fails if the id is taken."""
        return self.save(snapshot, expected_version=0)

    def find_by_id(self, game_id: str) -> GameSnapshot | None:
        """Find and restore a game by ID.

        Args:
            game_id: Game identifier

        Returns:
            Restored snapshot or None

        """
        with self._lock:
            document = self._documents.get(game_id)
            if document is None:
                return None
            document = copy.deepcopy(document)
        return deserialize_snapshot(document)

    def find_active(self, limit: int = 100) -> list[GameSnapshot]:
        """Find games that have not finished, most recently updated first."""
        with self._lock:
            documents = [
                copy.deepcopy(doc)
                for doc in self._documents.values()
                if doc["phase"] != GamePhase.FINISHED.value
            ]
        documents.sort(key=lambda doc: doc["updated_at"], reverse=True)
        return [deserialize_snapshot(doc) for doc in documents[:limit]]

    def delete(self, game_id: str) -> bool:
        """Delete a game.

        Returns:
            True if a game was removed

        """
        with self._lock:
            return self._documents.pop(game_id, None) is not None
