"""Tests for the snapshot repository."""

import pytest
from conftest import make_participant, make_snapshot, make_table

from pigs.errors import StaleSnapshotError
from pigs.models.enums import GamePhase
from pigs.repositories.game_repository import GameRepository


@pytest.fixture
def repository():
    return GameRepository()


@pytest.fixture
def snapshot():
    return make_snapshot(
        make_table([10], [20], [30], [40]),
        [make_participant("a", [12]), make_participant("b", [25])],
    )


class TestGameRepository:
    """Test saving and loading snapshots."""

    def test_create_and_find(self, repository, snapshot):
        """Created games get version 1 and load back."""
        stored = repository.create(snapshot)
        assert stored.version == 1

        loaded = repository.find_by_id("game-1")
        assert loaded is not None
        assert loaded.version == 1
        assert loaded.table == snapshot.table

    def test_find_missing(self, repository):
        """Unknown ids load as None."""
        assert repository.find_by_id("nope") is None

    def test_create_twice_fails(self, repository, snapshot):
        """Game ids are unique."""
        repository.create(snapshot)
        with pytest.raises(StaleSnapshotError):
            repository.create(snapshot)

    def test_conditional_save(self, repository, snapshot):
        """A save computed from an old version is rejected."""
        first = repository.create(snapshot)
        second = repository.save(first, expected_version=first.version)
        assert second.version == 2

        with pytest.raises(StaleSnapshotError):
            repository.save(first, expected_version=first.version)
        assert repository.find_by_id("game-1").version == 2

    def test_unconditional_save(self, repository, snapshot):
        """Without an expected version the save always applies."""
        repository.create(snapshot)
        assert repository.save(snapshot).version == 2

    def test_loaded_copies_are_independent(self, repository, snapshot):
        """Changing a loaded snapshot does not change the store."""
        repository.create(snapshot)
        loaded = repository.find_by_id("game-1")
        loaded.participants[0].score = 50
        assert repository.find_by_id("game-1").participants[0].score == 0

    def test_find_active_skips_finished(self, repository, snapshot):
        """Finished games are not active."""
        repository.create(snapshot)
        snapshot.game_id = "game-2"
        snapshot.phase = GamePhase.FINISHED
        repository.create(snapshot)

        assert [s.game_id for s in repository.find_active()] == ["game-1"]

    def test_delete(self, repository, snapshot):
        """Deleted games are gone."""
        repository.create(snapshot)
        assert repository.delete("game-1") is True
        assert repository.delete("game-1") is False
        assert repository.find_by_id("game-1") is None
