"""Tests for the host driver."""

import pytest
from conftest import make_participant, make_snapshot, make_table

from pigs.errors import (
    ErrorCode,
    GameNotFoundError,
    NotHostError,
    PreconditionViolation,
    StaleSnapshotError,
)
from pigs.models.enums import GamePhase
from pigs.repositories.game_repository import GameRepository
from pigs.services.host_driver import HostDriver


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FlakyRepository(GameRepository):
    """Repository whose first conditional save loses a race."""

    def __init__(self) -> None:
        super().__init__()
        self.races = 1

    def save(self, snapshot, expected_version=None):
        if expected_version and self.races:
            self.races -= 1
            raise StaleSnapshotError("lost race")
        return super().save(snapshot, expected_version)


def rows(snapshot):
    return [row.numbers() for row in snapshot.table.rows]


def store(repository, p1_hand, p2_hand):
    snapshot = make_snapshot(
        make_table([10], [20], [30], [40]),
        [make_participant("p1", p1_hand), make_participant("p2", p2_hand)],
    )
    return repository.create(snapshot)


@pytest.fixture
def repository():
    return GameRepository()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def host(repository, orchestrator, clock):
    return HostDriver(repository, "p1", orchestrator, row_choice_timeout=30, clock=clock)


class TestHostDriver:
    """Test reading, transitioning and committing snapshots."""

    def test_start_game_hosted_locally(self, host, four_participants):
        """The starting client becomes host."""
        snapshot = host.start_game(four_participants, game_id="g1")
        assert snapshot.host_id == "p1"
        assert snapshot.version == 1
        assert host.is_host(snapshot)

    def test_missing_game(self, host):
        """Unknown games raise."""
        with pytest.raises(GameNotFoundError):
            host.load("nope")

    def test_only_host_advances(self, repository, orchestrator):
        """A non-host client cannot advance."""
        store(repository, [12, 70], [25, 71])
        guest = HostDriver(repository, "p2", orchestrator)
        with pytest.raises(NotHostError) as exc:
            guest.advance("game-1")
        assert exc.value.code == ErrorCode.NOT_HOST

    def test_advance_waits_for_selections(self, host, repository):
        """Nothing happens until everyone has selected."""
        store(repository, [12, 70], [25, 71])
        host.submit_selection("game-1", "p1", 12)
        snapshot = host.advance("game-1")
        assert snapshot.phase == GamePhase.SELECTING
        assert snapshot.get_participant("p1").selected_card.number == 12

    def test_advance_resolves_batch(self, host, repository):
        """Once everyone selected, the batch is resolved and committed."""
        store(repository, [12, 70], [25, 71])
        host.submit_selection("game-1", "p1", 12)
        host.submit_selection("game-1", "p2", 25)
        snapshot = host.advance("game-1")

        assert snapshot.phase == GamePhase.SELECTING
        assert rows(snapshot) == [[10, 12], [20, 25], [30], [40]]
        assert repository.find_by_id("game-1").version == snapshot.version

    def test_remote_row_choice_gets_default(self, host, repository):
        """A row choice owed by another participant takes the cheapest row."""
        store(repository, [12, 70], [2, 71])
        host.submit_selection("game-1", "p1", 12)
        host.submit_selection("game-1", "p2", 2)
        snapshot = host.advance("game-1")

        assert snapshot.phase == GamePhase.SELECTING
        assert rows(snapshot) == [[2, 12], [20], [30], [40]]
        assert snapshot.get_participant("p2").score == 3

    def test_local_row_choice_waits(self, host, repository):
        """The local participant's own choice is left to them."""
        store(repository, [2, 70], [12, 71])
        host.submit_selection("game-1", "p1", 2)
        host.submit_selection("game-1", "p2", 12)
        snapshot = host.advance("game-1")
        assert snapshot.phase == GamePhase.ROW_SELECTION
        assert snapshot.pending_row_choice.participant_id == "p1"

        snapshot = host.choose_row("game-1", "p1", 3)
        assert snapshot.phase == GamePhase.SELECTING
        assert rows(snapshot) == [[10, 12], [20], [30], [2]]
        assert snapshot.get_participant("p1").score == 3

    def test_stalled_choice_defaulted_after_timeout(self, repository, orchestrator, clock):
        """With auto defaults off, the watchdog takes over after the timeout."""
        host = HostDriver(
            repository,
            "p1",
            orchestrator,
            auto_default_remote=False,
            row_choice_timeout=30,
            clock=clock,
        )
        store(repository, [12, 70], [2, 71])
        host.submit_selection("game-1", "p1", 12)
        host.submit_selection("game-1", "p2", 2)
        assert host.advance("game-1").phase == GamePhase.ROW_SELECTION

        clock.now = 29
        assert host.check_stalled("game-1").phase == GamePhase.ROW_SELECTION

        clock.now = 31
        snapshot = host.check_stalled("game-1")
        assert snapshot.phase == GamePhase.SELECTING
        assert snapshot.get_participant("p2").score == 3

    def test_selection_retries_lost_race(self, orchestrator):
        """A selection that raced another write is recomputed."""
        repository = FlakyRepository()
        store(repository, [12, 70], [25, 71])
        driver = HostDriver(repository, "p2", orchestrator)

        snapshot = driver.submit_selection("game-1", "p2", 25)
        assert snapshot.get_participant("p2").selected_card.number == 25

    def test_stale_host_rejected(self, host, repository, orchestrator):
        """A transition computed from an outdated snapshot is not committed."""
        store(repository, [12, 70], [25, 71])
        host.submit_selection("game-1", "p1", 12)
        outdated = host.submit_selection("game-1", "p2", 25)
        host.advance("game-1")

        with pytest.raises(StaleSnapshotError):
            repository.save(
                orchestrator.on_all_selected(outdated), expected_version=outdated.version
            )

    def test_new_game_resets(self, host, repository):
        """New game zeroes scores and deals a fresh table."""
        store(repository, [2, 70], [12, 71])
        snapshot = host.new_game("game-1")
        assert snapshot.round_number == 1
        assert all(len(p.hand) == 10 for p in snapshot.participants)
        assert all(p.score == 0 for p in snapshot.participants)

    def test_crowded_table_commits_batch_then_rejects_deal(self, host, repository):
        """A round that cannot be dealt keeps the resolved batch; dealing is refused."""
        participants = [make_participant(f"p{i}", [49 + i]) for i in range(1, 11)]
        repository.create(make_snapshot(make_table([10, 11], [20, 21], [30], [40]), participants))
        for i in range(1, 11):
            host.submit_selection("game-1", f"p{i}", 49 + i)

        stuck = host.advance("game-1")
        assert stuck.phase == GamePhase.SELECTING
        assert all(p.hand == [] for p in stuck.participants)
        assert host.advance("game-1").version == stuck.version

        with pytest.raises(PreconditionViolation) as exc:
            host.deal_next_round("game-1")
        assert exc.value.code == ErrorCode.NOT_ENOUGH_CARDS
        assert repository.find_by_id("game-1").version == stuck.version
