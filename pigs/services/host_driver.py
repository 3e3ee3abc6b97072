"""Host-side driver that applies phase transitions to the shared store.

Only the host's client advances phases. Each commit is conditional on the
version it was computed from, so a second (or restarted) host working from
an old snapshot is rejected instead of overwriting newer state.
"""

import logging
import time
from collections.abc import Callable, Sequence

from pigs.config import settings
from pigs.errors import GameNotFoundError, GameRuleError, NotHostError, StaleSnapshotError
from pigs.models.enums import GamePhase
from pigs.models.game import GameSnapshot
from pigs.models.player import Participant
from pigs.repositories.game_repository import GameRepository
from pigs.services.orchestrator import PhaseOrchestrator

logger = logging.getLogger(__name__)

# Retries for participant writes racing other participants' writes
SELECTION_RETRIES = 3


class HostDriver:
    """Reads snapshots, runs the orchestrator and writes results back.

    Row choices owed by anyone other than the local participant get the
    lowest-penalty row as soon as the host advances, unless
    auto_default_remote is off; then they wait for choose_row or for
    check_stalled to hit the timeout.
    """

    def __init__(
        self,
        repository: GameRepository,
        local_participant_id: str,
        orchestrator: PhaseOrchestrator | None = None,
        auto_default_remote: bool = True,
        row_choice_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize driver.

        Args:
            repository: Snapshot store
            local_participant_id: Participant this client acts for
            orchestrator: Transition engine (default one if omitted)
            auto_default_remote: Take the default row for remote participants
            row_choice_timeout: Seconds before a stalled choice is defaulted
            clock: Monotonic time source

        """
        self.repository = repository
        self.local_participant_id = local_participant_id
        self.orchestrator = orchestrator or PhaseOrchestrator()
        self.auto_default_remote = auto_default_remote
        self.row_choice_timeout = (
            settings.row_choice_timeout_seconds if row_choice_timeout is None else row_choice_timeout
        )
        self.clock = clock
        self._pending_since: dict[str, tuple[int, float]] = {}

    def load(self, game_id: str) -> GameSnapshot:
        """Load a game or fail."""
        snapshot = self.repository.find_by_id(game_id)
        if snapshot is None:
            raise GameNotFoundError(f"Game {game_id} not found")
        return snapshot

    def is_host(self, snapshot: GameSnapshot) -> bool:
        """Check if this client may advance phases."""
        return snapshot.host_id == self.local_participant_id

    def start_game(
        self, participants: Sequence[Participant], game_id: str | None = None
    ) -> GameSnapshot:
        """Deal a new game hosted by the local participant and store it."""
        snapshot = self.orchestrator.start_game(participants, game_id, self.local_participant_id)
        return self.repository.create(snapshot)

    def new_game(self, game_id: str) -> GameSnapshot:
        """Return a game to its start: zero scores, fresh hands and table."""
        snapshot = self._load_as_host(game_id)
        return self._commit(snapshot, self.orchestrator.new_game(snapshot))

    def submit_selection(
        self, game_id: str, participant_id: str, card_number: int | None
    ) -> GameSnapshot:
        """Write a participant's card selection.

        Any participant may do this; a write that raced another one is
        recomputed from the fresh snapshot.
        """
        attempt = 0
        while True:
            attempt += 1
            snapshot = self.load(game_id)
            updated = self.orchestrator.select_card(snapshot, participant_id, card_number)
            try:
                return self._commit(snapshot, updated)
            except StaleSnapshotError:
                if attempt >= SELECTION_RETRIES:
                    raise
                logger.debug("Selection by %s raced another write, retrying", participant_id)

    def choose_row(self, game_id: str, participant_id: str, row_index: int) -> GameSnapshot:
        """Answer a pending row choice and let the host resume resolution."""
        snapshot = self.load(game_id)
        committed = self._commit(
            snapshot, self.orchestrator.on_row_chosen(snapshot, participant_id, row_index)
        )
        self._track_pending(committed)
        return committed

    def advance(self, game_id: str) -> GameSnapshot:
        """Apply every transition whose preconditions are met.

        Returns:
            The latest committed snapshot

        Raises:
            NotHostError: If the local participant is not the host

        """
        snapshot = self._load_as_host(game_id)

        while True:
            next_snapshot = self._next_transition(snapshot)
            if next_snapshot is None:
                self._track_pending(snapshot)
                return snapshot
            snapshot = self._commit(snapshot, next_snapshot)

    def deal_next_round(self, game_id: str) -> GameSnapshot:
        """Deal a round that could not be dealt when the last batch ended.

        Raises:
            PreconditionViolation: If the table still leaves too few cards

        """
        snapshot = self._load_as_host(game_id)
        try:
            next_snapshot = self.orchestrator.on_round_boundary(snapshot)
        except GameRuleError as e:
            logger.warning("Game %s: cannot deal next round (%s): %s", game_id, e.code, e)
            raise
        return self._commit(snapshot, next_snapshot)

    def check_stalled(self, game_id: str) -> GameSnapshot:
        """Default a row choice that has waited longer than the timeout."""
        snapshot = self._load_as_host(game_id)
        self._track_pending(snapshot)
        if snapshot.phase != GamePhase.ROW_SELECTION:
            return snapshot

        _, since = self._pending_since[game_id]
        waited = self.clock() - since
        if waited < self.row_choice_timeout:
            return snapshot

        pending = snapshot.pending_row_choice
        logger.warning(
            "Game %s: row choice by %s stalled for %.1fs, taking default row",
            game_id,
            pending.participant_id if pending else "?",
            waited,
        )
        snapshot = self._commit(snapshot, self.orchestrator.on_default_row(snapshot))
        return self.advance(game_id) if snapshot.phase != GamePhase.FINISHED else snapshot

    def _next_transition(self, snapshot: GameSnapshot) -> GameSnapshot | None:
        if snapshot.phase == GamePhase.SELECTING and snapshot.all_selected():
            return self.orchestrator.on_all_selected(snapshot)
        if snapshot.phase == GamePhase.REVEALING:
            return self.orchestrator.resolve(snapshot)
        if snapshot.phase == GamePhase.ROW_SELECTION and self._defaults_for(snapshot):
            return self.orchestrator.on_default_row(snapshot)
        return None

    def _defaults_for(self, snapshot: GameSnapshot) -> bool:
        pending = snapshot.pending_row_choice
        return (
            self.auto_default_remote
            and pending is not None
            and pending.participant_id != self.local_participant_id
        )

    def _track_pending(self, snapshot: GameSnapshot) -> None:
        if snapshot.phase != GamePhase.ROW_SELECTION:
            self._pending_since.pop(snapshot.game_id, None)
            return
        tracked = self._pending_since.get(snapshot.game_id)
        if tracked is None or tracked[0] != snapshot.version:
            self._pending_since[snapshot.game_id] = (snapshot.version, self.clock())

    def _load_as_host(self, game_id: str) -> GameSnapshot:
        snapshot = self.load(game_id)
        if not self.is_host(snapshot):
            raise NotHostError(
                f"{self.local_participant_id} is not the host of game {game_id}"
            )
        return snapshot

    def _commit(self, snapshot: GameSnapshot, next_snapshot: GameSnapshot) -> GameSnapshot:
        try:
            return self.repository.save(next_snapshot, expected_version=snapshot.version)
        except GameRuleError as e:
            logger.warning("Game %s: transition rejected (%s): %s", snapshot.game_id, e.code, e)
            raise
