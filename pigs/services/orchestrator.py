"""Phase state machine for a game of 66 Pigs.

Every public method takes a snapshot and returns the next one. The input
snapshot is validated, copied and never modified, so a rejected transition
leaves the caller's state untouched.

Phases::

    selecting --on_all_selected--> revealing --resolve--> selecting
                                       |                  row_selection
                                       |                  finished
    row_selection --on_row_chosen / on_default_row--> revealing (resumed)
"""

import logging
import random
import uuid
from collections.abc import Sequence

from pigs.config import settings
from pigs.errors import ErrorCode, InvalidPhaseError, PreconditionViolation
from pigs.models.card import Card
from pigs.models.deck import Deck, check_participant_count
from pigs.models.enums import GamePhase, ResolutionKind
from pigs.models.game import (
    GameSnapshot,
    Resolution,
    RevealedCard,
    can_deal_round,
    is_game_over,
    is_round_over,
    start_new_round,
    validate_snapshot,
    winner,
)
from pigs.models.player import Participant
from pigs.models.table import (
    Table,
    capture_row,
    find_target_row,
    lowest_penalty_row,
    place_card,
)

logger = logging.getLogger(__name__)


class PhaseOrchestrator:
    """Computes phase transitions over game snapshots.

    The orchestrator holds no game state of its own; it only carries the
    pig threshold and the random source used for deals.
    """

    def __init__(self, threshold: int | None = None, rng: random.Random | None = None) -> None:
        """Initialize orchestrator.

        Args:
            threshold: Score that ends the game (settings value if omitted)
            rng: Random source for shuffles, seeded from settings if omitted

        """
        self.threshold = settings.penalty_threshold if threshold is None else threshold
        if rng is None and settings.random_seed is not None:
            rng = random.Random(settings.random_seed)  # noqa: S311
        self.rng = rng

    # ------------------------------------------------------------------
    # Game setup
    # ------------------------------------------------------------------

    def start_game(
        self,
        participants: Sequence[Participant],
        game_id: str | None = None,
        host_id: str | None = None,
    ) -> GameSnapshot:
        """Deal a new game: four table rows and a hand of ten for everyone.

        Args:
            participants: Participants in seating order (not modified)
            game_id: Game identifier, generated if omitted
            host_id: Participant whose client advances phases, first seat if omitted

        Returns:
            Snapshot in the selecting phase of round 1

        """
        check_participant_count(len(participants))
        seated = [
            Participant(id=p.id, display_name=p.display_name) for p in participants
        ]
        if len({p.id for p in seated}) != len(seated):
            raise PreconditionViolation("Participant ids are not unique", ErrorCode.PLAYER_NOT_FOUND)

        deck = Deck(self.rng)
        deck.shuffle()
        table = deck.take_table()
        for participant, hand in zip(seated, deck.deal(len(seated)), strict=True):
            participant.hand = hand

        snapshot = GameSnapshot(
            game_id=game_id or uuid.uuid4().hex[:8],
            host_id=host_id or seated[0].id,
            participants=seated,
            table=table,
            last_action="Game started",
        )
        logger.info(
            "Game %s started with %d participants, table %s",
            snapshot.game_id,
            len(seated),
            snapshot.table,
        )
        return snapshot

    def new_game(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Start over with the same participants; scores, hands and table are rebuilt."""
        return self.start_game(snapshot.participants, snapshot.game_id, snapshot.host_id)

    # ------------------------------------------------------------------
    # Selecting
    # ------------------------------------------------------------------

    def select_card(
        self, snapshot: GameSnapshot, participant_id: str, card_number: int | None
    ) -> GameSnapshot:
        """Set a participant's card for this turn.

        Selecting the already selected card again, or None, clears the choice.

        Args:
            snapshot: Current snapshot
            participant_id: Participant choosing
            card_number: Number of a card in their hand, or None

        Returns:
            Snapshot with the participant's selection updated

        """
        self._require_phase(snapshot, GamePhase.SELECTING)
        state = snapshot.copy()
        participant = state.require_participant(participant_id)

        if card_number is None:
            participant.selected_card = None
            return state

        card = participant.find_card(card_number)
        if card is None:
            raise PreconditionViolation(
                f"Card {card_number} is not in {participant_id}'s hand", ErrorCode.CARD_NOT_IN_HAND
            )
        participant.selected_card = None if participant.selected_card == card else card
        return state

    def on_all_selected(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Reveal every selection and resolve the batch as far as possible."""
        return self._resolve(self._reveal(snapshot))

    def reveal(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Turn the selections face up without placing them yet."""
        return self._reveal(snapshot)

    def _reveal(self, snapshot: GameSnapshot) -> GameSnapshot:
        self._require_phase(snapshot, GamePhase.SELECTING)
        missing = [p.id for p in snapshot.participants if not p.has_selected()]
        if missing:
            raise PreconditionViolation(
                f"Still waiting for selections from {', '.join(missing)}",
                ErrorCode.SELECTIONS_MISSING,
            )

        state = snapshot.copy()
        seats = {p.id: seat for seat, p in enumerate(state.participants)}
        revealed = [
            RevealedCard(participant_id=p.id, card=p.selected_card)
            for p in state.participants
            if p.selected_card is not None
        ]
        for item in revealed:
            participant = state.require_participant(item.participant_id)
            participant.remove_card(item.card)
            participant.selected_card = None

        state.revealed_cards = sorted(
            revealed, key=lambda r: (r.card.number, seats[r.participant_id])
        )
        state.resolution_index = 0
        state.resolutions = []
        state.phase = GamePhase.REVEALING
        state.last_action = "Cards revealed: " + ", ".join(
            str(r.card.number) for r in state.revealed_cards
        )
        logger.info("Game %s: %s", state.game_id, state.last_action)
        return state

    # ------------------------------------------------------------------
    # Revealing
    # ------------------------------------------------------------------

    def resolve(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Resolve revealed cards from where resolution stopped."""
        self._require_phase(snapshot, GamePhase.REVEALING)
        return self._resolve(snapshot.copy())

    def _resolve(self, state: GameSnapshot) -> GameSnapshot:
        # Works in place on a copy; each card reads the table the previous one left.
        while state.resolution_index < len(state.revealed_cards):
            revealed = state.revealed_cards[state.resolution_index]
            row_index = find_target_row(revealed.card, state.table)

            if row_index is None:
                state.phase = GamePhase.ROW_SELECTION
                state.pending_row_choice = revealed
                state.last_action = (
                    f"{self._name(state, revealed.participant_id)} must take a row "
                    f"for card {revealed.card.number}"
                )
                logger.info("Game %s: %s", state.game_id, state.last_action)
                return state

            table, penalty, captured = place_card(revealed.card, row_index, state.table)
            kind = ResolutionKind.ROW_FULL if captured else ResolutionKind.PLACED
            self._record(state, revealed, row_index, table, penalty, captured, kind)

        return self._finish_batch(state)

    def _finish_batch(self, state: GameSnapshot) -> GameSnapshot:
        state.revealed_cards = []
        state.resolution_index = 0
        state.pending_row_choice = None

        if is_game_over(state.participants, self.threshold):
            state.phase = GamePhase.FINISHED
            best = winner(state.participants)
            state.last_action = f"Game over, {best.display_name} wins with {best.score} pigs"
            logger.info("Game %s finished: %s", state.game_id, state.last_action)
            return state

        if is_round_over(state.participants):
            if can_deal_round(len(state.participants), state.table):
                return self._deal_round(state)
            state.last_action = (
                f"Round {state.round_number} over, {state.table.card_count()} cards on the "
                f"table leave too few to deal {len(state.participants)} hands"
            )
            logger.warning("Game %s: %s", state.game_id, state.last_action)

        state.phase = GamePhase.SELECTING
        return state

    # ------------------------------------------------------------------
    # Row selection
    # ------------------------------------------------------------------

    def on_row_chosen(
        self, snapshot: GameSnapshot, participant_id: str, row_index: int
    ) -> GameSnapshot:
        """Take the chosen row for the pending card and resume resolution.

        Args:
            snapshot: Snapshot in the row_selection phase
            participant_id: Participant answering; must own the pending card
            row_index: Row to take (0-3)

        Returns:
            Next snapshot after the remaining cards were resolved

        """
        self._require_phase(snapshot, GamePhase.ROW_SELECTION)
        pending = snapshot.pending_row_choice
        if pending is None:
            raise PreconditionViolation("No row choice is pending", ErrorCode.NO_PENDING_ROW_CHOICE)
        if pending.participant_id != participant_id:
            raise PreconditionViolation(
                f"Row choice belongs to {pending.participant_id}, not {participant_id}",
                ErrorCode.NOT_YOUR_ROW_CHOICE,
            )

        state = snapshot.copy()
        table, penalty, captured = capture_row(pending.card, row_index, state.table)
        state.pending_row_choice = None
        state.phase = GamePhase.REVEALING
        self._record(state, pending, row_index, table, penalty, captured, ResolutionKind.ROW_TAKEN)
        return self._resolve(state)

    def on_default_row(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Take the row with the fewest pigs on behalf of the pending participant."""
        self._require_phase(snapshot, GamePhase.ROW_SELECTION)
        pending = snapshot.pending_row_choice
        if pending is None:
            raise PreconditionViolation("No row choice is pending", ErrorCode.NO_PENDING_ROW_CHOICE)
        row_index = lowest_penalty_row(snapshot.table)
        logger.info(
            "Game %s: taking default row %d for %s", snapshot.game_id, row_index, pending.participant_id
        )
        return self.on_row_chosen(snapshot, pending.participant_id, row_index)

    # ------------------------------------------------------------------
    # Round boundary
    # ------------------------------------------------------------------

    def on_round_boundary(self, snapshot: GameSnapshot) -> GameSnapshot:
        """Deal the next round once every hand is empty; the table is kept.

        A batch that empties every hand deals the next round itself, so this
        is needed only when that deal was impossible. It is then rejected
        again with NOT_ENOUGH_CARDS and the snapshot stays as committed.
        """
        self._require_phase(snapshot, GamePhase.SELECTING)
        if not is_round_over(snapshot.participants):
            raise PreconditionViolation("Hands are not empty yet", ErrorCode.ROUND_NOT_OVER)
        return self._deal_round(snapshot.copy())

    def _deal_round(self, state: GameSnapshot) -> GameSnapshot:
        hands = start_new_round(len(state.participants), state.table, self.rng)
        for participant, hand in zip(state.participants, hands, strict=True):
            participant.hand = hand
            participant.selected_card = None

        state.round_number += 1
        state.phase = GamePhase.SELECTING
        state.revealed_cards = []
        state.resolution_index = 0
        state.pending_row_choice = None
        state.last_action = f"Round {state.round_number} dealt"
        logger.info("Game %s: %s, table kept: %s", state.game_id, state.last_action, state.table)
        return state

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_phase(self, snapshot: GameSnapshot, phase: GamePhase) -> None:
        validate_snapshot(snapshot)
        if snapshot.phase == phase:
            return
        if snapshot.is_finished():
            raise InvalidPhaseError(f"Game {snapshot.game_id} is finished", ErrorCode.GAME_FINISHED)
        raise InvalidPhaseError(
            f"Game {snapshot.game_id} is in {snapshot.phase.value}, expected {phase.value}"
        )

    @staticmethod
    def _name(state: GameSnapshot, participant_id: str) -> str:
        participant = state.get_participant(participant_id)
        return participant.display_name if participant else participant_id

    def _record(
        self,
        state: GameSnapshot,
        revealed: RevealedCard,
        row_index: int,
        table: Table,
        penalty: int,
        captured: list[Card],
        kind: ResolutionKind,
    ) -> None:
        state.table = table
        state.require_participant(revealed.participant_id).add_penalty(penalty)
        state.resolutions.append(
            Resolution(
                participant_id=revealed.participant_id,
                card=revealed.card,
                row_index=row_index,
                penalty_taken=penalty,
                captured_cards=tuple(captured),
                kind=kind,
            )
        )
        state.resolution_index += 1

        if captured:
            state.last_action = (
                f"{self._name(state, revealed.participant_id)} took row {row_index + 1} "
                f"({penalty} pigs) with card {revealed.card.number}"
            )
            logger.info("Game %s: %s", state.game_id, state.last_action)
        else:
            logger.debug(
                "Game %s: card %d placed on row %d",
                state.game_id,
                revealed.card.number,
                row_index,
            )
