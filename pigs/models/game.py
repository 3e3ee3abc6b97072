"""Game snapshot model and round/game lifecycle rules."""

import copy
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pigs.constants import HAND_SIZE, PENALTY_THRESHOLD, ROW_CAPACITY, TABLE_ROWS, TOTAL_CARDS
from pigs.errors import ErrorCode, InconsistentSnapshotError, PreconditionViolation
from pigs.models.card import Card
from pigs.models.deck import Deck, check_participant_count
from pigs.models.enums import GamePhase, ResolutionKind
from pigs.models.player import Participant
from pigs.models.table import Table


@dataclass(frozen=True)
class RevealedCard:
    """A selected card once it is face up."""

    participant_id: str
    card: Card


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one revealed card.

    Attributes:
        participant_id: Owner of the card
        card: The revealed card
        row_index: Row the card ended up on
        penalty_taken: Pigs added to the owner's score
        captured_cards: Cards the owner took from the table
        kind: Whether the card was appended, filled a row, or took a row

    """

    participant_id: str
    card: Card
    row_index: int
    penalty_taken: int = 0
    captured_cards: tuple[Card, ...] = ()
    kind: ResolutionKind = ResolutionKind.PLACED


@dataclass
class GameSnapshot:
    """The whole shared game record.

    One snapshot is read, a new one is computed, and only the new one is
    committed. revealed_cards[resolution_index:] is the work left in the
    current reveal batch; pending_row_choice is set while the first of those
    cards waits for its owner to pick a row.

    Attributes:
        game_id: Unique game identifier
        host_id: Participant whose client advances phases
        participants: Participants in seating order
        table: The four rows
        phase: Current phase
        round_number: Current round (starts at 1)
        revealed_cards: Current batch, sorted by card number
        resolution_index: Number of revealed cards already resolved
        pending_row_choice: Card whose owner must take a row
        resolutions: Outcomes of the current batch
        last_action: Summary of the last transition
        version: Bumped on every committed transition

    """

    game_id: str
    host_id: str
    participants: list[Participant]
    table: Table
    phase: GamePhase = GamePhase.SELECTING
    round_number: int = 1
    revealed_cards: list[RevealedCard] = field(default_factory=list)
    resolution_index: int = 0
    pending_row_choice: RevealedCard | None = None
    resolutions: list[Resolution] = field(default_factory=list)
    last_action: str | None = None
    version: int = 0

    def copy(self) -> "GameSnapshot":
        """Return an independent copy to compute the next snapshot on."""
        return copy.deepcopy(self)

    def get_participant(self, participant_id: str) -> Participant | None:
        """Get a participant by ID."""
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def require_participant(self, participant_id: str) -> Participant:
        """Get a participant by ID or reject the operation."""
        participant = self.get_participant(participant_id)
        if participant is None:
            raise PreconditionViolation(
                f"Participant {participant_id} is not in game {self.game_id}",
                ErrorCode.PLAYER_NOT_FOUND,
            )
        return participant

    def all_selected(self) -> bool:
        """Check if every participant has chosen a card."""
        return all(p.has_selected() for p in self.participants)

    def unresolved_cards(self) -> list[RevealedCard]:
        """Get revealed cards that have not been resolved yet."""
        return self.revealed_cards[self.resolution_index :]

    def is_finished(self) -> bool:
        """Check if the game has ended."""
        return self.phase == GamePhase.FINISHED

    def get_leaderboard(self) -> list[dict[str, Any]]:
        """Get leaderboard, fewest pigs first."""
        return [
            {
                "participant_id": p.id,
                "display_name": p.display_name,
                "score": p.score,
            }
            for p in leaderboard(self.participants)
        ]

    def __str__(self) -> str:
        """Return string representation."""
        return (
            f"Game {self.game_id}: {len(self.participants)} participants, "
            f"Round {self.round_number}, Phase: {self.phase.value}"
        )


def is_round_over(participants: Sequence[Participant]) -> bool:
    """Check if every hand has been played out."""
    return all(not p.hand for p in participants)


def is_game_over(
    participants: Sequence[Participant], threshold: int = PENALTY_THRESHOLD
) -> bool:
    """Check if any participant has reached the pig threshold."""
    return any(p.score >= threshold for p in participants)


def winner(participants: Sequence[Participant]) -> Participant:
    """Get the participant with the fewest pigs.

    When several share the lowest score, the one seated first wins.
    """
    if not participants:
        raise PreconditionViolation("No participants to pick a winner from")
    # min() keeps the first of equal elements
    return min(participants, key=lambda p: p.score)


def leaderboard(participants: Sequence[Participant]) -> list[Participant]:
    """Sort participants by score, ties kept in seating order."""
    return sorted(participants, key=lambda p: p.score)


def can_deal_round(participant_count: int, table: Table) -> bool:
    """Check whether the numbers left off the table cover a full deal."""
    return TOTAL_CARDS - table.card_count() >= HAND_SIZE * participant_count


def start_new_round(
    participant_count: int, table: Table, rng: random.Random | None = None
) -> list[list[Card]]:
    """Deal fresh hands while the table stays as it is.

    The new deck leaves out every number on the table.

    Args:
        participant_count: Number of hands to deal
        table: Table carried over from the previous round (not modified)
        rng: Random source for the shuffle

    Returns:
        One sorted hand of ten cards per participant

    Raises:
        PreconditionViolation: If too few numbers are left off the table

    """
    deck = Deck(rng)
    deck.shuffle(exclude=table.numbers())
    return deck.deal(participant_count)


def _inconsistent(message: str) -> InconsistentSnapshotError:
    return InconsistentSnapshotError(message, ErrorCode.INCONSISTENT_SNAPSHOT)


def validate_snapshot(snapshot: GameSnapshot) -> None:  # noqa: C901
    """Reject snapshots that contradict themselves.

    Raises:
        InconsistentSnapshotError: On the first contradiction found

    """
    try:
        check_participant_count(len(snapshot.participants))
    except PreconditionViolation as e:
        raise _inconsistent(str(e)) from e

    ids = [p.id for p in snapshot.participants]
    if len(set(ids)) != len(ids):
        raise _inconsistent("Participant ids are not unique")

    if len(snapshot.table.rows) != TABLE_ROWS:
        raise _inconsistent(f"Table has {len(snapshot.table.rows)} rows")
    for index, row in enumerate(snapshot.table.rows):
        if not 1 <= len(row) <= ROW_CAPACITY:
            raise _inconsistent(f"Row {index} holds {len(row)} cards")

    seen: set[int] = set()

    def claim(cards: Sequence[Card], where: str) -> None:
        for card in cards:
            if card.number in seen:
                raise _inconsistent(f"Card {card.number} appears twice ({where})")
            seen.add(card.number)

    claim([card for row in snapshot.table.rows for card in row.cards], "table")
    for participant in snapshot.participants:
        if len(participant.hand) > HAND_SIZE:
            raise _inconsistent(f"{participant.id} holds {len(participant.hand)} cards")
        if participant.selected_card is not None and not participant.has_card(
            participant.selected_card
        ):
            raise _inconsistent(
                f"{participant.id} selected {participant.selected_card.number}, "
                "which is not in their hand"
            )
        claim(participant.hand, f"hand of {participant.id}")

    if not 0 <= snapshot.resolution_index <= len(snapshot.revealed_cards):
        raise _inconsistent(f"Resolution index {snapshot.resolution_index} out of range")
    unresolved = snapshot.unresolved_cards()
    claim([r.card for r in unresolved], "revealed cards")
    for revealed in unresolved:
        if revealed.participant_id not in ids:
            raise _inconsistent(f"Revealed card owned by unknown {revealed.participant_id}")

    if snapshot.phase == GamePhase.ROW_SELECTION:
        if snapshot.pending_row_choice is None:
            raise _inconsistent("Row selection phase without a pending choice")
        if not unresolved or unresolved[0] != snapshot.pending_row_choice:
            raise _inconsistent("Pending row choice is not the next card to resolve")
    elif snapshot.pending_row_choice is not None:
        raise _inconsistent(f"Pending row choice during {snapshot.phase.value}")
