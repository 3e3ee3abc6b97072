"""Deck model for shuffling, dealing and laying out the table."""

import random
from collections.abc import Iterable, Sequence

from pigs.constants import HAND_SIZE, MAX_PLAYERS, MIN_PLAYERS, TABLE_ROWS
from pigs.errors import ErrorCode, PreconditionViolation
from pigs.models.card import Card, build_deck
from pigs.models.table import Row, Table


def shuffle_deck(deck: Sequence[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a uniformly shuffled copy of the deck.

    Args:
        deck: Cards to shuffle (not modified)
        rng: Random source, the module-level one if omitted

    Returns:
        New list holding the same cards in random order

    """
    shuffled = list(deck)
    (rng or random).shuffle(shuffled)
    return shuffled


def check_participant_count(participant_count: int) -> None:
    """Reject participant counts the ruleset does not support."""
    if not MIN_PLAYERS <= participant_count <= MAX_PLAYERS:
        raise PreconditionViolation(
            f"Games need {MIN_PLAYERS}-{MAX_PLAYERS} participants, got {participant_count}",
            ErrorCode.INVALID_PLAYER_COUNT,
        )


def deal_hands(
    deck: Sequence[Card], participant_count: int
) -> tuple[list[list[Card]], list[Card]]:
    """Deal ten cards to each participant from the top of the deck.

    Args:
        deck: Shuffled deck
        participant_count: Number of hands to deal (2-10)

    Returns:
        Tuple of (hands sorted ascending, untouched remainder of the deck)

    Raises:
        PreconditionViolation: If the deck cannot supply every hand

    """
    check_participant_count(participant_count)
    needed = HAND_SIZE * participant_count
    if len(deck) < needed:
        raise PreconditionViolation(
            f"Dealing {participant_count} hands needs {needed} cards, deck has {len(deck)}",
            ErrorCode.NOT_ENOUGH_CARDS,
        )

    hands = [
        sorted(deck[index : index + HAND_SIZE])
        for index in range(0, needed, HAND_SIZE)
    ]
    return hands, list(deck[needed:])


def initialize_table(deck: Sequence[Card]) -> tuple[Table, list[Card]]:
    """Lay the first four cards out as rows.

    Rows are ordered by their founding card. This is the only time rows
    are reordered.

    Args:
        deck: Shuffled deck

    Returns:
        Tuple of (table, remainder of the deck)

    Raises:
        PreconditionViolation: If the deck has fewer than four cards

    """
    if len(deck) < TABLE_ROWS:
        raise PreconditionViolation(
            f"Table needs {TABLE_ROWS} cards, deck has {len(deck)}", ErrorCode.NOT_ENOUGH_CARDS
        )

    rows = sorted(
        (Row(cards=[card]) for card in deck[:TABLE_ROWS]),
        key=lambda row: row.founding_card.number,
    )
    return Table(rows=rows), list(deck[TABLE_ROWS:])


class Deck:
    """The draw pile for one deal.

    A new game fills all 104 cards; later rounds exclude whatever is still
    on the table so no number can be both on the table and in a hand.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize an empty deck."""
        self.cards: list[Card] = []
        self.rng = rng

    def fill(self, exclude: Iterable[int] = ()) -> None:
        """Fill the deck with every card not listed in exclude."""
        excluded = set(exclude)
        self.cards = [card for card in build_deck() if card.number not in excluded]

    def shuffle(self, exclude: Iterable[int] = ()) -> None:
        """Fill and shuffle the deck."""
        self.fill(exclude)
        self.cards = shuffle_deck(self.cards, self.rng)

    def take_table(self) -> Table:
        """Lay out the table rows from the top of the deck."""
        table, self.cards = initialize_table(self.cards)
        return table

    def deal(self, participant_count: int) -> list[list[Card]]:
        """Deal hands from the top of the deck."""
        hands, self.cards = deal_hands(self.cards, participant_count)
        return hands

    def __len__(self) -> int:
        """Return number of cards left."""
        return len(self.cards)
