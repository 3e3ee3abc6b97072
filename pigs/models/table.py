"""Table model: four rows, the placement policy and row captures."""

from dataclasses import dataclass, field

from pigs.constants import ROW_CAPACITY, TABLE_ROWS
from pigs.errors import ErrorCode, PreconditionViolation
from pigs.models.card import Card, total_penalty


@dataclass
class Row:
    """An ordered pile of cards that grows until it is captured.

    Attributes:
        cards: Cards in placement order, the last one is the highest

    """

    cards: list[Card] = field(default_factory=list)

    @property
    def last_card(self) -> Card:
        """Get the card new cards are compared against."""
        return self.cards[-1]

    @property
    def founding_card(self) -> Card:
        """Get the first card of the row."""
        return self.cards[0]

    def is_full(self) -> bool:
        """Check if the next card placed here captures the row."""
        return len(self.cards) >= ROW_CAPACITY

    def numbers(self) -> list[int]:
        """Get the card numbers in this row."""
        return [card.number for card in self.cards]

    def __len__(self) -> int:
        """Return number of cards in the row."""
        return len(self.cards)

    def __str__(self) -> str:
        """Return string representation."""
        return " ".join(str(card.number) for card in self.cards)


@dataclass
class Table:
    """The four rows in play.

    Attributes:
        rows: Exactly four rows, kept in the order they were founded

    """

    rows: list[Row] = field(default_factory=list)

    def copy(self) -> "Table":
        """Return a copy whose rows can be changed independently."""
        return Table(rows=[Row(cards=list(row.cards)) for row in self.rows])

    def numbers(self) -> set[int]:
        """Get every card number currently on the table."""
        return {card.number for row in self.rows for card in row.cards}

    def card_count(self) -> int:
        """Count the cards on the table."""
        return sum(len(row) for row in self.rows)

    def __str__(self) -> str:
        """Return string representation."""
        return " | ".join(f"[{row}]" for row in self.rows)


def row_penalty(row: Row) -> int:
    """Sum the penalties of a row's cards."""
    return total_penalty(row.cards)


def _check_row_index(row_index: int, table: Table) -> None:
    if not 0 <= row_index < TABLE_ROWS or row_index >= len(table.rows):
        raise PreconditionViolation(
            f"Row index {row_index} is outside [0, {TABLE_ROWS})", ErrorCode.INVALID_ROW_INDEX
        )


def find_target_row(card: Card, table: Table) -> int | None:
    """Find the row a card is placed on.

    The card goes to the row whose last card is the closest one strictly
    below it. The first row in table order wins a tie.

    Args:
        card: Card being placed
        table: Current table

    Returns:
        Index of the target row, or None if the card is lower than every
        row's last card (its owner must take a row)

    """
    best_index: int | None = None
    best_difference = 0

    for index, row in enumerate(table.rows):
        difference = card.number - row.last_card.number
        if difference > 0 and (best_index is None or difference < best_difference):
            best_index = index
            best_difference = difference

    return best_index


def place_card(card: Card, row_index: int, table: Table) -> tuple[Table, int, list[Card]]:
    """Place a card on its target row.

    If the row already holds five cards, they are captured and the row
    restarts with the placed card.

    Args:
        card: Card being placed
        row_index: Target row from find_target_row
        table: Current table (not modified)

    Returns:
        Tuple of (new table, penalty taken, captured cards)

    Raises:
        PreconditionViolation: If row_index is outside [0, 4)

    """
    _check_row_index(row_index, table)
    new_table = table.copy()
    row = new_table.rows[row_index]

    if row.is_full():
        captured = list(row.cards)
        new_table.rows[row_index] = Row(cards=[card])
        return new_table, total_penalty(captured), captured

    row.cards.append(card)
    return new_table, 0, []


def capture_row(card: Card, row_index: int, table: Table) -> tuple[Table, int, list[Card]]:
    """Take a whole row and replace it with the played card.

    Used when a card is lower than every row's last card. The row can hold
    any number of cards.

    Args:
        card: Card that restarts the row
        row_index: Row chosen by the participant
        table: Current table (not modified)

    Returns:
        Tuple of (new table, penalty taken, captured cards)

    Raises:
        PreconditionViolation: If row_index is outside [0, 4)

    """
    _check_row_index(row_index, table)
    new_table = table.copy()
    captured = list(new_table.rows[row_index].cards)
    new_table.rows[row_index] = Row(cards=[card])
    return new_table, total_penalty(captured), captured


def lowest_penalty_row(table: Table) -> int:
    """Pick the row with the fewest pigs, first one on ties.

    This is the row taken on behalf of a participant who cannot or does
    not choose.
    """
    penalties = [row_penalty(row) for row in table.rows]
    return penalties.index(min(penalties))
