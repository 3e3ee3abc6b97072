"""Card model and penalty rules."""

from dataclasses import dataclass, field

from pigs.constants import (
    DEFAULT_PENALTY,
    DOUBLE_NUMBERS,
    DOUBLE_PENALTY,
    ENDS_IN_FIVE_PENALTY,
    ENDS_IN_ZERO_PENALTY,
    TOTAL_CARDS,
)
from pigs.errors import ErrorCode, PreconditionViolation


def penalty_of(number: int) -> int:
    """Return the pig value of a card number.

    Doubles are checked first, so 55 is worth -11 and not 2.

    Args:
        number: Card number (1-104)

    Returns:
        -11 for doubles, 2 for numbers ending in 5, 3 for numbers ending in 0,
        1 otherwise

    Raises:
        PreconditionViolation: If the number is not a card of the deck

    """
    if not 1 <= number <= TOTAL_CARDS:
        raise PreconditionViolation(f"No card numbered {number}", ErrorCode.INVALID_CARD)
    if number in DOUBLE_NUMBERS:
        return DOUBLE_PENALTY
    if number % 10 == 5:
        return ENDS_IN_FIVE_PENALTY
    if number % 10 == 0:
        return ENDS_IN_ZERO_PENALTY
    return DEFAULT_PENALTY


@dataclass(frozen=True, order=True)
class Card:
    """A numbered card.

    Cards order and compare by number only; the penalty is derived from it.

    Attributes:
        number: Card number (1-104)
        penalty: Pigs taken by whoever captures this card

    """

    number: int
    penalty: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        """Derive the penalty from the number."""
        object.__setattr__(self, "penalty", penalty_of(self.number))

    def is_double(self) -> bool:
        """Check if card is one of the -11 doubles."""
        return self.number in DOUBLE_NUMBERS

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.number} ({self.penalty:+d})"


def get_card(number: int) -> Card:
    """Get a card by its number."""
    return Card(number)


def build_deck() -> list[Card]:
    """Build the full ordered deck of 104 cards."""
    return [Card(number) for number in range(1, TOTAL_CARDS + 1)]


def total_penalty(cards: list[Card]) -> int:
    """Sum the penalties of a group of cards."""
    return sum(card.penalty for card in cards)
