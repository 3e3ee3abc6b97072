"""Participant model."""

from dataclasses import dataclass, field

from pigs.errors import ErrorCode, InconsistentSnapshotError
from pigs.models.card import Card


@dataclass
class Participant:
    """Represents a participant in the game.

    Attributes:
        id: Unique participant identifier
        display_name: Participant's nickname
        score: Pigs collected so far this game
        hand: Cards in hand, sorted ascending
        selected_card: Card chosen for the current turn (must be in hand)

    """

    id: str
    display_name: str
    score: int = 0
    hand: list[Card] = field(default_factory=list)
    selected_card: Card | None = None

    def reset_game(self) -> None:
        """Reset participant state for a new game."""
        self.score = 0
        self.hand = []
        self.selected_card = None

    def has_card(self, card: Card) -> bool:
        """Check if participant has a card in their hand."""
        return card in self.hand

    def find_card(self, number: int) -> Card | None:
        """Get the card with this number from the hand."""
        for card in self.hand:
            if card.number == number:
                return card
        return None

    def remove_card(self, card: Card) -> None:
        """Remove a card from participant's hand.

        Raises:
            InconsistentSnapshotError: If the card is not in the hand

        """
        if card not in self.hand:
            raise InconsistentSnapshotError(
                f"Card {card.number} is not in {self.id}'s hand", ErrorCode.CARD_NOT_IN_HAND
            )
        self.hand.remove(card)

    def has_selected(self) -> bool:
        """Check if participant has chosen a card this turn."""
        return self.selected_card is not None

    def add_penalty(self, pigs: int) -> None:
        """Add captured pigs to the score."""
        self.score += pigs

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.display_name} - Pigs: {self.score}"
