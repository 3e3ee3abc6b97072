"""Base class for all bot strategies."""

import random
from abc import ABC, abstractmethod
from enum import Enum

from pigs.models.card import Card
from pigs.models.game import GameSnapshot


class BotDifficulty(str, Enum):
    """Bot difficulty levels."""

    RANDOM = "random"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class BaseBot(ABC):
    """Abstract base class for bot strategies.

    All bot implementations must inherit from this class and implement
    the select_card() and choose_row() methods.
    """

    def __init__(
        self,
        participant_id: str,
        difficulty: BotDifficulty = BotDifficulty.MEDIUM,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the bot.

        Args:
            participant_id: ID of the participant this bot controls
            difficulty: Bot difficulty level
            rng: Random source for the bot's choices

        """
        self.participant_id = participant_id
        self.difficulty = difficulty
        self.rng = rng or random.Random()  # noqa: S311

    @abstractmethod
    def select_card(self, snapshot: GameSnapshot, hand: list[Card]) -> Card:
        """Pick the card to play this turn.

        Args:
            snapshot: Current game state
            hand: Bot's remaining cards (never empty)

        Returns:
            A card from hand

        """

    @abstractmethod
    def choose_row(self, snapshot: GameSnapshot, card: Card) -> int:
        """Pick the row to take when the card is lower than every row.

        Args:
            snapshot: Game state in the row_selection phase
            card: The bot's card that restarts the row

        Returns:
            Row index (0-3)

        """

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.__class__.__name__} ({self.difficulty.value})"
