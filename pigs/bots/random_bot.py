"""Random bot that makes random valid moves."""

import random

from pigs.bots.base_bot import BaseBot, BotDifficulty
from pigs.models.card import Card
from pigs.models.game import GameSnapshot


class RandomBot(BaseBot):
    """Bot that makes completely random decisions.

    This serves as a baseline for evaluating other bot strategies
    and provides a simple opponent for testing.
    """

    def __init__(self, participant_id: str, rng: random.Random | None = None) -> None:
        """Initialize random bot."""
        super().__init__(participant_id, BotDifficulty.RANDOM, rng)

    def select_card(self, snapshot: GameSnapshot, hand: list[Card]) -> Card:
        """Pick a random card from hand."""
        return self.rng.choice(hand)

    def choose_row(self, snapshot: GameSnapshot, card: Card) -> int:
        """Take a random row."""
        return self.rng.randrange(len(snapshot.table.rows))
