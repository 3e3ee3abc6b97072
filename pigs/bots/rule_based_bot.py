"""Rule-based bot with a pig-avoiding heuristic."""

import random

from pigs.bots.base_bot import BaseBot, BotDifficulty
from pigs.constants import ROW_CAPACITY
from pigs.models.card import Card
from pigs.models.game import GameSnapshot
from pigs.models.table import Table, find_target_row, lowest_penalty_row, row_penalty

# Strategy weights
EASY_MISTAKE_PROBABILITY = 0.3
CROWDED_ROW_RISK = 2  # Fifth card: the next player on this row takes it
GAP_RISK_DIVISOR = 10  # Larger gaps leave room for other cards to slip in


class RuleBasedBot(BaseBot):
    """Bot that estimates the pigs each card would cost right now.

    Playing Strategy:
    - A card that fills the sixth slot costs that row's pigs
    - A card lower than every row costs the cheapest row
    - Otherwise prefer cards that land close to a row's end on a short row
    - Hard bots also hold back their lowest cards while others are safe

    Row choice: always the row with the fewest pigs (doubles make a row cheap).
    """

    def __init__(
        self,
        participant_id: str,
        difficulty: BotDifficulty = BotDifficulty.MEDIUM,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize rule-based bot."""
        super().__init__(participant_id, difficulty, rng)

    def select_card(self, snapshot: GameSnapshot, hand: list[Card]) -> Card:
        """Play the card with the lowest estimated cost."""
        if self.difficulty == BotDifficulty.EASY and self.rng.random() < EASY_MISTAKE_PROBABILITY:
            return self.rng.choice(hand)

        return min(hand, key=lambda card: (self._card_cost(card, snapshot.table), -card.number))

    def choose_row(self, snapshot: GameSnapshot, card: Card) -> int:
        """Take the row with the fewest pigs."""
        return lowest_penalty_row(snapshot.table)

    def _card_cost(self, card: Card, table: Table) -> float:
        row_index = find_target_row(card, table)
        if row_index is None:
            cost = float(min(row_penalty(row) for row in table.rows))
            if self.difficulty == BotDifficulty.HARD:
                # Low cards are worth more later, when rows are longer and costlier
                cost += 1
            return cost

        row = table.rows[row_index]
        if row.is_full():
            return float(row_penalty(row))

        gap = card.number - row.last_card.number
        risk = gap / GAP_RISK_DIVISOR
        if len(row) + 1 == ROW_CAPACITY:
            risk += CROWDED_ROW_RISK
        return risk / ROW_CAPACITY
