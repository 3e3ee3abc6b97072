"""Bot participants for 66 Pigs.

Available bots:
- RandomBot: Plays random cards and takes random rows
- RuleBasedBot: Avoids captures, takes the cheapest row (easy/medium/hard)
"""

from pigs.bots.base_bot import BaseBot, BotDifficulty
from pigs.bots.random_bot import RandomBot
from pigs.bots.rule_based_bot import RuleBasedBot

__all__ = ["BaseBot", "BotDifficulty", "RandomBot", "RuleBasedBot", "create_bot"]


def create_bot(
    strategy: str, participant_id: str, difficulty: BotDifficulty = BotDifficulty.MEDIUM
) -> BaseBot:
    """Create a bot by strategy name ("random" or "rule_based")."""
    if strategy == "random":
        return RandomBot(participant_id)
    if strategy == "rule_based":
        return RuleBasedBot(participant_id, difficulty)
    raise ValueError(f"Unknown bot strategy: {strategy}")
