"""Game domain models."""

from pigs.models.card import Card, build_deck, get_card, penalty_of
from pigs.models.deck import Deck, deal_hands, initialize_table, shuffle_deck
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
    Row,
    Table,
    capture_row,
    find_target_row,
    lowest_penalty_row,
    place_card,
    row_penalty,
)

__all__ = [
    "Card",
    "Deck",
    "GamePhase",
    "GameSnapshot",
    "Participant",
    "Resolution",
    "ResolutionKind",
    "RevealedCard",
    "Row",
    "Table",
    "build_deck",
    "can_deal_round",
    "capture_row",
    "deal_hands",
    "find_target_row",
    "get_card",
    "initialize_table",
    "is_game_over",
    "is_round_over",
    "lowest_penalty_row",
    "penalty_of",
    "place_card",
    "row_penalty",
    "shuffle_deck",
    "start_new_round",
    "validate_snapshot",
    "winner",
]
