"""Enums for the game."""

from enum import Enum


class GamePhase(str, Enum):
    """Phases of a round. FINISHED ends the whole game."""

    SELECTING = "selecting"
    REVEALING = "revealing"
    ROW_SELECTION = "row_selection"
    FINISHED = "finished"


class ResolutionKind(str, Enum):
    """How a revealed card ended up on the table."""

    PLACED = "placed"  # Appended to its target row
    ROW_FULL = "row_full"  # Sixth card, the row was captured
    ROW_TAKEN = "row_taken"  # Lower than every row, a row was chosen and captured
