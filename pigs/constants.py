"""Game constants for 66 Pigs."""

# Deck
TOTAL_CARDS = 104
DOUBLE_NUMBERS = frozenset({11, 22, 33, 44, 55, 66, 77, 88, 99})

# Penalties (pigs)
DOUBLE_PENALTY = -11
ENDS_IN_FIVE_PENALTY = 2
ENDS_IN_ZERO_PENALTY = 3
DEFAULT_PENALTY = 1

# Table
TABLE_ROWS = 4
ROW_CAPACITY = 5  # A sixth card captures the row

# Game limits
HAND_SIZE = 10
MIN_PLAYERS = 2
MAX_PLAYERS = 10
PENALTY_THRESHOLD = 66
