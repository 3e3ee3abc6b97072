"""66 Pigs: rules engine and phase state machine for a 6 Nimmt! variant."""

__version__ = "1.0.0"
