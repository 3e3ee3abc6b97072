"""Services driving games: phase orchestration, serialization, hosting."""
