"""Snapshot storage."""

from pigs.repositories.game_repository import GameRepository

__all__ = ["GameRepository"]
