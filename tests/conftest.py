"""Shared fixtures and builders for 66 Pigs tests."""

import random

import pytest

from pigs.models.card import Card
from pigs.models.enums import GamePhase
from pigs.models.game import GameSnapshot
from pigs.models.player import Participant
from pigs.models.table import Row, Table
from pigs.services.orchestrator import PhaseOrchestrator


def make_table(*rows: list[int]) -> Table:
    """Build a table from lists of card numbers."""
    return Table(rows=[Row(cards=[Card(n) for n in row]) for row in rows])


def make_participant(
    participant_id: str, hand: list[int], score: int = 0, selected: int | None = None
) -> Participant:
    """Build a participant holding the given card numbers."""
    return Participant(
        id=participant_id,
        display_name=participant_id.upper(),
        score=score,
        hand=[Card(n) for n in sorted(hand)],
        selected_card=Card(selected) if selected is not None else None,
    )


def make_snapshot(
    table: Table,
    participants: list[Participant],
    phase: GamePhase = GamePhase.SELECTING,
    round_number: int = 1,
) -> GameSnapshot:
    """Build a snapshot hosted by the first participant."""
    return GameSnapshot(
        game_id="game-1",
        host_id=participants[0].id,
        participants=participants,
        table=table,
        phase=phase,
        round_number=round_number,
    )


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible deals."""
    return random.Random(1234)


@pytest.fixture
def orchestrator(rng: random.Random) -> PhaseOrchestrator:
    """Orchestrator with the standard threshold and a seeded deck."""
    return PhaseOrchestrator(threshold=66, rng=rng)


@pytest.fixture
def four_participants() -> list[Participant]:
    """Four fresh participants."""
    return [Participant(id=f"p{i}", display_name=f"Player{i}") for i in range(1, 5)]
