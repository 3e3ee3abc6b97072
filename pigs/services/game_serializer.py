"""Game serialization for the shared store.

Handles conversion between GameSnapshot objects and plain JSON-ready
dictionaries: one game record plus one record per participant.
"""

from datetime import UTC, datetime
from typing import Any

from pigs.errors import ErrorCode, InconsistentSnapshotError, PreconditionViolation
from pigs.models.card import Card
from pigs.models.enums import GamePhase, ResolutionKind
from pigs.models.game import GameSnapshot, Resolution, RevealedCard
from pigs.models.player import Participant
from pigs.models.table import Row, Table


def serialize_card(card: Card) -> dict[str, Any]:
    """Serialize a Card to a dictionary."""
    return {"number": card.number, "penalty": card.penalty}


def deserialize_card(data: dict[str, Any]) -> Card:
    """Deserialize a Card, rejecting a stored penalty that disagrees with the rules."""
    try:
        card = Card(int(data["number"]))
    except PreconditionViolation as e:
        raise InconsistentSnapshotError(str(e), ErrorCode.INVALID_CARD) from e
    except (KeyError, TypeError, ValueError) as e:
        raise InconsistentSnapshotError(
            f"Malformed card record {data!r}", ErrorCode.INVALID_CARD
        ) from e
    stored = data.get("penalty", card.penalty)
    if stored != card.penalty:
        raise InconsistentSnapshotError(
            f"Card {card.number} stored with penalty {stored}, expected {card.penalty}"
        )
    return card


def _optional_card(data: dict[str, Any] | None) -> Card | None:
    return deserialize_card(data) if data else None


def serialize_table(table: Table) -> list[list[dict[str, Any]]]:
    """Serialize a Table to a list of rows."""
    return [[serialize_card(card) for card in row.cards] for row in table.rows]


def deserialize_table(data: list[list[dict[str, Any]]]) -> Table:
    """Deserialize a Table from a list of rows."""
    return Table(rows=[Row(cards=[deserialize_card(c) for c in row]) for row in data])


def serialize_participant(participant: Participant) -> dict[str, Any]:
    """Serialize a Participant to a dictionary."""
    return {
        "id": participant.id,
        "display_name": participant.display_name,
        "score": participant.score,
        "hand": [serialize_card(card) for card in participant.hand],
        "selected_card": (
            serialize_card(participant.selected_card) if participant.selected_card else None
        ),
    }


def deserialize_participant(data: dict[str, Any]) -> Participant:
    """Deserialize a Participant from a dictionary."""
    return Participant(
        id=data["id"],
        display_name=data.get("display_name", data["id"]),
        score=data.get("score", 0),
        hand=[deserialize_card(c) for c in data.get("hand", [])],
        selected_card=_optional_card(data.get("selected_card")),
    )


def serialize_revealed(revealed: RevealedCard) -> dict[str, Any]:
    """Serialize a RevealedCard to a dictionary."""
    return {"participant_id": revealed.participant_id, "card": serialize_card(revealed.card)}


def deserialize_revealed(data: dict[str, Any]) -> RevealedCard:
    """Deserialize a RevealedCard from a dictionary."""
    return RevealedCard(participant_id=data["participant_id"], card=deserialize_card(data["card"]))


def serialize_resolution(resolution: Resolution) -> dict[str, Any]:
    """Serialize a Resolution to a dictionary."""
    return {
        "participant_id": resolution.participant_id,
        "card": serialize_card(resolution.card),
        "row_index": resolution.row_index,
        "penalty_taken": resolution.penalty_taken,
        "captured_cards": [serialize_card(c) for c in resolution.captured_cards],
        "kind": resolution.kind.value,
    }


def deserialize_resolution(data: dict[str, Any]) -> Resolution:
    """Deserialize a Resolution from a dictionary."""
    return Resolution(
        participant_id=data["participant_id"],
        card=deserialize_card(data["card"]),
        row_index=data["row_index"],
        penalty_taken=data.get("penalty_taken", 0),
        captured_cards=tuple(deserialize_card(c) for c in data.get("captured_cards", [])),
        kind=ResolutionKind(data.get("kind", ResolutionKind.PLACED.value)),
    )


def serialize_snapshot(snapshot: GameSnapshot) -> dict[str, Any]:
    """Serialize a complete GameSnapshot to a store document.

    Args:
        snapshot: Snapshot to serialize

    Returns:
        Dictionary with the game record and the participant records

    """
    return {
        "_id": snapshot.game_id,
        "host_id": snapshot.host_id,
        "phase": snapshot.phase.value,
        "round_number": snapshot.round_number,
        "table": serialize_table(snapshot.table),
        "participants": [serialize_participant(p) for p in snapshot.participants],
        "revealed_cards": [serialize_revealed(r) for r in snapshot.revealed_cards],
        "resolution_index": snapshot.resolution_index,
        "pending_row_choice": (
            serialize_revealed(snapshot.pending_row_choice)
            if snapshot.pending_row_choice
            else None
        ),
        "resolutions": [serialize_resolution(r) for r in snapshot.resolutions],
        "last_action": snapshot.last_action,
        "version": snapshot.version,
        "updated_at": datetime.now(UTC).isoformat(),
    }


def deserialize_snapshot(data: dict[str, Any]) -> GameSnapshot:
    """Deserialize a GameSnapshot from a store document.

    Args:
        data: Store document

    Returns:
        GameSnapshot with full state restored

    Raises:
        InconsistentSnapshotError: If a card or the phase cannot be restored

    """
    try:
        phase = GamePhase(data["phase"])
    except ValueError as e:
        raise InconsistentSnapshotError(f"Unknown phase {data['phase']!r}") from e

    pending = data.get("pending_row_choice")
    return GameSnapshot(
        game_id=data["_id"],
        host_id=data["host_id"],
        participants=[deserialize_participant(p) for p in data.get("participants", [])],
        table=deserialize_table(data.get("table", [])),
        phase=phase,
        round_number=data.get("round_number", 1),
        revealed_cards=[deserialize_revealed(r) for r in data.get("revealed_cards", [])],
        resolution_index=data.get("resolution_index", 0),
        pending_row_choice=deserialize_revealed(pending) if pending else None,
        resolutions=[deserialize_resolution(r) for r in data.get("resolutions", [])],
        last_action=data.get("last_action"),
        version=data.get("version", 0),
    )
