"""End-to-end tests for complete game flows."""

import pytest

from pigs.bots import BotDifficulty
from pigs.cli import BotGameSimulator, main
from pigs.constants import HAND_SIZE, TABLE_ROWS
from pigs.errors import ErrorCode, PreconditionViolation
from pigs.models.enums import GamePhase
from pigs.models.game import can_deal_round, validate_snapshot, winner

MAX_ROUNDS = 30


def assert_game_ended(snapshot, threshold=66):
    """Either someone reached the threshold or the round limit stopped play."""
    validate_snapshot(snapshot)
    if snapshot.is_finished():
        assert max(p.score for p in snapshot.participants) >= threshold
    else:
        assert snapshot.round_number > MAX_ROUNDS
        assert snapshot.phase == GamePhase.SELECTING


class TestBotGames:
    """Full games between bots, driven through the host driver."""

    @pytest.mark.parametrize("num_players", [2, 4, 6])
    def test_game_completes(self, num_players):
        """A seeded game runs to its end without breaking the rules."""
        simulator = BotGameSimulator(num_players=num_players, seed=42, quiet=True)
        snapshot = simulator.play_game(max_rounds=MAX_ROUNDS)

        assert_game_ended(snapshot)
        best = winner(snapshot.participants)
        assert best.score == min(p.score for p in snapshot.participants)

    def test_mixed_bots(self):
        """Random and rule-based bots can share a table."""
        simulator = BotGameSimulator(
            num_players=5,
            bot_types=["random", "rule_based", "random", "rule_based", "random"],
            difficulty=BotDifficulty.EASY,
            seed=7,
            quiet=True,
        )
        assert_game_ended(simulator.play_game(max_rounds=MAX_ROUNDS))

    def test_same_seed_same_game(self):
        """Seeded games are reproducible."""
        first = BotGameSimulator(num_players=4, seed=11, quiet=True).play_game(max_rounds=3)
        second = BotGameSimulator(num_players=4, seed=11, quiet=True).play_game(max_rounds=3)

        assert [p.score for p in first.participants] == [p.score for p in second.participants]
        assert [row.numbers() for row in first.table.rows] == [
            row.numbers() for row in second.table.rows
        ]


    def test_ten_players_stop_when_round_cannot_be_dealt(self):
        """Round 1 is kept and dealing round 2 is refused."""
        simulator = BotGameSimulator(num_players=10, seed=3, quiet=True)
        with pytest.raises(PreconditionViolation) as exc:
            simulator.play_game(max_rounds=MAX_ROUNDS)
        assert exc.value.code == ErrorCode.NOT_ENOUGH_CARDS

        snapshot = simulator.driver.load(simulator.game_id)
        validate_snapshot(snapshot)
        assert snapshot.phase == GamePhase.SELECTING
        assert snapshot.round_number == 1
        assert all(p.hand == [] for p in snapshot.participants)
        assert not can_deal_round(10, snapshot.table)

    def test_nine_players(self):
        """Nine players either keep dealing or stop on a crowded table."""
        simulator = BotGameSimulator(num_players=9, seed=8, quiet=True)
        try:
            snapshot = simulator.play_game(max_rounds=MAX_ROUNDS)
        except PreconditionViolation as e:
            assert e.code == ErrorCode.NOT_ENOUGH_CARDS
            snapshot = simulator.driver.load(simulator.game_id)
            assert not can_deal_round(9, snapshot.table)
            assert all(p.hand == [] for p in snapshot.participants)
            validate_snapshot(snapshot)
        else:
            assert_game_ended(snapshot)
    def test_stops_at_round_limit(self):
        """An unreachable threshold stops at the round limit instead."""
        simulator = BotGameSimulator(num_players=3, seed=1, threshold=10_000, quiet=True)
        snapshot = simulator.play_game(max_rounds=2)

        validate_snapshot(snapshot)
        assert not snapshot.is_finished()
        assert snapshot.round_number == 3
        assert snapshot.phase == GamePhase.SELECTING
        assert all(len(p.hand) == HAND_SIZE for p in snapshot.participants)
        assert len(snapshot.table.rows) == TABLE_ROWS

    def test_rejects_bad_player_count(self):
        """Player counts outside 2-10 are refused."""
        with pytest.raises(ValueError, match="players"):
            BotGameSimulator(num_players=1)


class TestCli:
    """Command line entry point."""

    def test_main_runs_quiet_game(self, capsys):
        """A quiet run prints the standings and exits cleanly."""
        assert main(["--players", "3", "--seed", "5", "--max-rounds", "5", "--quiet"]) == 0
        out = capsys.readouterr().out
        assert "Final standings" in out
        assert "Winner" in out

    def test_main_rejects_player_count(self, capsys):
        """Out of range player counts exit with an error."""
        assert main(["--players", "11", "--quiet"]) == 1
        assert "Must have" in capsys.readouterr().out

    def test_main_reports_crowded_table(self, capsys):
        """A game that cannot deal round 2 exits non-zero with the standings."""
        assert main(["--players", "10", "--seed", "3", "--quiet"]) == 1
        out = capsys.readouterr().out
        assert "Error" in out
        assert "Final standings" in out
