"""CLI to watch bots play 66 Pigs.

Creates a game with bot participants, drives it through the host driver
exactly as a host client would, and prints each round and the final
standings.

Usage:
    pigs-sim --players 5 --random 2 --seed 7
"""

import argparse
import logging
import random
import sys
import time

from rich.console import Console
from rich.table import Table as RichTable

from pigs.bots import BaseBot, BotDifficulty, create_bot
from pigs.config import settings
from pigs.constants import MAX_PLAYERS, MIN_PLAYERS
from pigs.errors import GameRuleError
from pigs.models.enums import GamePhase, ResolutionKind
from pigs.models.game import GameSnapshot, is_round_over, winner
from pigs.models.player import Participant
from pigs.repositories.game_repository import GameRepository
from pigs.services.host_driver import HostDriver
from pigs.services.orchestrator import PhaseOrchestrator

logger = logging.getLogger(__name__)

console = Console()

# Guard against games that keep cancelling out with doubles
DEFAULT_MAX_ROUNDS = 50


class BotGameSimulator:
    """Simulates a game between bot participants."""

    def __init__(
        self,
        num_players: int = 4,
        bot_types: list[str] | None = None,
        difficulty: BotDifficulty = BotDifficulty.MEDIUM,
        seed: int | None = None,
        threshold: int | None = None,
        quiet: bool = False,
    ) -> None:
        """Initialize simulator.

        Args:
            num_players: Number of participants (2-10)
            bot_types: Strategy per seat ("random" or "rule_based")
            difficulty: Difficulty for rule-based bots
            seed: Seed for deals and bot choices
            threshold: Pigs that end the game
            quiet: Only print the final standings

        """
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise ValueError(f"Must have {MIN_PLAYERS}-{MAX_PLAYERS} players")

        self.num_players = num_players
        self.bot_types = bot_types or [settings.default_bot_strategy] * num_players
        self.quiet = quiet
        rng = random.Random(seed)  # noqa: S311

        self.participants = [
            Participant(id=f"bot_{i}", display_name=f"Bot{i + 1}") for i in range(num_players)
        ]
        self.bots: dict[str, BaseBot] = {}
        for i, participant in enumerate(self.participants):
            bot_type = self.bot_types[i] if i < len(self.bot_types) else "rule_based"
            bot = create_bot(bot_type, participant.id, difficulty)
            bot.rng = random.Random(rng.random())  # noqa: S311
            self.bots[participant.id] = bot

        self.game_id: str | None = None
        self.repository = GameRepository()
        # Bots answer their own row choices, so nothing is defaulted
        self.driver = HostDriver(
            self.repository,
            local_participant_id=self.participants[0].id,
            orchestrator=PhaseOrchestrator(threshold=threshold, rng=rng),
            auto_default_remote=False,
        )

    def play_game(self, max_rounds: int = DEFAULT_MAX_ROUNDS) -> GameSnapshot:
        """Play until someone reaches the threshold or max_rounds is exceeded.

        Raises:
            GameRuleError: If a transition is rejected, e.g. too few cards
                are left to deal another round

        """
        snapshot = self.driver.start_game(self.participants)
        game_id = self.game_id = snapshot.game_id
        self._print_setup(snapshot)
        current_round = snapshot.round_number

        while not snapshot.is_finished() and snapshot.round_number <= max_rounds:
            if snapshot.phase == GamePhase.SELECTING and is_round_over(snapshot.participants):
                # The last batch could not deal; this raises if it still cannot
                snapshot = self.driver.deal_next_round(game_id)
            elif snapshot.phase == GamePhase.SELECTING:
                for participant in snapshot.participants:
                    card = self.bots[participant.id].select_card(snapshot, participant.hand)
                    snapshot = self.driver.submit_selection(game_id, participant.id, card.number)
                snapshot = self.driver.advance(game_id)
            elif snapshot.phase == GamePhase.ROW_SELECTION:
                pending = snapshot.pending_row_choice
                if pending is None:
                    break
                row_index = self.bots[pending.participant_id].choose_row(snapshot, pending.card)
                snapshot = self.driver.choose_row(game_id, pending.participant_id, row_index)
                snapshot = self.driver.advance(game_id)
            else:
                snapshot = self.driver.advance(game_id)

            self._print_turn(snapshot)
            if snapshot.round_number != current_round:
                current_round = snapshot.round_number
                self._print_round(snapshot)

        if not snapshot.is_finished():
            logger.warning("Game %s stopped after %d rounds", game_id, max_rounds)
        return snapshot

    def _print_setup(self, snapshot: GameSnapshot) -> None:
        if self.quiet:
            return
        console.print(f"[bold]66 Pigs[/bold] - game {snapshot.game_id}")
        for participant in snapshot.participants:
            console.print(f"  {participant.display_name}: {self.bots[participant.id]}")
        self._print_round(snapshot)

    def _print_round(self, snapshot: GameSnapshot) -> None:
        if self.quiet:
            return
        console.print()
        console.print(f"[bold cyan]Round {snapshot.round_number}[/bold cyan]")
        for index, row in enumerate(snapshot.table.rows, 1):
            console.print(f"  Row {index}: {row}")

    def _print_turn(self, snapshot: GameSnapshot) -> None:
        if self.quiet or snapshot.phase == GamePhase.ROW_SELECTION:
            return
        for resolution in snapshot.resolutions:
            participant = snapshot.get_participant(resolution.participant_id)
            name = participant.display_name if participant else resolution.participant_id
            if resolution.kind == ResolutionKind.PLACED:
                console.print(
                    f"  [dim]{name} plays {resolution.card.number} on row "
                    f"{resolution.row_index + 1}[/dim]"
                )
            else:
                console.print(
                    f"  [red]{name} plays {resolution.card.number} and takes row "
                    f"{resolution.row_index + 1}: {resolution.penalty_taken:+d} pigs[/red]"
                )

    def print_standings(self, snapshot: GameSnapshot) -> None:
        """Print the final leaderboard."""
        console.print()
        table = RichTable(title=f"Final standings after round {snapshot.round_number}")
        table.add_column("#", justify="right")
        table.add_column("Participant", style="cyan")
        table.add_column("Bot")
        table.add_column("Pigs", justify="right", style="green")

        for rank, entry in enumerate(snapshot.get_leaderboard(), 1):
            table.add_row(
                str(rank),
                entry["display_name"],
                str(self.bots[entry["participant_id"]]),
                str(entry["score"]),
            )
        console.print(table)

        best = winner(snapshot.participants)
        console.print(f"[bold green]Winner: {best.display_name} with {best.score} pigs[/bold green]")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Watch bots play 66 Pigs")
    parser.add_argument(
        "--players", type=int, default=4, help=f"Number of players ({MIN_PLAYERS}-{MAX_PLAYERS})"
    )
    parser.add_argument(
        "--random", type=int, default=0, help="Number of random bots (rest will be rule-based)"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in BotDifficulty if d != BotDifficulty.RANDOM],
        default=BotDifficulty.MEDIUM.value,
        help="Rule-based bot difficulty",
    )
    parser.add_argument("--seed", type=int, default=settings.random_seed, help="Random seed")
    parser.add_argument(
        "--threshold", type=int, default=settings.penalty_threshold, help="Pigs that end the game"
    )
    parser.add_argument(
        "--max-rounds", type=int, default=DEFAULT_MAX_ROUNDS, help="Stop after this many rounds"
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the final standings")
    parser.add_argument("--verbose", action="store_true", help="Log every transition")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    if not args.verbose:
        logging.getLogger("pigs").setLevel(logging.WARNING)

    if not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
        console.print(f"[red]Error: Must have {MIN_PLAYERS}-{MAX_PLAYERS} players[/red]")
        return 1

    bot_types = ["random" if i < args.random else "rule_based" for i in range(args.players)]
    simulator = BotGameSimulator(
        num_players=args.players,
        bot_types=bot_types,
        difficulty=BotDifficulty(args.difficulty),
        seed=args.seed,
        threshold=args.threshold,
        quiet=args.quiet,
    )

    start_time = time.time()
    try:
        snapshot = simulator.play_game(max_rounds=args.max_rounds)
    except GameRuleError as e:
        console.print(f"[red]Error: game stopped ({e.code}): {e}[/red]")
        if simulator.game_id is not None:
            simulator.print_standings(simulator.driver.load(simulator.game_id))
        return 1

    simulator.print_standings(snapshot)
    console.print(f"Game duration: {time.time() - start_time:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
