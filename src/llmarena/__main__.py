"""CLI entry point: python -m llmarena {run,play,scoreboard}"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from llmarena.arena import Arena
from llmarena.config import ConfigError, default_config, load_config
from llmarena.core.records import TurnLog
from llmarena.core.registry import get_provider
from llmarena.core.seed import today_seed
from llmarena.core.storage import RunStore
from llmarena.games import GAMES, get_game
from llmarena.reporting import render_matches, render_scoreboard
from llmarena.runner import MatchRunner
from llmarena.scoring import Scoreboard, aggregate

console = Console()


def _cmd_run(args) -> int:
    if args.config is not None:
        if not args.config.exists():
            print(f"Error: config file not found: {args.config}", file=sys.stderr)
            return 1
        try:
            config = load_config(args.config)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        config = default_config()

    if args.seed is not None:
        config.seed = args.seed
    if args.runs_dir is not None:
        config.runs_dir = args.runs_dir
    if args.show_cost:
        config.show_cost = True

    arena = Arena(config)
    console.print(f"[bold]Arena:[/bold] {config.name} (seed={arena.seeds.base_seed}, repeats={config.repeats})")
    console.print(f"[dim]Models: {', '.join(m.name for m in config.models)}[/dim]")
    console.print(f"[dim]Games:  {', '.join(config.games)}[/dim]")
    console.print()

    outcome = arena.run()

    console.print(render_matches(outcome.results, show_cost=config.show_cost))
    console.print(render_scoreboard(
        aggregate(outcome.results, show_cost=config.show_cost),
        show_cost=config.show_cost,
    ))
    for failure in outcome.failures:
        console.print(
            f"[bold red]FAILED[/bold red] {failure.model} x {failure.game} "
            f"(seed {failure.seed}): {escape(failure.error)}"
        )
    console.print(f"[dim]Runs: {config.runs_dir}[/dim]")
    return 0


def _print_turn(turn: TurnLog) -> None:
    status = "[green]ok[/green]" if turn.error is None else f"[red]{turn.error_kind}[/red]"
    phase = f" {turn.phase}" if turn.phase else ""
    shown = turn.parsed if turn.parsed is not None else repr(turn.raw_text)
    # Model output may contain rich markup brackets
    console.print(f"  turn {turn.turn:>2}{phase} {status} {escape(str(shown))}")


def _cmd_play(args) -> int:
    try:
        game = get_game(args.game)
        provider = get_provider(args.model)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    seed = args.seed if args.seed is not None else today_seed()
    sink = RunStore(args.runs_dir) if args.runs_dir is not None else None
    runner = MatchRunner(sink=sink)

    console.print(f"[bold]{game.name}[/bold] x {args.model} (seed={seed})")
    result = runner.play(game, provider, seed, args.model, on_turn=_print_turn)
    console.print(render_matches([result], show_cost=args.show_cost))
    return 0


def _cmd_scoreboard(args) -> int:
    day, rows = Scoreboard(RunStore(args.runs_dir), show_cost=args.show_cost).latest()
    if day is None:
        console.print(f"[bold red]No runs found.[/bold red]\nLooking in: {args.runs_dir.resolve()}")
        return 1
    console.print(render_scoreboard(rows, day=day, show_cost=args.show_cost))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llmarena",
        description="Daily LLM game arena",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Play every model against every game")
    run.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Path to arena YAML config file (default: built-in model list)",
    )
    run.add_argument("--seed", type=int, default=None, help="Base seed (default: today's YYYYMMDD)")
    run.add_argument("--runs-dir", type=Path, default=None, help="Output directory (default: runs/)")
    run.add_argument("--show-cost", action="store_true", default=False)
    run.set_defaults(func=_cmd_run)

    play = sub.add_parser("play", help="Play a single match and print each turn")
    play.add_argument("game", choices=sorted(GAMES))
    play.add_argument("--model", default="simulated", help="Model name (default: simulated)")
    play.add_argument("--seed", type=int, default=None)
    play.add_argument("--runs-dir", type=Path, default=None, help="Persist turns and result here")
    play.add_argument("--show-cost", action="store_true", default=False)
    play.set_defaults(func=_cmd_play)

    board = sub.add_parser("scoreboard", help="Show the scoreboard for the latest day")
    board.add_argument("--runs-dir", type=Path, default=Path("runs"))
    board.add_argument("--show-cost", action="store_true", default=False)
    board.set_defaults(func=_cmd_scoreboard)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
