"""Terminal scoreboard rendering with rich tables."""

from __future__ import annotations

from collections.abc import Iterable

from rich.table import Table

from llmarena.core.records import MatchResult
from llmarena.scoring import ScoreRow

_OK = "[bold green]✓[/bold green]"
_FAIL = "[bold red]✗[/bold red]"


def _score_style(value: float) -> str:
    if value >= 0.75:
        return "bold green"
    if value > 0:
        return "yellow"
    return "dim"


def render_scoreboard(
    rows: Iterable[ScoreRow],
    day: str | None = None,
    show_cost: bool = False,
) -> Table:
    """One line per (model, game) row."""
    title = f"Scoreboard {day}" if day else "Scoreboard"
    table = Table(title=title, title_style="bold", expand=False)
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Game", no_wrap=True)
    table.add_column("Score", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("Latency", justify="right")
    table.add_column("Matches", justify="right")
    if show_cost:
        table.add_column("Cost", justify="right")

    for row in rows:
        cells = [
            row.model,
            row.game,
            f"{row.score:.2f}",
            f"[{_score_style(row.success_rate)}]{row.success_rate:.0%}[/]",
            f"{row.avg_latency:.0f} ms",
            str(row.matches),
        ]
        if show_cost:
            cells.append(f"${row.cost_usd:.4f}")
        table.add_row(*cells)
    return table


def render_matches(results: Iterable[MatchResult], show_cost: bool = False) -> Table:
    """One line per played match, error reason included for losses."""
    table = Table(title="Matches", title_style="bold", expand=False)
    table.add_column("", width=1)
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Game", no_wrap=True)
    table.add_column("Seed", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Turns", justify="right")
    if show_cost:
        table.add_column("Cost", justify="right")
    table.add_column("Note", style="dim")

    for r in results:
        cells = [
            _OK if r.success else _FAIL,
            r.model,
            r.game,
            str(r.seed),
            f"{r.score:.2f}",
            str(len(r.turns)),
        ]
        if show_cost:
            cells.append(f"${r.cost_usd:.4f}")
        cells.append(str(r.meta.get("last_error", "")))
        table.add_row(*cells)
    return table
