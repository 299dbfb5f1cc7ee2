"""LLM Arena reporting module.

Usage:
    from llmarena.reporting import render_scoreboard

    day, rows = Scoreboard(RunStore("runs")).latest()
    console.print(render_scoreboard(rows, day=day))
"""

from .scoreboard import render_matches, render_scoreboard

__all__ = [
    "render_matches",
    "render_scoreboard",
]
