"""RunStore — append-only, day-keyed JSONL storage for match output.

Layout under ``root``::

    <YYYY-MM-DD>/<stem>.jsonl         one MatchResult per line
    <YYYY-MM-DD>/turns/<stem>.jsonl   one TurnLog per line

``stem`` is ``model_game`` with unsafe characters replaced. One writer
per stem is the intended usage; distinct stems append independently.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from llmarena.core.records import MatchResult, TurnLog

_SCHEMA_VERSION = "1.0.0"
_UNSAFE_STEM_RE = re.compile(r"[^a-zA-Z0-9._-]+")


def sanitize_stem(stem: str) -> str:
    """Replace path separators and other unsafe characters with '-'."""
    return _UNSAFE_STEM_RE.sub("-", stem)


def match_stem(model: str, game: str) -> str:
    return sanitize_stem(f"{model}_{game}")


class RunStore:
    """Persistence sink for the match runner and source for the scoreboard."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Sink
    # ------------------------------------------------------------------

    def append_match_result(self, date_iso: str, stem: str, result: MatchResult) -> Path:
        record = result.to_record()
        record["schema_version"] = _SCHEMA_VERSION
        path = self._day_dir(date_iso) / f"{sanitize_stem(stem)}.jsonl"
        self._append(path, record)
        return path

    def append_turn(self, date_iso: str, stem: str, turn: TurnLog) -> Path:
        record = turn.to_record()
        record["schema_version"] = _SCHEMA_VERSION
        path = self._day_dir(date_iso) / "turns" / f"{sanitize_stem(stem)}.jsonl"
        self._append(path, record)
        return path

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    def latest_day(self) -> str | None:
        """Return the most recent day holding at least one result file, or None.

        A day with only turn logs (every match aborted) does not count.
        """
        if not self._root.is_dir():
            return None
        days = sorted(
            p.name for p in self._root.iterdir()
            if p.is_dir() and any(p.glob("*.jsonl"))
        )
        return days[-1] if days else None

    def read_results(self, day: str) -> list[dict]:
        """All MatchResult records written on ``day``, file by file."""
        day_dir = self._root / day
        if not day_dir.is_dir():
            return []
        records: list[dict] = []
        for path in sorted(day_dir.glob("*.jsonl")):
            records.extend(_read_jsonl(path))
        return records

    def read_latest_results(self) -> tuple[str | None, list[dict]]:
        """Return ``(day, records)`` for the latest day written."""
        day = self.latest_day()
        if day is None:
            return None, []
        return day, self.read_results(day)

    def read_turns(self, day: str, stem: str) -> list[dict]:
        path = self._root / day / "turns" / f"{sanitize_stem(stem)}.jsonl"
        if not path.exists():
            return []
        return _read_jsonl(path)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _day_dir(self, date_iso: str) -> Path:
        return self._root / date_iso[:10]

    @staticmethod
    def _append(path: Path, record: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, default=str) + "\n")


def _read_jsonl(path: Path) -> list[dict]:
    records = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records
