"""Seeds — the daily seed and HMAC-derived per-game seeds.

Every model plays the same seed for a given game on a given day, so
scores are comparable. Repeats derive fresh seeds via HMAC-SHA256 so
adding a repeat never shifts the seeds of the others.
"""

import hashlib
import hmac
from datetime import date, datetime, timezone


def today_seed(day: date | None = None) -> int:
    """Return the UTC calendar day as an integer, e.g. 20261019."""
    day = day or datetime.now(timezone.utc).date()
    return int(day.strftime("%Y%m%d"))


class SeedManager:
    """Produces deterministic seeds for each game and repeat."""

    def __init__(self, base_seed: int):
        self._base_seed = base_seed

    @property
    def base_seed(self) -> int:
        return self._base_seed

    def get_match_seed(self, game: str, repeat: int) -> int:
        """Repeat 0 plays the base seed; later repeats are derived via HMAC."""
        if repeat == 0:
            return self._base_seed
        key = self._base_seed.to_bytes(8, byteorder="big", signed=True)
        msg = f"{game}:{repeat}".encode("utf-8")
        digest = hmac.new(key, msg, hashlib.sha256).digest()
        return int.from_bytes(digest[:4], byteorder="big")
