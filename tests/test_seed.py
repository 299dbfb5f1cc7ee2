"""Tests for seeds — the daily seed and per-game derivation."""

from datetime import date, datetime, timezone

from llmarena.core.seed import SeedManager, today_seed


class TestTodaySeed:
    def test_yyyymmdd(self):
        assert today_seed(date(2026, 10, 19)) == 20261019

    def test_defaults_to_today(self):
        assert today_seed() == int(datetime.now(timezone.utc).strftime("%Y%m%d"))


class TestSeedManager:
    def test_first_repeat_is_base_seed(self):
        sm = SeedManager(20261019)
        assert sm.get_match_seed("wordgrid", 0) == 20261019
        assert sm.get_match_seed("deduction", 0) == 20261019

    def test_same_inputs_same_seed(self):
        sm = SeedManager(42)
        assert sm.get_match_seed("wordgrid", 1) == sm.get_match_seed("wordgrid", 1)

    def test_different_games_different_seeds(self):
        sm = SeedManager(42)
        assert sm.get_match_seed("wordgrid", 1) != sm.get_match_seed("deduction", 1)

    def test_different_repeats_different_seeds(self):
        sm = SeedManager(42)
        assert sm.get_match_seed("wordgrid", 1) != sm.get_match_seed("wordgrid", 2)

    def test_different_base_seeds_different_output(self):
        assert SeedManager(42).get_match_seed("wordgrid", 1) != SeedManager(99).get_match_seed("wordgrid", 1)

    def test_derived_seed_fits_32_bits(self):
        seed = SeedManager(42).get_match_seed("battleshipLite", 3)
        assert 0 <= seed < 2 ** 32
