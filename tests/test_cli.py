"""Tests for the command-line entry point."""

import pytest

from llmarena.__main__ import build_parser, main


class TestParser:
    def test_run_defaults(self):
        args = build_parser().parse_args(["run"])
        assert args.config is None
        assert args.seed is None

    def test_play_requires_known_game(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["play", "chess"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    def test_play_simulated(self, tmp_output):
        assert main(["play", "deduction", "--seed", "0", "--runs-dir", str(tmp_output)]) == 0
        assert any(tmp_output.iterdir())

    def test_play_unknown_model(self):
        assert main(["play", "deduction", "--model", "nobody"]) == 1

    def test_run_then_scoreboard(self, tmp_path, tmp_output):
        config = tmp_path / "arena.yaml"
        config.write_text(
            f"arena:\n  seed: 3\n  runs_dir: {tmp_output}\n"
            "models:\n  simulated: {}\n"
            "games: [sequenceRecall]\n"
        )
        assert main(["run", str(config)]) == 0
        assert main(["scoreboard", "--runs-dir", str(tmp_output)]) == 0

    def test_run_missing_config(self, tmp_path):
        assert main(["run", str(tmp_path / "missing.yaml")]) == 1

    def test_scoreboard_empty(self, tmp_output):
        assert main(["scoreboard", "--runs-dir", str(tmp_output)]) == 1
