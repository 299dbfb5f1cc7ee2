"""BattleshipLite engine — two-phase self-play on 5x5 boards.

One model plays both sides. Phases run strictly in order:
place_p1 -> place_p2 -> fire, and the fire phase alternates between
players shot by shot. Each fleet is two length-2 ships that may not
touch, even diagonally.

Scoring: 1.0 if P1 wins the self-play game, else 0.0.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum

from llmarena.core.schemas import declare_schema
from llmarena.games.base import Game, IllegalMove, ScoreFragment, Transition

__all__ = ["BattleshipLiteGame", "BattleshipState", "Cell", "Phase", "ship_cells"]

BOARD_SIZE = 5
SHIP_LENGTH = 2
FLEET_SIZE = 2

_DIRECTIONS = [
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
]


class Cell(IntEnum):
    EMPTY = 0
    SHIP = 1
    HIT = 2
    MISS = 3


class Phase(str, Enum):
    PLACE_P1 = "place_p1"
    PLACE_P2 = "place_p2"
    FIRE = "fire"


Board = tuple[tuple[Cell, ...], ...]
Coord = tuple[int, int]

EMPTY_BOARD: Board = tuple(
    tuple(Cell.EMPTY for _ in range(BOARD_SIZE)) for _ in range(BOARD_SIZE)
)


@dataclass(frozen=True)
class Shot:
    by: str
    r: int
    c: int
    result: str  # "hit" | "miss" | "sunk"


@dataclass(frozen=True)
class BattleshipState:
    phase: Phase = Phase.PLACE_P1
    current: str = "P1"
    boards: tuple[Board, Board] = (EMPTY_BOARD, EMPTY_BOARD)
    shots: tuple[Shot, ...] = ()
    winner: str | None = None

    def board(self, player: str) -> Board:
        return self.boards[0 if player == "P1" else 1]


def ship_cells(r: int, c: int, direction: str) -> list[Coord]:
    """Cells covered by a length-2 ship anchored at (r, c)."""
    return [
        (r + i, c) if direction == "V" else (r, c + i)
        for i in range(SHIP_LENGTH)
    ]


def _in_bounds(r: int, c: int) -> bool:
    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE


def _neighbors(r: int, c: int) -> list[Coord]:
    return [
        (r + dr, c + dc) for dr, dc in _DIRECTIONS if _in_bounds(r + dr, c + dc)
    ]


def _opponent(player: str) -> str:
    return "P2" if player == "P1" else "P1"


def _as_int(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise IllegalMove(f"Coordinate {value!r} is not an integer.")
    if isinstance(value, float):
        if not value.is_integer():
            raise IllegalMove(f"Coordinate {value!r} is not an integer.")
        return int(value)
    return value


def fleet_cells(ships: list[dict]) -> list[Coord]:
    """Validate a fleet and return every ship cell.

    Each new ship is checked against the cells already occupied and
    against their 8-neighbourhood, so ships can neither overlap nor touch.
    """
    if not isinstance(ships, list) or len(ships) != FLEET_SIZE:
        raise IllegalMove(f"Place exactly {FLEET_SIZE} ships.")

    occupied: set[Coord] = set()
    blocked: set[Coord] = set()
    for ship in ships:
        direction = ship.get("dir")
        if direction not in ("H", "V"):
            raise IllegalMove(f"Ship direction must be 'H' or 'V', got {direction!r}.")
        cells = ship_cells(_as_int(ship.get("r")), _as_int(ship.get("c")), direction)
        for r, c in cells:
            if not _in_bounds(r, c):
                raise IllegalMove(f"Ship cell ({r}, {c}) is off the board.")
        for cell in cells:
            if cell in occupied or cell in blocked:
                raise IllegalMove(
                    f"Ship cell {cell} overlaps or touches another ship."
                )
        for r, c in cells:
            occupied.add((r, c))
            blocked.update(_neighbors(r, c))
    return sorted(occupied)


def is_sunk(board: Board, r: int, c: int) -> bool:
    """Check whether the ship hit at (r, c) has no unhit cells left.

    Walks the eight compass rays through consecutive hit cells; any
    unhit ship cell reached that way means the ship is still afloat.
    Ships are length 2, so the other half is always one step away.
    """
    for dr, dc in _DIRECTIONS:
        nr, nc = r + dr, c + dc
        while _in_bounds(nr, nc):
            cell = board[nr][nc]
            if cell == Cell.SHIP:
                return False
            if cell != Cell.HIT:
                break
            nr += dr
            nc += dc
    return True


def _set_cell(board: Board, r: int, c: int, value: Cell) -> Board:
    row = board[r][:c] + (value,) + board[r][c + 1:]
    return board[:r] + (row,) + board[r + 1:]


class BattleshipLiteGame(Game):
    """Self-play Battleship with two 2-cell ships per side."""

    name = "battleshipLite"
    system_prompt = (
        "Battleship Lite: Two players take turns placing ships then firing "
        "shots. Return ONLY JSON."
    )
    schema = declare_schema({
        "type": "object",
        "properties": {
            "action": {"type": "string", "enum": ["place", "fire"]},
            "r": {"type": "integer", "minimum": 0, "maximum": 4},
            "c": {"type": "integer", "minimum": 0, "maximum": 4},
            "ships": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "r": {"type": "integer", "minimum": 0, "maximum": 4},
                        "c": {"type": "integer", "minimum": 0, "maximum": 4},
                        "dir": {"type": "string", "enum": ["H", "V"]},
                    },
                    "required": ["r", "c", "dir"],
                    "additionalProperties": False,
                },
                "minItems": 2,
                "maxItems": 2,
            },
        },
        "required": ["action"],
        "additionalProperties": False,
    })
    max_tokens = 64
    timeout_ms = 5000

    def init(self, seed: int) -> BattleshipState:
        # Fleets come from the model, so the seed has nothing to shape
        return BattleshipState()

    def is_over(self, state: BattleshipState) -> bool:
        return state.winner is not None

    def phase(self, state: BattleshipState) -> str:
        return state.phase.value

    def build_prompt(self, state: BattleshipState) -> str:
        if state.phase != Phase.FIRE:
            return "\n".join([
                f"Player {state.current}: Place two length-2 ships on your 5x5 board.",
                "Rows and columns are numbered 0-4. 'H' extends right, 'V' extends down.",
                "Ships cannot overlap or touch (even diagonally).",
                'Example: {"action":"place","ships":[{"r":0,"c":0,"dir":"H"},{"r":2,"c":2,"dir":"V"}]}',
            ])

        # Only this player's own shots are visible
        shot_map = [["." for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
        for shot in state.shots:
            if shot.by == state.current:
                shot_map[shot.r][shot.c] = "M" if shot.result == "miss" else "H"
        grid = "\n".join(" ".join(row) for row in shot_map)
        return "\n".join([
            f"Player {state.current}'s turn to fire.",
            "Your shot history (H=hit/sunk, M=miss, .=unknown):",
            grid,
            "Do not fire at a cell you already targeted.",
            'Fire at {r,c}: {"action":"fire","r":0-4,"c":0-4}',
        ])

    def apply_action(self, state: BattleshipState, action: dict) -> Transition:
        if state.phase == Phase.FIRE:
            return self._fire(state, action)
        return self._place(state, action)

    def score(self, state: BattleshipState) -> ScoreFragment:
        return ScoreFragment(
            success=state.winner is not None,
            score=1.0 if state.winner == "P1" else 0.0,
            meta={"shots": len(state.shots), "winner": state.winner},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _place(self, state: BattleshipState, action: dict) -> Transition:
        if action.get("action") != "place" or "ships" not in action:
            raise IllegalMove(f"Expected a placement in phase {state.phase.value}.")

        board = state.board(state.current)
        for r, c in fleet_cells(action["ships"]):
            board = _set_cell(board, r, c, Cell.SHIP)

        if state.phase == Phase.PLACE_P1:
            next_state = replace(
                state,
                boards=(board, state.boards[1]),
                phase=Phase.PLACE_P2,
                current="P2",
            )
        else:
            next_state = replace(
                state,
                boards=(state.boards[0], board),
                phase=Phase.FIRE,
                current="P1",
            )
        return Transition(next_state, {"type": "place", "player": state.current})

    def _fire(self, state: BattleshipState, action: dict) -> Transition:
        if action.get("action") != "fire" or "r" not in action or "c" not in action:
            raise IllegalMove("Expected a fire action with r and c.")
        r, c = _as_int(action["r"]), _as_int(action["c"])
        if not _in_bounds(r, c):
            raise IllegalMove(f"Target ({r}, {c}) is off the board.")
        shooter = state.current
        if any(s.by == shooter and (s.r, s.c) == (r, c) for s in state.shots):
            raise IllegalMove(f"Already fired at ({r}, {c}).")

        target = _opponent(shooter)
        board = state.board(target)
        if board[r][c] == Cell.SHIP:
            board = _set_cell(board, r, c, Cell.HIT)
            result = "sunk" if is_sunk(board, r, c) else "hit"
        else:
            board = _set_cell(board, r, c, Cell.MISS)
            result = "miss"

        boards = (state.boards[0], board) if target == "P2" else (board, state.boards[1])
        shots = state.shots + (Shot(by=shooter, r=r, c=c, result=result),)

        fleet_gone = not any(Cell.SHIP in row for row in board)
        if result == "sunk" and fleet_gone:
            next_state = replace(state, boards=boards, shots=shots, winner=shooter)
        else:
            next_state = replace(state, boards=boards, shots=shots, current=target)
        return Transition(
            next_state, {"type": "fire", "player": shooter, "result": result}
        )
