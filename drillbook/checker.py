"""A referee that plays two tic-tac-toe strategies against each other."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

from drillbook.strategy import Move, Strategy

_LINES: tuple[tuple[Move, ...], ...] = (
    *(tuple((row, col) for col in range(3)) for row in range(3)),
    *(tuple((row, col) for row in range(3)) for col in range(3)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)

_MAX_X_MOVES = 5


class Outcome(IntEnum):
    """How a game ended."""

    INVALID_MOVE = -1
    X_WINS = 0
    O_WINS = 1
    DRAW = 2


class Checker:
    """Runs one game: the first strategy plays X, the second plays O."""

    def __init__(self, first: Strategy, second: Strategy) -> None:
        self._first = first
        self._second = second
        self._board: list[list[Optional[str]]] = [[None] * 3 for _ in range(3)]
        self._x_count = 0
        first.init(0)
        second.init(1)

    def is_win(self, winner: str) -> bool:
        """Tell whether ``winner`` holds a complete row, column or diagonal."""
        return any(
            all(self._board[row][col] == winner for row, col in line) for line in _LINES
        )

    def _is_valid(self, move: Move) -> bool:
        row, col = move
        if not (0 <= row <= 2 and 0 <= col <= 2):
            return False
        return self._board[row][col] not in ("X", "O")

    def _play(self, player: Strategy, opponent: Strategy, symbol: str) -> bool:
        move = tuple(player.make_move())
        if not self._is_valid(move):
            return False
        row, col = move
        self._board[row][col] = symbol
        opponent.opponent_move((row, col))
        return True

    def check_winner(self) -> Outcome:
        """Play the game to its end and return how it ended."""
        while True:
            if not self._play(self._first, self._second, "X"):
                return Outcome.INVALID_MOVE
            if self.is_win("X"):
                return Outcome.X_WINS
            self._x_count += 1
            if self._x_count == _MAX_X_MOVES:
                return Outcome.DRAW

            if not self._play(self._second, self._first, "O"):
                return Outcome.INVALID_MOVE
            if self.is_win("O"):
                return Outcome.O_WINS