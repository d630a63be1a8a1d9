"""A rule-based tic-tac-toe player."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

from drillbook.strategy import Move, Strategy

Cell = Optional[str]
Line = Sequence[Move]

_ROWS: tuple[Line, ...] = tuple(tuple((row, col) for col in range(3)) for row in range(3))
_COLS: tuple[Line, ...] = tuple(tuple((row, col) for row in range(3)) for col in range(3))
_DIAGONALS: tuple[Line, ...] = (
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)
_CELLS: tuple[Move, ...] = tuple(cell for row in _ROWS for cell in row)


class MyStrategy(Strategy):
    """Plays X to win and O not to lose, with fixed opening moves.

    Later moves follow one order of preference: complete an own line, block
    the opponent's line, make a move that opens two threats, take the first
    free cell.
    """

    def __init__(self) -> None:
        self._move_count = 0
        self._mine = "X"
        self._theirs = "O"
        self._board: list[list[Cell]] = self._empty_board()

    @staticmethod
    def _empty_board() -> list[list[Cell]]:
        return [[None] * 3 for _ in range(3)]

    def init(self, player_num: int) -> None:
        self._mine, self._theirs = ("O", "X") if player_num == 1 else ("X", "O")
        self._board = self._empty_board()

    def _at(self, cell: Move) -> Cell:
        row, col = cell
        return self._board[row][col]

    @staticmethod
    def _pair_hits(cells: Iterable[Cell], to_check: str, opposite: str) -> int:
        """Count the steps along a line at which it holds two ``to_check`` and no ``opposite``."""
        hits = checked = opposed = 0
        for cell in cells:
            if cell == to_check:
                checked += 1
            if cell == opposite:
                opposed += 1
            if checked == 2 and opposed == 0:
                hits += 1
        return hits

    def count_ways(self, to_check: str, opposite: str) -> int:
        """Score how many lines ``to_check`` threatens to complete.

        Rows are weighed twice and the score grows while scanning a line
        once it holds a pair, so a line may add more than one.
        """
        row_hits = sum(
            self._pair_hits(map(self._at, line), to_check, opposite) for line in _ROWS
        )
        diagonal_hits = sum(
            self._pair_hits(map(self._at, line), to_check, opposite) for line in _DIAGONALS
        )
        return 2 * row_hits + diagonal_hits

    def two_win_ways(self, to_check: str, opposite: str) -> Move | None:
        """Return the first free cell that gives ``to_check`` more than one threat."""
        for row, col in _CELLS:
            if self._board[row][col] in (to_check, opposite):
                continue
            self._board[row][col] = to_check
            ways = self.count_ways(to_check, opposite)
            self._board[row][col] = None
            if ways > 1:
                return row, col
        return None

    def _first_not(self, line: Line, symbol: str) -> Move | None:
        return next((cell for cell in line if self._at(cell) != symbol), None)

    def _scan_lines(self, lines: Iterable[Line], to_check: str, opposite: str) -> Move | None:
        for line in lines:
            checked = opposed = 0
            for cell in line:
                if self._at(cell) == to_check:
                    checked += 1
                if self._at(cell) == opposite:
                    opposed += 1
                if checked == 2 and opposed == 0:
                    gap = self._first_not(line, to_check)
                    if gap is not None:
                        return gap
        return None

    def check_rows(self, to_check: str, opposite: str) -> Move | None:
        """Return the cell that completes a row of ``to_check``, if one is open."""
        return self._scan_lines(_ROWS, to_check, opposite)

    def check_cols(self, to_check: str, opposite: str) -> Move | None:
        """Return the cell that completes a column of ``to_check``, if one is open."""
        return self._scan_lines(_COLS, to_check, opposite)

    def check_diags(self, to_check: str, opposite: str) -> Move | None:
        """Return the cell that completes a diagonal of ``to_check``, if one is open."""
        for line in _DIAGONALS:
            cells = [self._at(cell) for cell in line]
            if cells.count(to_check) == 2 and cells.count(opposite) == 0:
                gap = self._first_not(line, to_check)
                if gap is not None:
                    return gap
        return None

    def _complete_line(self, to_check: str, opposite: str) -> Move | None:
        for finder in (self.check_cols, self.check_rows, self.check_diags):
            move = finder(to_check, opposite)
            if move is not None:
                return move
        return None

    def _respond(self) -> Move:
        for to_check, opposite in ((self._mine, self._theirs), (self._theirs, self._mine)):
            move = self._complete_line(to_check, opposite)
            if move is not None:
                return move
        move = self.two_win_ways(self._mine, self._theirs)
        if move is not None:
            return move
        for cell in _CELLS:
            if self._at(cell) not in (self._mine, self._theirs):
                return cell
        raise RuntimeError("no free cell left on the board")

    def _x_move(self) -> Move:
        self._move_count += 1
        if self._move_count == 1:
            return 1, 1
        if self._move_count == 2:
            board, theirs = self._board, self._theirs
            if board[0][0] != theirs and board[2][2] != theirs:
                return 0, 0
            if board[0][2] != theirs and board[2][0] != theirs:
                return 0, 2
        return self._respond()

    def _o_move(self) -> Move:
        self._move_count += 1
        if self._move_count == 1:
            return (1, 1) if self._board[1][1] != self._theirs else (0, 0)
        if self._move_count == 2:
            block = self._complete_line(self._theirs, self._mine)
            if block is not None:
                return block
            return (1, 0) if self._board[0][1] == self._theirs else (0, 1)
        return self._respond()

    def make_move(self) -> Move:
        row, col = self._x_move() if self._mine == "X" else self._o_move()
        self._board[row][col] = self._mine
        return row, col

    def opponent_move(self, move: Move) -> None:
        row, col = move
        self._board[row][col] = self._theirs


def create_strategy() -> Strategy:
    """Return a fresh :class:`MyStrategy`."""
    return MyStrategy()