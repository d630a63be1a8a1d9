"""The interface every tic-tac-toe player implements."""

from __future__ import annotations

from abc import ABC, abstractmethod

Move = tuple[int, int]


class Strategy(ABC):
    """A tic-tac-toe player driven move by move by a referee."""

    @abstractmethod
    def init(self, player_num: int) -> None:
        """Start a new game; player 0 plays X and moves first, player 1 plays O."""

    @abstractmethod
    def make_move(self) -> Move:
        """Return the (row, column) of this player's next move."""

    @abstractmethod
    def opponent_move(self, move: Move) -> None:
        """Record the (row, column) the opponent has just played."""