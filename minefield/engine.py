
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple, Union

logger = logging.getLogger(__name__)

Snapshot = Tuple[Tuple[str, ...], ...]

EMPTY = '/'
DETONATED = 'X'
FLAG = '*'
HIDDEN = '.'


class MinefieldError(ValueError):
    """Base class for every error raised by the board."""


class InvalidConfigurationError(MinefieldError):
    pass


class OutOfBoundsError(MinefieldError):
    pass


class InvalidActionError(MinefieldError):
    pass


class Action(Enum):
    REVEAL = 'reveal'
    FLAG = 'flag'

    @classmethod
    def parse(cls, token: Union['Action', str]) -> 'Action':
        if isinstance(token, cls):
            return token
        try:
            return _ACTION_WORDS[str(token).strip().lower()]
        except KeyError:
            raise InvalidActionError(f"Unknown action {token!r}, use 'reveal' or 'flag'") from None


# 'free' and 'mine' are the classic command words
_ACTION_WORDS: Dict[str, Action] = {
    'reveal': Action.REVEAL,
    'free': Action.REVEAL,
    'flag': Action.FLAG,
    'toggle-flag': Action.FLAG,
    'mine': Action.FLAG,
}


class Phase(Enum):
    UNSEEDED = 'unseeded'
    ACTIVE = 'active'


class Status(Enum):
    UNFINISHED = 'unfinished'
    WIN = 'win'
    LOSE = 'lose'


@dataclass(frozen=True)
class Move:
    row: int
    column: int
    action: Action


@dataclass
class Cell:
    row: int
    column: int
    index: int
    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    adjacent_mines: int = 0
    neighbors: Tuple[int, ...] = ()

    @property
    def symbol(self) -> str:
        if self.is_revealed:
            if self.is_mine:
                return DETONATED
            return str(self.adjacent_mines) if self.adjacent_mines > 0 else EMPTY
        if self.is_flagged:
            return FLAG
        return HIDDEN


class Board:
    """Grid of cells plus the move protocol.

    Coordinates passed to ``submit_move`` and ``cell`` are 1-indexed, the
    way players type them. Everything stored on the board is 0-indexed and
    cells are addressed by their row-major index.
    """

    def __init__(self, height: int, width: int, mine_count: int, seed: Optional[int] = None):
        if height <= 0 or width <= 0:
            raise InvalidConfigurationError(f'Board must be at least 1x1, got {height}x{width}')
        if not 0 <= mine_count < height * width:
            raise InvalidConfigurationError(
                f'Mine count must be between 0 and {height * width - 1}, got {mine_count}')
        self.height = height
        self.width = width
        self.mine_count = mine_count
        self.rng = random.Random(int(seed)) if seed is not None else random.Random()
        self._cells: Tuple[Cell, ...] = tuple(
            Cell(row, column, row * width + column) for row in range(height) for column in range(width))
        self._phase = Phase.UNSEEDED
        self._safe_cells: Set[int] = set()
        self._mine_cells: Set[int] = set()
        self._flagged_cells: Set[int] = set()
        self._revealed_cells: Set[int] = set()
        self._moves: List[Move] = []
        self._mine_triggered = False

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return self._cells

    @property
    def safe_cells(self) -> FrozenSet[int]:
        return frozenset(self._safe_cells)

    @property
    def mine_cells(self) -> FrozenSet[int]:
        return frozenset(self._mine_cells)

    @property
    def flagged_cells(self) -> FrozenSet[int]:
        return frozenset(self._flagged_cells)

    @property
    def revealed_cells(self) -> FrozenSet[int]:
        return frozenset(self._revealed_cells)

    @property
    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def move_count(self) -> int:
        return len(self._moves)

    @property
    def mine_triggered(self) -> bool:
        return self._mine_triggered

    @property
    def mines_remaining(self) -> int:
        return self.mine_count - len(self._flagged_cells)

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.height and 0 <= column < self.width

    def neighbors(self, row: int, column: int) -> List[int]:
        indices = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = row + dr, column + dc
                if self.in_bounds(nr, nc):
                    indices.append(nr * self.width + nc)
        return indices

    def cell(self, row: int, column: int) -> Cell:
        if not self.in_bounds(row - 1, column - 1):
            raise OutOfBoundsError(
                f'Coordinates must be within 1..{self.height} (row) and 1..{self.width} (column), '
                f'got ({row}, {column})')
        return self._cells[(row - 1) * self.width + (column - 1)]

    def plant(self, mine_indices: Iterable[int]) -> None:
        """Place mines at the given cell indices and link every safe cell to its neighbors.

        Only allowed once, before the first move. The first move of a game
        calls this with a random layout that avoids the targeted cell.
        """
        if self._phase is not Phase.UNSEEDED:
            raise InvalidConfigurationError('Mines are already placed on this board')
        mines = set(mine_indices)
        if len(mines) != self.mine_count:
            raise InvalidConfigurationError(
                f'Expected {self.mine_count} distinct mine positions, got {len(mines)}')
        if any(not 0 <= i < len(self._cells) for i in mines):
            raise InvalidConfigurationError('Mine position outside of the board')
        for c in self._cells:
            if c.index in mines:
                c.is_mine = True
                self._mine_cells.add(c.index)
            else:
                self._safe_cells.add(c.index)
        self._link_neighbors()
        self._phase = Phase.ACTIVE
        logger.debug('Placed %d mines on %dx%d board: %s',
                     self.mine_count, self.height, self.width, sorted(mines))

    def _place_mines(self, first_index: int) -> None:
        # Ensure first move is safe
        candidates = [i for i in range(len(self._cells)) if i != first_index]
        self.plant(self.rng.sample(candidates, self.mine_count))

    def _link_neighbors(self) -> None:
        for i in self._safe_cells:
            c = self._cells[i]
            c.neighbors = tuple(self.neighbors(c.row, c.column))
            c.adjacent_mines = sum(1 for n in c.neighbors if self._cells[n].is_mine)

    def submit_move(self, row: int, column: int, action: Union[Action, str]) -> None:
        # Validate everything before touching state
        c = self.cell(row, column)
        kind = Action.parse(action)
        before = self.status()
        if self._phase is Phase.UNSEEDED:
            self._place_mines(c.index)
        if kind is Action.REVEAL:
            self._reveal(c)
        else:
            self._toggle_flag(c)
        self._moves.append(Move(row, column, kind))
        outcome = self.status()
        if before is Status.UNFINISHED and outcome is not Status.UNFINISHED:
            logger.info('Game over after %d moves: %s', self.move_count, outcome.value)

    def _reveal(self, start: Cell) -> None:
        if start.is_mine:
            self._mine_triggered = True
            for i in self._mine_cells:
                self._expose(self._cells[i])
            logger.info('Mine at (%d, %d) triggered', start.row + 1, start.column + 1)
            return
        stack = [start.index]
        while stack:
            c = self._cells[stack.pop()]
            if c.index in self._revealed_cells:
                continue
            self._expose(c)
            if c.adjacent_mines == 0:
                stack.extend(n for n in c.neighbors if n not in self._revealed_cells)

    def _expose(self, c: Cell) -> None:
        c.is_revealed = True
        c.is_flagged = False
        self._revealed_cells.add(c.index)
        self._flagged_cells.discard(c.index)

    def _toggle_flag(self, c: Cell) -> None:
        if c.is_flagged:
            c.is_flagged = False
            self._flagged_cells.discard(c.index)
        elif not c.is_revealed:
            c.is_flagged = True
            self._flagged_cells.add(c.index)

    def status(self) -> Status:
        if self._phase is Phase.ACTIVE and (
                self._flagged_cells == self._mine_cells or self._revealed_cells == self._safe_cells):
            return Status.WIN
        if self._mine_triggered:
            return Status.LOSE
        return Status.UNFINISHED

    def snapshot(self) -> Snapshot:
        return tuple(
            tuple(c.symbol for c in self._cells[row * self.width:(row + 1) * self.width])
            for row in range(self.height))
