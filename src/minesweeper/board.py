"""
Board module for Minesweeper.

Implements the game board with deferred mine placement, flood-fill
revealing, chorded dig/flag actions and win/lose detection.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# The first click and its 8 neighbours are always mine-free
SAFE_ZONE_SIZE = 9


class GameState(Enum):
    """Possible states of the game."""

    NOT_STARTED = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()


class InvalidConfiguration(ValueError):
    """Raised when a board cannot be built from the given dimensions."""


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        num_mines: Total mines to place.
    """

    rows: int = 9
    columns: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.columns < 1:
            raise InvalidConfiguration("Board dimensions must be positive")
        if self.num_mines < 1:
            raise InvalidConfiguration("Mine count must be positive")
        max_mines = self.rows * self.columns - SAFE_ZONE_SIZE
        if self.num_mines > max_mines:
            raise InvalidConfiguration(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(16, 30, 99)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Owns the grid of cells, places mines on the first reveal, and runs
    reveal/flag orchestration and win/lose detection. A board lives for
    exactly one game; build a new one to play again.

    Attributes:
        config: Board dimensions and mine count.
        rng: Random source used for mine placement.
    """

    config: BoardConfig = field(default_factory=BoardConfig)
    rng: random.Random = field(default_factory=random.Random, repr=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _started: bool = False
    _over: bool = False
    _won: bool = False
    _revealed_count: int = 0
    _flagged_count: int = 0

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create grid of hidden cells with undecided mine identity."""
        self._grid = [
            [Cell(row, column) for column in range(self.config.columns)]
            for row in range(self.config.rows)
        ]

    def start_game(self, initial_row: int, initial_column: int) -> None:
        """
        Place mines around a first click and compute adjacency counts.

        Called by the first reveal. Does nothing if the game has already
        started or the position is off the board.

        Args:
            initial_row: Row of the first click.
            initial_column: Column of the first click.
        """
        if self._started:
            return
        seed = self.get_cell(initial_row, initial_column)
        if seed is None:
            return

        self._designate_safe_zone(seed)
        self._populate_mines()
        self._calculate_adjacent_mines()
        self._started = True
        logger.debug(
            f"Placed {self.config.num_mines} mines around first click "
            f"({initial_row}, {initial_column})"
        )

    def _designate_safe_zone(self, seed: Cell) -> None:
        """Mark the first click and its neighbours as mine-free."""
        seed.is_mine = False
        for neighbor in self.get_neighbors(seed.row, seed.column):
            neighbor.is_mine = False

    def _populate_mines(self) -> None:
        """Pick mines among the undecided cells; the rest become safe."""
        candidates = [cell for cell in self.cells() if cell.is_mine is None]
        for cell in self.rng.sample(candidates, self.config.num_mines):
            cell.is_mine = True
        for cell in candidates:
            if cell.is_mine is None:
                cell.is_mine = False

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for cell in self.cells():
            if not cell.is_mine:
                cell.adjacent_mines = self._count_adjacent_mines(
                    cell.row, cell.column
                )

    def _count_adjacent_mines(self, row: int, column: int) -> int:
        """Count mines adjacent to a specific cell."""
        return sum(
            1 for neighbor in self.get_neighbors(row, column)
            if neighbor.is_mine
        )

    # ========================================================================
    # Grid Queries (Low-level)
    # ========================================================================

    def get_cell(self, row: int, column: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(row, column):
            return None
        return self._grid[row][column]

    def get_neighbors(self, row: int, column: int) -> List[Cell]:
        """
        Get the cells surrounding a position.

        Args:
            row: Row index of center cell.
            column: Column index of center cell.

        Returns:
            Up to 8 neighbouring cells in row-major order.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_column in (-1, 0, 1):
                if delta_row == 0 and delta_column == 0:
                    continue
                cell = self.get_cell(row + delta_row, column + delta_column)
                if cell is not None:
                    neighbors.append(cell)
        return neighbors

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for grid_row in self._grid:
            yield from grid_row

    def _is_valid_position(self, row: int, column: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.rows and 0 <= column < self.config.columns

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, column: int) -> None:
        """
        Reveal the cell at the given position.

        On the first reveal, places mines keeping this cell and its
        neighbours clear. A cell with no adjacent mines opens its whole
        zero region and the numbered cells bordering it. Revealing a mine
        loses the game.

        Does nothing if the game is over, the position is invalid, or the
        cell is already revealed or flagged.

        Args:
            row: Row index to reveal.
            column: Column index to reveal.
        """
        if self.is_terminal:
            return
        cell = self.get_cell(row, column)
        if cell is None or not cell.is_hidden:
            return

        if not self._started:
            self.start_game(row, column)

        if not self._flood_reveal(cell):
            self._over = True
            logger.info(f"Game lost: mine detonated at ({row}, {column})")
            return

        self._check_reveal_win()

    def _flood_reveal(self, start: Cell) -> bool:
        """
        Reveal a cell and cascade through zero-count neighbours.

        Uses an explicit stack; a cell's revealed state marks it visited.

        Returns:
            False if a mine was revealed, True otherwise.
        """
        frontier = [start]
        while frontier:
            cell = frontier.pop()
            if not cell.is_hidden:
                continue

            safe = cell.reveal()
            self._revealed_count += 1
            if not safe:
                return False

            if cell.adjacent_mines == 0:
                frontier.extend(
                    neighbor
                    for neighbor in self.get_neighbors(cell.row, cell.column)
                    if neighbor.is_hidden
                )
        return True

    def chorded_dig(self, row: int, column: int) -> None:
        """
        Chord action: reveal all unflagged neighbours once flags match.

        On an unrevealed cell this is a plain reveal. On a revealed
        numbered cell whose flagged neighbour count equals its number,
        every unflagged neighbour is revealed, which may cascade or
        detonate a wrongly unflagged mine.

        Args:
            row: Row index.
            column: Column index.
        """
        if self.is_terminal:
            return
        cell = self.get_cell(row, column)
        if cell is None:
            return

        if not cell.is_revealed:
            self.reveal(row, column)
            return

        if not cell.adjacent_mines:
            return
        neighbors = self.get_neighbors(row, column)
        flag_count = sum(1 for neighbor in neighbors if neighbor.is_flagged)
        if flag_count != cell.adjacent_mines:
            return

        for neighbor in neighbors:
            if not neighbor.is_flagged:
                self.reveal(neighbor.row, neighbor.column)

    def toggle_flag(self, row: int, column: int) -> None:
        """
        Toggle a flag, or chord-flag around a revealed number.

        On an unrevealed cell the flag is toggled. On a revealed numbered
        cell whose unrevealed neighbour count equals its number, every
        unrevealed neighbour gets flagged.

        Args:
            row: Row index.
            column: Column index.
        """
        if self.is_terminal:
            return
        cell = self.get_cell(row, column)
        if cell is None:
            return

        if cell.is_revealed:
            changed = self._chorded_flag(cell)
        else:
            changed = cell.toggle_flag()
            self._flagged_count += 1 if cell.is_flagged else -1

        if changed:
            self._check_flag_win()

    def _chorded_flag(self, cell: Cell) -> bool:
        """
        Flag every unrevealed neighbour of a fully determined number.

        Returns:
            True if at least one flag was placed.
        """
        if not cell.adjacent_mines:
            return False
        unrevealed = [
            neighbor
            for neighbor in self.get_neighbors(cell.row, cell.column)
            if not neighbor.is_revealed
        ]
        if len(unrevealed) != cell.adjacent_mines:
            return False

        changed = False
        for neighbor in unrevealed:
            if neighbor.is_hidden:
                neighbor.toggle_flag()
                self._flagged_count += 1
                changed = True
        return changed

    # ========================================================================
    # Win Conditions (Mid-level)
    # ========================================================================

    def _check_reveal_win(self) -> None:
        """Check if every non-mine cell is revealed."""
        if self._over:
            return
        unrevealed = self.total_cells - self._revealed_count
        if unrevealed == self.config.num_mines:
            self._won = True
            logger.info("Game won: all safe cells revealed")

    def _check_flag_win(self) -> None:
        """Check if every mine is flagged and no flag is wrong."""
        if not self._started or self._over:
            return
        if self.mines_remaining != 0:
            return
        for cell in self.cells():
            if cell.is_flagged and cell.is_mine is False:
                return
        self._won = True
        logger.info("Game won: all mines flagged")

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def columns(self) -> int:
        return self.config.columns

    @property
    def mine_count(self) -> int:
        return self.config.num_mines

    @property
    def total_cells(self) -> int:
        return self.config.total_cells

    @property
    def revealed_count(self) -> int:
        return self._revealed_count

    @property
    def flagged_count(self) -> int:
        return self._flagged_count

    @property
    def mines_remaining(self) -> int:
        """Mines left to flag; negative when over-flagged."""
        return self.config.num_mines - self._flagged_count

    @property
    def started(self) -> bool:
        """Check if mines have been placed."""
        return self._started

    @property
    def is_over(self) -> bool:
        """Check if a mine was revealed."""
        return self._over

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._won

    @property
    def is_lost(self) -> bool:
        return self._over

    @property
    def is_terminal(self) -> bool:
        """Check if the game has ended either way."""
        return self._over or self._won

    @property
    def is_playing(self) -> bool:
        """Check if game still accepts moves."""
        return not self.is_terminal

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        if self._over:
            return GameState.LOST
        if self._won:
            return GameState.WON
        if self._started:
            return GameState.PLAYING
        return GameState.NOT_STARTED

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Unrevealed mines stay hidden until the game has ended.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = mine (revealed, or any mine once the game is over)
        """
        show_mines = self.is_terminal
        obs = np.zeros((self.config.rows, self.config.columns), dtype=np.int8)
        for cell in self.cells():
            obs[cell.row, cell.column] = cell.to_observation(show_mines)
        return obs

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of cells that can be revealed.

        Returns:
            List of (row, column) positions that are hidden and unflagged.
        """
        if self.is_terminal:
            return []
        return [cell.position for cell in self.cells() if cell.is_hidden]


# ============================================================================
# Call Interface
# ============================================================================

def create_board(
    rows: int,
    columns: int,
    mine_count: int,
    rng: Optional[random.Random] = None,
) -> Board:
    """
    Build a new board for one game.

    Args:
        rows: Number of rows.
        columns: Number of columns.
        mine_count: Mines to place on the first reveal.
        rng: Random source for mine placement (default: unseeded).

    Returns:
        A board with every cell hidden and no mines placed yet.

    Raises:
        InvalidConfiguration: If the dimensions or mine count are invalid.
    """
    config = BoardConfig(rows, columns, mine_count)
    if rng is None:
        return Board(config)
    return Board(config, rng)


def reveal(board: Board, row: int, column: int) -> None:
    """Reveal a cell on the board."""
    board.reveal(row, column)


def toggle_flag(board: Board, row: int, column: int) -> None:
    """Toggle a flag (or chord-flag) on the board."""
    board.toggle_flag(row, column)


def chorded_dig(board: Board, row: int, column: int) -> None:
    """Chord-reveal around a cell on the board."""
    board.chorded_dig(row, column)
