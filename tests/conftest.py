"""
Pytest configuration and shared fixtures.
"""
import random
import pytest
import sys
from pathlib import Path
from typing import Callable, Iterable, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Board, BoardConfig, Cell


# ============================================================================
# Deterministic Mine Placement
# ============================================================================

class FixedRandom(random.Random):
    """Random source whose sample() picks a fixed set of cell positions."""

    def __init__(self, positions: Iterable[Tuple[int, int]]) -> None:
        super().__init__(0)
        self.positions = set(positions)

    def sample(self, population, k, **kwargs):
        chosen = [cell for cell in population if cell.position in self.positions]
        assert len(chosen) == k, "fixed mines must lie outside the safe zone"
        return chosen


@pytest.fixture
def layout_board() -> Callable[..., Board]:
    """Factory for boards whose mines land on the given positions."""

    def build(rows: int, columns: int, mines: Iterable[Tuple[int, int]]) -> Board:
        mines = list(mines)
        return Board(BoardConfig(rows, columns, len(mines)), FixedRandom(mines))

    return build


@pytest.fixture
def corner_board(layout_board) -> Board:
    """
    4x4 board with mines at (0, 3) and (3, 3).

    Revealing (0, 0) opens everything except column 3 rows 0-3:

        0 0 1 *
        0 0 1 1
        0 0 1 1
        0 0 1 *
    """
    return layout_board(4, 4, [(0, 3), (3, 3)])


@pytest.fixture
def single_mine_board(layout_board) -> Board:
    """4x4 board with one mine at (3, 3)."""
    return layout_board(4, 4, [(3, 3)])


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(rng=random.Random(1234))


@pytest.fixture
def small_board() -> Board:
    """Create the smallest board with a mine: 4x4 with 7 mines max."""
    return Board(BoardConfig(4, 4, 7), random.Random(7))


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell with undecided mine identity."""
    return Cell(0, 0)


@pytest.fixture
def safe_cell() -> Cell:
    """Create a hidden cell known not to be a mine."""
    return Cell(1, 1, is_mine=False, adjacent_mines=0)


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(2, 2, is_mine=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
