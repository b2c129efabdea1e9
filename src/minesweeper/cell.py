"""
Cell module for Minesweeper.

Represents a single grid position: its fixed coordinates, its (possibly
not yet decided) mine identity and its hidden/revealed/flagged state.
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# Observation codes shared with the numeric board view
HIDDEN_CODE = -1
FLAGGED_CODE = -2
MINE_CODE = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        row: Row index, fixed at creation.
        column: Column index, fixed at creation.
        is_mine: None until mines are placed, then True or False.
        adjacent_mines: Mines among the neighbours, None until computed.
        state: Current visual state (hidden, revealed, or flagged).
    """

    row: int
    column: int
    is_mine: Optional[bool] = None
    adjacent_mines: Optional[int] = None
    state: CellState = CellState.HIDDEN

    def reveal(self) -> bool:
        """
        Reveal this cell.

        A flagged cell is left untouched; it has to be unflagged before it
        can be revealed.

        Returns:
            False if a mine was detonated, True otherwise.
        """
        if self.state == CellState.FLAGGED:
            return True
        self.state = CellState.REVEALED
        return self.is_mine is not True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def position(self) -> Tuple[int, int]:
        """Get (row, column) of this cell."""
        return self.row, self.column

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden (unrevealed and unflagged)."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self, show_mine: bool = False) -> int:
        """
        Convert cell to its numeric observation value.

        Args:
            show_mine: Report an unrevealed, unflagged mine as 9 instead
                of hidden. Only meaningful once the game has ended.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Mine (revealed, or exposed via show_mine)
        """
        if self.state == CellState.FLAGGED:
            return FLAGGED_CODE
        if self.state == CellState.HIDDEN:
            if show_mine and self.is_mine:
                return MINE_CODE
            return HIDDEN_CODE
        if self.is_mine:
            return MINE_CODE
        return self.adjacent_mines or 0
