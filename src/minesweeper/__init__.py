"""
Minesweeper rules engine.

Provides board construction, deferred mine placement, reveal/flag
orchestration and win/lose detection, plus a Gymnasium environment.
"""
from .cell import Cell, CellState
from .board import (
    Board,
    BoardConfig,
    GameState,
    InvalidConfiguration,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    create_board,
    reveal,
    toggle_flag,
    chorded_dig,
)
from .environment import ActionType, MinesweeperEnv, make_vec_env

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "GameState",
    "InvalidConfiguration",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "create_board",
    "reveal",
    "toggle_flag",
    "chorded_dig",
    "ActionType",
    "MinesweeperEnv",
    "make_vec_env",
]
