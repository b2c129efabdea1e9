"""
Gymnasium environment wrapper for Minesweeper.

Drives a Board through reveal, flag and chord actions behind a standard
RL interface.
"""
import logging
import random
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig
from .cell import Cell, FLAGGED_CODE, HIDDEN_CODE, MINE_CODE


logger = logging.getLogger(__name__)


class ActionType(IntEnum):
    """Kinds of move an agent can make on a cell."""

    REVEAL = 0
    FLAG = 1
    CHORD = 2


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = mine, only once the game has ended

    Actions:
        Discrete action space of size 3 * rows * columns. Action i is
        ActionType(i // cells) applied to cell index i % cells, where
        cell index k is (k // columns, k % columns).

    Rewards:
        - +1 for an action that changed the board
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changed nothing, including any action
          after the game has ended
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode

        self._num_cells = self.config.rows * self.config.columns

        self.observation_space = spaces.Box(
            low=FLAGGED_CODE,
            high=MINE_CODE,
            shape=(self.config.rows, self.config.columns),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(len(ActionType) * self._num_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game on a fresh board.

        Args:
            seed: Random seed for reproducible mine placement.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        board_seed = int(self.np_random.integers(2**32))
        self.board = Board(self.config, random.Random(board_seed))
        self._steps = 0
        logger.debug(f"Reset environment with board seed {board_seed}")

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Encoded (action type, cell) index.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        action_type, row, column = self.decode_action(action)
        self._steps += 1

        reward = self._apply_action(action_type, row, column)

        observation = self.board.get_observation()
        terminated = self.board.is_terminal
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[ActionType, int, int]:
        """Convert flat action index to (action type, row, column)."""
        action = int(action)
        action_type = ActionType(action // self._num_cells)
        index = action % self._num_cells
        return action_type, index // self.config.columns, index % self.config.columns

    def encode_action(self, action_type: ActionType, row: int, column: int) -> int:
        """Convert (action type, row, column) to a flat action index."""
        return (
            int(action_type) * self._num_cells
            + row * self.config.columns
            + column
        )

    def _apply_action(
        self, action_type: ActionType, row: int, column: int
    ) -> float:
        """
        Apply an action to the board and score the outcome.

        Returns:
            Reward value.
        """
        if self.board.is_terminal:
            return -0.1
        before = self._board_signature()

        if action_type == ActionType.REVEAL:
            self.board.reveal(row, column)
        elif action_type == ActionType.FLAG:
            self.board.toggle_flag(row, column)
        else:
            self.board.chorded_dig(row, column)

        if self.board.is_won:
            return 10.0
        if self.board.is_lost:
            return -10.0
        if self._board_signature() == before:
            return -0.1
        return 1.0

    def _board_signature(self) -> Tuple[int, int]:
        """Counters that change whenever an action mutates the board."""
        return self.board.revealed_count, self.board.flagged_count

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.revealed_count,
            "mines_remaining": self.board.mines_remaining,
            "game_state": self.board.game_state.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        symbols = {HIDDEN_CODE: ".", FLAGGED_CODE: "F", MINE_CODE: "*", 0: " "}
        obs = self.board.get_observation()
        lines = []
        for row in obs:
            lines.append(
                " ".join(symbols.get(int(val), str(int(val))) for val in row)
            )
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that can change the board.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.board.is_terminal:
            return mask

        for cell in self.board.cells():
            if cell.is_revealed:
                mask[self.encode_action(ActionType.FLAG, *cell.position)] = (
                    self._can_chord_flag(cell)
                )
                mask[self.encode_action(ActionType.CHORD, *cell.position)] = (
                    self._can_chord_dig(cell)
                )
                continue
            mask[self.encode_action(ActionType.FLAG, *cell.position)] = True
            if cell.is_hidden:
                mask[self.encode_action(ActionType.REVEAL, *cell.position)] = True
        return mask

    def _can_chord_flag(self, cell: Cell) -> bool:
        """Check if flagging a revealed number would flag any neighbour."""
        if not cell.adjacent_mines:
            return False
        neighbors = self.board.get_neighbors(cell.row, cell.column)
        unrevealed = [neighbor for neighbor in neighbors if not neighbor.is_revealed]
        return len(unrevealed) == cell.adjacent_mines and any(
            neighbor.is_hidden for neighbor in unrevealed
        )

    def _can_chord_dig(self, cell: Cell) -> bool:
        """Check if chording a revealed number would reveal any neighbour."""
        if not cell.adjacent_mines:
            return False
        neighbors = self.board.get_neighbors(cell.row, cell.column)
        flag_count = sum(1 for neighbor in neighbors if neighbor.is_flagged)
        return flag_count == cell.adjacent_mines and any(
            neighbor.is_hidden for neighbor in neighbors
        )


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[BoardConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel play.

    Args:
        n_envs: Number of parallel environments.
        config: Board configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinesweeperEnv:
        return MinesweeperEnv(config=config)

    return gym.vector.AsyncVectorEnv([make_env for _ in range(n_envs)])
