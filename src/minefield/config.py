"""
Game configuration.

Grid size, mine density, luck mode and solver budget, plus the
level tables the toolbar steps through.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Tuple


# ============================================================================
# Constants
# ============================================================================

class Luck(Enum):
    """How the engine bends the minefield on a click."""

    NEUTRAL = "neutral"
    GREAT = "great"
    GOOD = "good"
    BAD = "bad"

    def next(self) -> "Luck":
        """Following mode in the toolbar cycle."""
        members = list(Luck)
        return members[(members.index(self) + 1) % len(members)]


DENSITY_LEVELS: Tuple[float, ...] = (
    0.0, 0.05, 0.10, 0.12, 0.14, 0.17, 0.20, 0.25, 0.50, 1.0,
)

# (width, height) per size level
GRID_SIZES: Tuple[Tuple[int, int], ...] = (
    (5, 3), (8, 5), (13, 8), (21, 13), (34, 21),
    (55, 34), (89, 55), (144, 89), (233, 144), (377, 233),
)

DEFAULT_SIZE_LEVEL = 4
DEFAULT_DENSITY_LEVEL = 5
COMPUTE_TIMEOUT_MS = 1000


def _check_level(level: int, table: Tuple[Any, ...], name: str) -> None:
    if not 0 <= level < len(table):
        raise ValueError(f"{name} level must be between 0 and {len(table) - 1}")


# ============================================================================
# Game Configuration
# ============================================================================

@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a game session.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        mine_density: Probability that any one cell holds a mine.
        luck: Luck mode applied to left clicks.
        question_marks: Whether marking cycles through a question mark.
        compute_timeout_ms: Wall-clock budget for one consistency solve.
    """

    width: int = GRID_SIZES[DEFAULT_SIZE_LEVEL][0]
    height: int = GRID_SIZES[DEFAULT_SIZE_LEVEL][1]
    mine_density: float = DENSITY_LEVELS[DEFAULT_DENSITY_LEVEL]
    luck: Luck = Luck.NEUTRAL
    question_marks: bool = False
    compute_timeout_ms: int = COMPUTE_TIMEOUT_MS

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Grid dimensions must be positive")
        if not 0.0 <= self.mine_density <= 1.0:
            raise ValueError("Mine density must be between 0 and 1")
        if self.compute_timeout_ms <= 0:
            raise ValueError("Compute timeout must be positive")

    @classmethod
    def from_levels(
        cls, size_level: int, density_level: int, **overrides: Any
    ) -> "GameConfig":
        """
        Build a configuration from toolbar level indices.

        Args:
            size_level: Index into GRID_SIZES.
            density_level: Index into DENSITY_LEVELS.
            **overrides: Any other GameConfig field.

        Raises:
            ValueError: If a level is out of range.
        """
        _check_level(size_level, GRID_SIZES, "Size")
        _check_level(density_level, DENSITY_LEVELS, "Density")
        width, height = GRID_SIZES[size_level]
        return cls(
            width=width,
            height=height,
            mine_density=DENSITY_LEVELS[density_level],
            **overrides,
        )

    def with_changes(self, **changes: Any) -> "GameConfig":
        """Copy of this configuration with some fields replaced."""
        return replace(self, **changes)


# Preset difficulty levels
BEGINNER = GameConfig.from_levels(1, 4)
INTERMEDIATE = GameConfig.from_levels(3, 5)
EXPERT = GameConfig.from_levels(4, 6)
