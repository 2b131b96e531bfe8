"""
Gameplay module.

Provides the game session (clicks, luck, marks, chording) and a
plain-text renderer for terminal front ends.
"""
from .session import GameSession, GameState
from .display import cell_symbol, format_grid, format_status

__all__ = [
    "GameSession",
    "GameState",
    "cell_symbol",
    "format_grid",
    "format_status",
]
