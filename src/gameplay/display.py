"""Plain-text rendering of a grid for terminal front ends."""

from .session import GameSession

HIDDEN = "."
FLAG = "F"
QUESTION = "?"
MINE = "*"
EXPLODED = "X"
MISTAKE = "x"
EMPTY = " "


def cell_symbol(session: GameSession, x: int, y: int) -> str:
    """Character for one cell, as the player currently sees it."""
    cell = session.grid.cell(x, y)
    game_over = not session.is_playing

    if cell.exploded:
        return EXPLODED
    if cell.is_flagged:
        return MISTAKE if cell.mistake else FLAG
    if cell.is_revealed:
        if cell.is_mine:
            return MINE
        return str(cell.adjacent_mines) if cell.adjacent_mines else EMPTY
    if game_over and cell.is_mine:
        return MINE
    if cell.is_questioned and not game_over:
        return QUESTION
    return HIDDEN


def format_grid(session: GameSession) -> str:
    """
    Render the session's grid with coordinate labels.

    Columns are labelled along the top (x) and rows down the left (y).
    Mines show once the game is over.
    """
    grid = session.grid
    header = "    " + " ".join(f"{x:2d}" for x in range(grid.width))
    lines = [header, "    " + "-" * (3 * grid.width - 1)]
    for y in range(grid.height):
        row = " ".join(f" {cell_symbol(session, x, y)}" for x in range(grid.width))
        lines.append(f"{y:2d} |{row}")
    return "\n".join(lines)


def format_status(session: GameSession) -> str:
    """One-line toolbar: mine counter, luck, question marks, state."""
    return (
        f"Mines: {session.mines_displayed():3d}  "
        f"Luck: {session.config.luck.value:<7}  "
        f"?-marks: {'on' if session.config.question_marks else 'off'}  "
        f"State: {session.game_state.name}"
    )
