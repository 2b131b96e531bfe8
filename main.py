#!/usr/bin/env python3
"""
Lucky Minesweeper - terminal front end.

Usage:
    python main.py [--size-level N] [--density-level N] [--luck MODE]
                   [--qmarks] [--timeout-ms MS] [--seed N] [--verbose]

Commands at the prompt (coordinates are 0-based x y):
    x y        reveal a cell (luck applies)
    f x y      cycle flag / question mark
    c x y      chord on a revealed number
    l          cycle luck mode
    q          toggle question marks
    + / -      density up / down (new game)
    > / <      grid size up / down (new game)
    face       smiley button: claim victory, resign, or new game
    exit       leave
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Run from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from gameplay import GameSession, format_grid, format_status
from minefield import GameConfig, Luck
from minefield.config import COMPUTE_TIMEOUT_MS, DEFAULT_DENSITY_LEVEL, DEFAULT_SIZE_LEVEL


def parse_coordinates(parts: List[str]) -> Optional[Tuple[int, int]]:
    """Turn ['3', '5'] into (3, 5), or None if malformed."""
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def handle_command(session: GameSession, line: str) -> bool:
    """
    Apply one prompt line to the session.

    Returns:
        False when the player asked to leave.
    """
    parts = line.replace(",", " ").split()
    if not parts:
        return True
    command = parts[0].lower()

    if command in {"exit", "quit"}:
        return False
    if command == "l":
        print(f"Luck is now {session.cycle_luck().value}.")
    elif command == "q":
        session.set_question_marks(not session.config.question_marks)
    elif command in {"+", "-"}:
        if not session.adjust_density(1 if command == "+" else -1):
            print("Density is already at its limit.")
    elif command in {">", "<"}:
        if not session.adjust_size(1 if command == ">" else -1):
            print("Grid size is already at its limit.")
    elif command == "face":
        session.click_face()
    elif command in {"f", "c"}:
        coords = parse_coordinates(parts[1:])
        if coords is None:
            print("Invalid input. Example: f 3 5")
        elif command == "f":
            session.toggle_mark(*coords)
        else:
            session.chord_reveal(*coords)
    else:
        coords = parse_coordinates(parts)
        if coords is None:
            print("Invalid input. Example: 3 5")
        elif not session.grid.in_bounds(*coords):
            print("Cell coordinates are outside the grid.")
        else:
            session.click(*coords)
    return True


def play(config: GameConfig, seed: Optional[int] = None) -> None:
    """Run the interactive game loop."""
    session = GameSession(config, seed=seed)

    print("Lucky Minesweeper (enter: x y). Type 'exit' to quit.\n")
    while True:
        print(format_status(session))
        print(format_grid(session))
        if session.is_won:
            print("\nYou revealed all safe cells. You won! (type 'face' for a new game)")
        elif session.is_lost:
            print("\nYou hit a mine. You lost. (type 'face' for a new game)")

        try:
            line = input("\nMove: ").strip()
        except EOFError:
            return
        if not handle_command(session, line):
            print("Quit.")
            return


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Minesweeper with a luck mode that rearranges hidden mines"
    )
    parser.add_argument(
        "--size-level", type=int, default=DEFAULT_SIZE_LEVEL,
        help="Grid size level 0-9 (default: %(default)s, 34x21)",
    )
    parser.add_argument(
        "--density-level", type=int, default=DEFAULT_DENSITY_LEVEL,
        help="Mine density level 0-9 (default: %(default)s, 17%%)",
    )
    parser.add_argument(
        "--luck", choices=[luck.value for luck in Luck], default=Luck.NEUTRAL.value,
        help="Luck mode (default: %(default)s)",
    )
    parser.add_argument("--qmarks", action="store_true", help="Enable question marks")
    parser.add_argument(
        "--timeout-ms", type=int, default=COMPUTE_TIMEOUT_MS,
        help="Solver budget per click in milliseconds (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine decisions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = GameConfig.from_levels(
            args.size_level,
            args.density_level,
            luck=Luck(args.luck),
            question_marks=args.qmarks,
            compute_timeout_ms=args.timeout_ms,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        play(config, args.seed)
    except KeyboardInterrupt:
        print("\nQuit.")


if __name__ == "__main__":
    main()
