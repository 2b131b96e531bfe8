#!/usr/bin/env python3
"""Watch random clicks survive under luck mode."""
import logging
import os
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from gameplay import GameSession, format_grid, format_status
from minefield import GameConfig, Luck


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(
    delay: float = 0.3,
    games: int = 3,
    size_level: int = 2,
    density_level: int = 5,
    luck: Luck = Luck.GREAT,
    seed=None,
):
    """Click random hidden cells and show how often luck saves the player."""
    config = GameConfig.from_levels(size_level, density_level, luck=luck)
    session = GameSession(config, seed=seed)

    print(f"Grid: {config.width}x{config.height} at {100 * config.mine_density:.0f}% density, "
          f"luck {luck.value}")
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        session.new_game()
        step = 0

        while session.is_playing:
            hidden = [
                (x, y) for x, y in session.grid.hidden_positions()
                if not session.grid.cell(x, y).is_marked
            ]
            x, y = hidden[int(session.rng.integers(len(hidden)))]
            was_mine = session.grid.cell(x, y).is_mine
            session.click(x, y)
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            moved = " (mine moved away)" if was_mine and not session.is_lost else ""
            print(f"Last move: ({x}, {y}){moved}\n")
            print(format_status(session))
            print(format_grid(session))

            if session.is_won:
                wins += 1
                print("\n*** WIN! ***")
            elif session.is_lost:
                print("\n*** LOST (no consistent layout without a mine there) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100 * wins / games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=3, help="Number of games")
    parser.add_argument("--size-level", type=int, default=2, help="Grid size level 0-9")
    parser.add_argument("--density-level", type=int, default=5, help="Mine density level 0-9")
    parser.add_argument("--luck", choices=[luck.value for luck in Luck], default="great")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine decisions")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    demo(
        delay=args.delay,
        games=args.games,
        size_level=args.size_level,
        density_level=args.density_level,
        luck=Luck(args.luck),
        seed=args.seed,
    )
