#!/usr/bin/env python3
"""Watch the Logic agent play Polysweeper."""
import time
import os

from src.polysweeper.environment import PolysweeperEnv
from src.polysweeper.board import BoardConfig
from src.polysweeper.agents import LogicAgent


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 5, level: int = 1, subdivisions: int = 2):
    """Run demo games with visualization."""
    config = BoardConfig(
        radius=BoardConfig.for_level(level).radius, subdivisions=subdivisions
    )
    env = PolysweeperEnv(config=config, level=level, render_mode="ansi")
    agent = LogicAgent(env.adjacency)

    print(f"Sphere: {env.num_cells} cells, level {level}")
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        obs, _ = env.reset()
        agent.reset()

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            valid_actions = env.get_action_mask()
            action = agent.select_action(obs, valid_actions)

            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: cell {action}\n")
            print(env.render())

            if done:
                if info.get("game_state") == "WON":
                    wins += 1
                    print(f"\n*** WIN! ***")
                else:
                    print(f"\n*** LOST (hit mine) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--level", type=int, default=1, help="Level (sets mine density)")
    parser.add_argument("--subdivisions", type=int, default=2, help="Subdivision depth")
    args = parser.parse_args()

    demo(delay=args.delay, games=args.games, level=args.level, subdivisions=args.subdivisions)
