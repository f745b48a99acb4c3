#!/usr/bin/env python3
"""
Polysweeper - Main entry point.

Usage:
    python main.py play [--save PATH] [--new]
    python main.py evaluate [--agent {random,logic}] [--level N]
    python main.py compare [--level N]
    python main.py topology [--subdivisions S]
"""
import argparse
import logging

from src.polysweeper.agents import LogicAgent, RandomAgent
from src.polysweeper.cell import observation_symbol
from src.polysweeper.engine import GameEngine, Outcome
from src.polysweeper.storage import SessionStore
from src.polysweeper.topology import expected_cell_count, generate_goldberg_polyhedron
from src.polysweeper.training import EvaluationConfig, Evaluator


AGENTS = {
    "random": RandomAgent,
    "logic": LogicAgent,
}

PLAY_HELP = """Commands:
  r ID   reveal a cell (chords if already revealed)
  f ID   toggle a flag
  n ID   list a cell's neighbors and their states
  s      show the board
  q      quit"""


def play(args: argparse.Namespace) -> None:
    """Play in the terminal, addressing cells by id."""
    store = SessionStore(args.save)
    session = None if args.new else store.load()
    engine = GameEngine(session=session, on_change=store.save)

    print(PLAY_HELP)
    _print_board(engine)

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue
        command, _, argument = line.partition(" ")

        if command == "q":
            break
        if command == "s":
            _print_board(engine)
            continue
        if not argument.strip().isdigit():
            print(PLAY_HELP)
            continue

        cell_id = int(argument)
        if command == "r":
            engine.click(cell_id)
            outcome = engine.tick()
        elif command == "f":
            engine.toggle_flag(cell_id)
            outcome = engine.outcome
        elif command == "n":
            for neighbor_id in engine.board.neighbors(cell_id):
                neighbor = engine.board.get_cell(neighbor_id)
                print(f"  {neighbor_id}: {neighbor.state.name.lower()}")
            continue
        else:
            print(PLAY_HELP)
            continue

        print(engine.hud_text())
        if outcome == Outcome.MINE_HIT:
            print(f"Boom. Mines were at: {engine.board.mine_ids()}")
            engine.restart_level()
            _print_board(engine)
        elif outcome == Outcome.VICTORY:
            print(f"Level {engine.session.level} cleared!")
            engine.advance_level()
            _print_board(engine)


def _print_board(engine: GameEngine) -> None:
    """Print the HUD and the revealed numbers in id order."""
    print(engine.hud_text())
    symbols = [observation_symbol(cell.to_observation()) for cell in engine.board]
    for start in range(0, len(symbols), 20):
        print(f"{start:5d} | {' '.join(symbols[start:start + 20])}")


def evaluate(args: argparse.Namespace) -> None:
    """Evaluate a specific agent."""
    config = EvaluationConfig(
        level=args.level,
        subdivisions=args.subdivisions,
        num_episodes=args.games,
        seed=args.seed,
    )
    evaluator = Evaluator(config)
    agent = evaluator.make_agent(AGENTS[args.agent])

    print(f"\nEvaluating {args.agent} over {args.games} games...")
    results = evaluator.evaluate(agent)

    print(f"Results for {args.agent}:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Avg reward: {results['avg_reward']:.2f}")
    print(f"  Avg steps: {results['avg_steps']:.1f}")
    print(f"  Avg revealed: {results['avg_revealed']:.1f} cells")


def compare(args: argparse.Namespace) -> None:
    """Compare all agents."""
    config = EvaluationConfig(
        level=args.level,
        subdivisions=args.subdivisions,
        num_episodes=args.games,
        seed=args.seed,
    )
    evaluator = Evaluator(config)
    agents = {name: evaluator.make_agent(cls) for name, cls in AGENTS.items()}
    results = evaluator.compare(agents)

    print("\n" + "=" * 50)
    print("Agent Comparison Results")
    print("=" * 50)
    print(f"{'Agent':<20} {'Win Rate':<12} {'Avg Reward':<12} {'Avg Steps':<10}")
    print("-" * 50)

    for name, metrics in results.items():
        print(
            f"{name:<20} {metrics['win_rate']:>10.1%} "
            f"{metrics['avg_reward']:>10.2f} "
            f"{metrics['avg_steps']:>10.1f}"
        )


def topology(args: argparse.Namespace) -> None:
    """Print cell statistics for a generated polyhedron."""
    polyhedron = generate_goldberg_polyhedron(args.radius, args.subdivisions)
    pentagons = len(polyhedron.pentagon_ids)
    print(f"Subdivisions: {args.subdivisions}  Radius: {args.radius}")
    print(f"Cells: {polyhedron.num_cells} (expected {expected_cell_count(args.subdivisions)})")
    print(f"Pentagons: {pentagons}  Hexagons: {polyhedron.num_cells - pentagons}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Polysweeper - minesweeper on a Goldberg polyhedron"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--save", default="save.json", help="Session save file"
    )
    play_parser.add_argument(
        "--new", action="store_true", help="Ignore the saved session"
    )

    for name, help_text in (
        ("evaluate", "Evaluate an agent"),
        ("compare", "Compare all agents"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--level", type=int, default=1, help="Level to play")
        sub.add_argument(
            "--subdivisions", type=int, default=None,
            help="Override the level's subdivision depth",
        )
        sub.add_argument(
            "--games", type=int, default=100, help="Number of games per agent"
        )
        sub.add_argument("--seed", type=int, default=None, help="Board seed")
        if name == "evaluate":
            sub.add_argument(
                "--agent", choices=sorted(AGENTS), default="logic",
                help="Agent to evaluate",
            )

    topo_parser = subparsers.add_parser(
        "topology", help="Show polyhedron statistics"
    )
    topo_parser.add_argument("--subdivisions", type=int, default=2)
    topo_parser.add_argument("--radius", type=float, default=2.0)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        play(args)
    elif args.command == "evaluate":
        evaluate(args)
    elif args.command == "compare":
        compare(args)
    elif args.command == "topology":
        topology(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
