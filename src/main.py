"""
Main entry point for the word-patch puzzle engine.

Usage:
    python -m src.main generate --output puzzles/bank5.json
    python -m src.main moves SNORT H
    python -m src.main solve ABOUT ENSHR
    python -m src.main next SHORE
    python -m src.main play --endless --rounds 3 --verbose
    python -m src.main --config config.yaml play
"""

import argparse
import logging
import random
import sys
from pathlib import Path

import yaml

from .engine import (
    CURATED_PUZZLES,
    Dictionary,
    PuzzleBank,
    curated_from_file,
    enumerate_moves,
    export_bank,
    generate_next_round,
    load_default_dictionary,
    load_puzzle_file,
    neighbors,
    solve,
)
from .environment import AutoPlayer, EngineConfig, GameSession
from .utils.board_render import render_level, render_moves, format_rack_counts


def load_config(config_path: str) -> EngineConfig:
    """Load engine configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return EngineConfig(**(data or {}))


def build_dictionary(config: EngineConfig) -> Dictionary:
    """Load the configured word list, or the bundled one."""
    if config.dictionary_path:
        return Dictionary.from_file(config.dictionary_path, config.word_length)
    return load_default_dictionary(config.word_length)


def build_bank(config: EngineConfig, dictionary: Dictionary) -> PuzzleBank:
    """Create the puzzle bank with built-in and file-supplied curated seeds."""
    curated = list(CURATED_PUZZLES)
    if config.puzzles_path:
        curated.extend(curated_from_file(load_puzzle_file(config.puzzles_path), dictionary))

    return PuzzleBank(
        dictionary=dictionary,
        capacity=config.bank_size,
        curated=curated,
        max_attempts=config.max_attempts,
        max_steps_per_attempt=config.max_steps_per_attempt,
        seed=config.seed,
    )


def cmd_generate(args, config: EngineConfig, dictionary: Dictionary) -> int:
    bank = build_bank(config, dictionary)
    levels = bank.get_bank(config.rack_size)

    if args.verbose:
        for i, level in enumerate(levels):
            print(f"#{i} ({level.kind})")
            print(render_level(level))
            print()

    output_path = Path(args.output) if args.output else Path("puzzles") / f"bank_{config.rack_size}.json"
    export_bank(
        levels,
        output_path,
        dictionary=dictionary if args.stats else None,
        description=f"{len(levels)} puzzles, {config.rack_size} tiles",
    )
    print(f"Wrote {len(levels)} puzzles to {output_path}")
    return 0


def cmd_moves(args, config: EngineConfig, dictionary: Dictionary) -> int:
    word = dictionary.check_word(args.word)
    letters = [c for c in args.letters.upper() if c.isalpha()]
    moves = enumerate_moves(dictionary, word, letters)

    print(f"{word.upper()} with {format_rack_counts(letters) or '(no tiles)'}")
    print(render_moves(moves, limit=args.limit))
    return 0


def cmd_neighbors(args, config: EngineConfig, dictionary: Dictionary) -> int:
    word = dictionary.check_word(args.word)
    found = neighbors(dictionary, word)

    print(f"{len(found)} neighbors of {word.upper()}")
    print(" ".join(w.upper() for w in found))
    return 0


def cmd_solve(args, config: EngineConfig, dictionary: Dictionary) -> int:
    word = dictionary.check_word(args.word)
    letters = [c for c in args.letters.upper() if c.isalpha()]
    report = solve(dictionary, word, letters, max_paths=args.max_paths)

    print(f"{word.upper()} with {format_rack_counts(letters)}")
    print(f"Paths explored: {report.total_paths}{' (truncated)' if report.truncated else ''}")
    print(f"Solutions: {report.total_solutions}")
    for moves, paths in sorted(report.solutions.items()):
        print(f"  {moves} moves: {len(paths)}")
        for path in paths[:args.limit]:
            print(f"    {' -> '.join([word.upper()] + path)}")
    return 0


def cmd_next(args, config: EngineConfig, dictionary: Dictionary) -> int:
    level = generate_next_round(
        dictionary,
        args.word,
        target_rack_size=config.rack_size,
        max_attempts=config.endless_max_attempts,
        max_steps_per_attempt=config.max_steps_per_attempt,
        rng=random.Random(config.seed),
    )
    if level is None:
        print(f"No round available from {args.word.upper()}: streak ends here")
        return 0

    print(render_level(level))
    return 0


def cmd_play(args, config: EngineConfig, dictionary: Dictionary) -> int:
    bank = build_bank(config, dictionary)
    rng = random.Random(config.seed)
    index = args.index if args.index is not None else bank.random_index(config.rack_size, rng)
    level = bank.get_by_index(index, config.rack_size)
    if level is None:
        print(f"Error: no puzzle at index {index}", file=sys.stderr)
        return 1

    session = GameSession.create(
        dictionary,
        level,
        endless=args.endless,
        seed=config.seed,
        endless_max_attempts=config.endless_max_attempts,
    )
    player = AutoPlayer(
        session=session,
        strategy=args.strategy,
        max_rounds=args.rounds,
    )

    try:
        result = player.run(verbose=args.verbose)
    except KeyboardInterrupt:
        print("\nPlay interrupted by user")
        player.end_reason = "Interrupted by user"
        result = player.get_result()

    if args.output:
        player.save_result(args.output)
        if args.verbose:
            print(f"Results saved to: {args.output}")

    print()
    print("=== Play Summary ===")
    print(f"Puzzle: #{index} {result.start_word}")
    print(f"Status: {result.status}")
    print(f"End reason: {player.end_reason}")
    print(f"Words: {' -> '.join(result.word_history)}")
    if result.endless:
        print(f"Streak: {result.streak}")
    print(f"Rating: {result.message}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Generate, inspect and play word-patch puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  word_length: 5
  rack_size: 5
  bank_size: 30
  seed: 42
  puzzles_path: puzzles/curated.yaml
        """
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress to stdout"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show engine log messages"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Fill a puzzle bank and write it to a file")
    generate.add_argument("--output", "-o", help="Output path (default: puzzles/bank_<size>.json)")
    generate.add_argument("--stats", action="store_true", help="Include solver statistics")
    generate.set_defaults(func=cmd_generate)

    moves = subparsers.add_parser("moves", help="List legal moves for a word and tiles")
    moves.add_argument("word")
    moves.add_argument("letters", help="Available tiles, e.g. EHR")
    moves.add_argument("--limit", type=int, default=10, help="Words shown per group")
    moves.set_defaults(func=cmd_moves)

    near = subparsers.add_parser("neighbors", help="List words 1-3 substitutions away")
    near.add_argument("word")
    near.set_defaults(func=cmd_neighbors)

    solver = subparsers.add_parser("solve", help="Count every way to empty a rack")
    solver.add_argument("word")
    solver.add_argument("letters", help="Rack letters, e.g. ENSHR")
    solver.add_argument("--max-paths", type=int, default=10000)
    solver.add_argument("--limit", type=int, default=3, help="Paths shown per group")
    solver.set_defaults(func=cmd_solve)

    nxt = subparsers.add_parser("next", help="Generate an endless-mode round from a word")
    nxt.add_argument("word")
    nxt.set_defaults(func=cmd_next)

    play = subparsers.add_parser("play", help="Autoplay a bank puzzle")
    play.add_argument("--index", type=int, help="Bank index (default: random)")
    play.add_argument("--endless", action="store_true", help="Continue with new rounds")
    play.add_argument("--rounds", type=int, default=1, help="Endless rounds to play")
    play.add_argument("--strategy", choices=["greedy", "solver"], default="greedy")
    play.add_argument("--output", "-o", help="Path to save results JSON")
    play.set_defaults(func=cmd_play)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else EngineConfig()
        dictionary = build_dictionary(config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        return args.func(args, config, dictionary)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
