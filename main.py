"""CLI entrypoint for the Light Up puzzle generator and solver."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict

from lightup.core.constants import MAX_RECURSE, Difficulty, Symmetry
from lightup.core.exceptions import LightUpError
from lightup.core.models import GameParams
from lightup.engine.generator import GeneratorConfig, LightUpGenerator
from lightup.engine.solver import solve_game
from lightup.engine.validator import GridValidator
from lightup.io.description import decode_description
from lightup.io.hints import solution_hint
from lightup.utils.logger import configure_logging
from lightup.utils.pretty import format_grid, print_generation_stats


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser = argparse.ArgumentParser(
        description="Generate and solve Light Up (Akari) puzzles",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", parents=[common], help="Generate a new puzzle")
    generate.add_argument(
        "--params",
        type=str,
        help="Parameter string such as 7x7b20s4r (overrides the individual flags)",
    )
    generate.add_argument("--width", type=int, default=7, help="Grid width in cells")
    generate.add_argument("--height", type=int, default=7, help="Grid height in cells")
    generate.add_argument(
        "--black-percentage",
        type=int,
        default=20,
        help="Initial percentage of opaque cells (5-100)",
    )
    generate.add_argument(
        "--symmetry",
        type=str,
        choices=[s.value for s in Symmetry],
        default=Symmetry.ROT4.value,
        help="Symmetry of the opaque layout",
    )
    generate.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in Difficulty],
        default=Difficulty.EASY.value,
        help="easy: deduction only; hard: recursion required",
    )
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    generate.add_argument(
        "--max-depth",
        type=int,
        default=MAX_RECURSE,
        help="Recursion depth cap for the solver",
    )
    generate.add_argument(
        "--cross-check",
        action="store_true",
        help="Confirm uniqueness with the CP-SAT solution counter",
    )
    generate.add_argument("--show", action="store_true", help="Print the grid and generation stats before the JSON")
    generate.add_argument("--output", type=Path, help="Optional path to JSON output")

    solve = commands.add_parser("solve", parents=[common], help="Solve a puzzle description")
    solve.add_argument("--params", type=str, required=True, help="Grid size as WxH")
    solve.add_argument("--description", type=str, required=True, help="Puzzle description")
    solve.add_argument(
        "--max-depth",
        type=int,
        default=MAX_RECURSE,
        help="Recursion depth cap for the solver",
    )
    solve.add_argument(
        "--exact",
        action="store_true",
        help="Use the CP-SAT model instead of the depth-bounded search",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    overrides: Dict[str, Any] = {
        "seed": args.seed,
        "max_depth": args.max_depth,
        "cross_check": args.cross_check,
    }
    if args.params:
        return GeneratorConfig.from_params(GameParams.decode(args.params), **overrides)
    return GeneratorConfig(
        width=args.width,
        height=args.height,
        black_percentage=args.black_percentage,
        symmetry=Symmetry(args.symmetry),
        difficulty=Difficulty(args.difficulty),
        **overrides,
    )


def run_generate(args: argparse.Namespace) -> Dict[str, Any]:
    generator = LightUpGenerator(config_from_args(args))
    result = generator.generate()
    if args.show:
        print_generation_stats(result)
    return {
        "params": result.params.encode(),
        "description": result.description,
        "black_percentage": result.black_percentage,
        "recursion_depth": result.recursion_depth,
        "attempts": result.attempts,
        "seed": result.seed,
    }


def run_solve(args: argparse.Namespace) -> Dict[str, Any]:
    params = GameParams.decode(args.params)
    params.validate(full=False)
    puzzle = decode_description(args.description, params.width, params.height)

    if args.exact:
        from lightup.engine.cpsat import solve_exact

        solved = solve_exact(puzzle)
        if solved is None:
            raise LightUpError("Puzzle has no solution")
        hint = solution_hint(puzzle, solved)
    else:
        outcome = solve_game(puzzle, max_depth=args.max_depth)
        solved = outcome.grid
        hint = outcome.hint

    validation = GridValidator().validate(solved)
    return {
        "solved": validation.ok,
        "hint": hint,
        "grid": format_grid(solved),
        "validation": validation.messages,
    }


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    try:
        if args.command == "generate":
            payload = run_generate(args)
        else:
            payload = run_solve(args)
    except LightUpError as exc:
        parser.exit(1, f"error: {exc}\n")

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if getattr(args, "output", None):
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
