"""Convenience entrypoint with predefined generator settings for debugging.

Usage in a Python console (Jupyter-style)::

    import debug_main
    state = debug_main.prepare_state(width=7, height=7)
    debug_main.step_layout(state)
    debug_main.step_lights(state)
    debug_main.step_numbers(state)
    debug_main.step_deduce(state)
    debug_main.step_validate(state)
    debug_main.step_strip(state)
    debug_main.step_minimize(state)
    result = debug_main.build_result(state)

Call :func:`run_debug` for a one-liner, or execute the functions above one by
one to inspect intermediate state.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict

from lightup.core.constants import Difficulty, Symmetry
from lightup.core.exceptions import LightUpError
from lightup.engine.deduction import propagate
from lightup.engine.generator import GenerationResult, GeneratorConfig, LightUpGenerator
from lightup.engine.grid import LightUpGrid
from lightup.io.description import encode_description
from lightup.utils.logger import configure_logging
from lightup.utils.pretty import pretty_print_grid, print_generation_stats

DEFAULT_DEBUG_ARGS: Dict[str, Any] = {
    "width": 7,
    "height": 7,
    "black_percentage": 20,
    "symmetry": Symmetry.ROT4,
    "difficulty": Difficulty.EASY,
    "seed": None,
    "max_depth": 5,
}

LOGGER = logging.getLogger(__name__)


def prepare_state(**overrides: Any) -> Dict[str, Any]:
    """Return a mutable state dictionary used by the step helpers."""

    args = {**DEFAULT_DEBUG_ARGS, **overrides}
    configure_logging()
    config = GeneratorConfig(
        width=int(args["width"]),
        height=int(args["height"]),
        black_percentage=int(args["black_percentage"]),
        symmetry=Symmetry(args["symmetry"]),
        difficulty=Difficulty(args["difficulty"]),
        seed=int(args["seed"]) if args.get("seed") is not None else None,
        max_depth=int(args["max_depth"]),
    )
    generator = LightUpGenerator(config)
    order = list(range(config.width * config.height))
    generator.rng.shuffle(order)
    return {
        "config": config,
        "generator": generator,
        "grid": LightUpGrid(config.width, config.height),
        "order": order,
        "good": None,
        "depth": 0,
    }


def step_layout(state: Dict[str, Any]) -> LightUpGrid:
    state["generator"].layout_opaque_cells(state["grid"], state["config"].black_percentage)
    return state["grid"]


def step_lights(state: Dict[str, Any]) -> bool:
    return state["generator"].place_lights(state["grid"])


def step_numbers(state: Dict[str, Any]) -> LightUpGrid:
    state["generator"].place_numbers(state["grid"])
    return state["grid"]


def step_deduce(state: Dict[str, Any]):
    """Run plain deduction on a light-free copy of the puzzle; returns (passes, copy)."""

    trial = state["grid"].copy()
    trial.unplace_lights()
    passes = propagate(trial)
    pretty_print_grid(trial, label=f"After {passes} deduction pass(es)")
    return passes, trial


def step_validate(state: Dict[str, Any]):
    state["good"], state["depth"] = state["generator"].puzzle_is_good(state["grid"])
    return state["good"], state["depth"]


def step_strip(state: Dict[str, Any]) -> int:
    generator: LightUpGenerator = state["generator"]
    grid: LightUpGrid = state["grid"]
    snapshot = grid.snapshot()
    removed = generator.strip_unused_clues(grid)
    if not generator.puzzle_is_good(grid)[0]:
        LOGGER.info("Stripping %d clues broke uniqueness; restoring", removed)
        grid.restore(snapshot)
        return 0
    return removed


def step_minimize(state: Dict[str, Any]) -> int:
    removed = state["generator"].minimize_clues(state["grid"], state["order"])
    step_validate(state)
    return removed


def build_result(state: Dict[str, Any], attempts: int = 1) -> GenerationResult:
    config: GeneratorConfig = state["config"]
    grid: LightUpGrid = state["grid"]
    description = encode_description(grid)
    grid.unplace_lights()
    return GenerationResult(
        description=description,
        params=config.to_params(),
        black_percentage=config.black_percentage,
        recursion_depth=state["depth"],
        attempts=attempts,
        grid=grid,
        seed=config.seed,
    )


def run_debug(**overrides: Any) -> GenerationResult:
    """Execute the pipeline step by step, retrying with fresh seeds."""

    max_runs = int(overrides.pop("max_runs", 15))
    requested_seed = overrides.get("seed", DEFAULT_DEBUG_ARGS.get("seed"))
    last_error: Exception | None = None

    for attempt_no in range(1, max_runs + 1):
        attempt_seed = (
            requested_seed
            if requested_seed is not None and attempt_no == 1
            else random.randint(0, 1_000_000)
        )
        state = prepare_state(**{**overrides, "seed": attempt_seed})
        try:
            step_layout(state)
            if not step_lights(state):
                raise LightUpError("Light placement left overlapping lights")
            step_numbers(state)
            pretty_print_grid(state["grid"], label="Numbered layout")
            good, _ = step_validate(state)
            if not good:
                raise LightUpError("Numbered layout has no unique solution")
            step_strip(state)
            step_minimize(state)
            step_deduce(state)
            if not state["good"]:
                raise LightUpError("Minimized grid lost its unique solution")
            if state["config"].difficulty == Difficulty.HARD and state["depth"] == 0:
                raise LightUpError("Hard puzzle solved without recursion")
        except LightUpError as exc:
            LOGGER.warning(
                "Attempt %s/%s failed with seed %s: %s",
                attempt_no,
                max_runs,
                attempt_seed,
                exc,
            )
            last_error = exc
            continue
        result = build_result(state, attempts=attempt_no)
        print_generation_stats(result)
        return result

    raise LightUpError("Unable to generate puzzle after retries") from last_error


def main() -> None:  # pragma: no cover - manual helper
    result = run_debug()
    print(f"Seed: {result.seed}")
    print(f"Params: {result.params.encode()}")
    print(f"Description: {result.description}")


if __name__ == "__main__":
    main()
