"""Main puzzle generator orchestration.

Each attempt:
  1. Lay out opaque cells over the symmetry's fundamental domain.
  2. Derive one consistent light placement and number every opaque cell.
  3. Require a unique solution (and, for easy puzzles, no recursion).
  4. Strip clues the solver never used, then try clearing the rest one by one.
  5. Hard puzzles that still solve without recursion are thrown away.

Attempts that fail repeatedly raise the opaque-cell density.
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.constants import (
    DENSITY_CAP,
    DENSITY_STEP,
    MAX_BLACK_PERCENTAGE,
    MAX_GRIDGEN_TRIES,
    MAX_RECURSE,
    Difficulty,
    Symmetry,
)
from ..core.exceptions import GenerationExhaustedError, InvalidParamsError, LightUpError, ValidationError
from ..core.models import GameParams
from ..io.description import encode_description
from ..utils.logger import get_logger
from .grid import LightUpGrid
from .solver import solve_grid
from .validator import GridValidator


LOGGER = get_logger(__name__)

Position = Tuple[int, int]


@dataclass
class GeneratorConfig:
    width: int
    height: int
    black_percentage: int = 20
    symmetry: Symmetry = Symmetry.ROT4
    difficulty: Difficulty = Difficulty.EASY
    seed: Optional[int] = None
    max_depth: int = MAX_RECURSE
    max_tries: int = MAX_GRIDGEN_TRIES
    density_step: int = DENSITY_STEP
    density_cap: int = DENSITY_CAP
    max_rounds_at_cap: int = 50
    cross_check: bool = False

    def to_params(self, black_percentage: Optional[int] = None) -> GameParams:
        return GameParams(
            width=self.width,
            height=self.height,
            black_percentage=(
                black_percentage if black_percentage is not None else self.black_percentage
            ),
            symmetry=self.symmetry,
            difficulty=self.difficulty,
        )

    @classmethod
    def from_params(cls, params: GameParams, **overrides) -> "GeneratorConfig":
        return cls(
            width=params.width,
            height=params.height,
            black_percentage=params.black_percentage,
            symmetry=params.symmetry,
            difficulty=params.difficulty,
            **overrides,
        )

    def validate(self) -> None:
        self.to_params().validate(full=True)
        if self.max_tries < 1 or self.max_rounds_at_cap < 1:
            raise InvalidParamsError("Retry limits must be at least 1")
        if self.max_depth < 0:
            raise InvalidParamsError("Recursion depth cannot be negative")
        if self.density_step < 1:
            raise InvalidParamsError("Density step must be positive")


@dataclass
class GenerationResult:
    description: str
    params: GameParams
    black_percentage: int
    recursion_depth: int
    attempts: int
    grid: LightUpGrid
    seed: Optional[int] = None


def symmetry_images(symmetry: Symmetry, width: int, height: int, x: int, y: int) -> List[Position]:
    """Positions that must share ``(x, y)``'s opacity, ``(x, y)`` first."""

    if symmetry == Symmetry.NONE:
        return [(x, y)]
    if symmetry == Symmetry.REF2:
        return [(x, y), (x, height - 1 - y)]
    if symmetry == Symmetry.ROT2:
        return [(x, y), (width - 1 - x, height - 1 - y)]
    if symmetry == Symmetry.REF4:
        return [
            (x, y),
            (width - 1 - x, y),
            (x, height - 1 - y),
            (width - 1 - x, height - 1 - y),
        ]
    return [
        (x, y),
        (width - 1 - y, x),
        (width - 1 - x, height - 1 - y),
        (y, height - 1 - x),
    ]


def fundamental_domain(symmetry: Symmetry, width: int, height: int) -> Tuple[int, int]:
    """Width and height of the top-left region replicated by ``symmetry``."""

    if symmetry.degree == 4:
        domain_w = width // 2
        if not symmetry.rotational:
            domain_w += width % 2
        return domain_w, height // 2 + height % 2
    if symmetry.degree == 2:
        return width, height // 2 + height % 2
    return width, height


class LightUpGenerator:
    """Generates unique puzzles honouring the configured difficulty."""

    def __init__(self, config: GeneratorConfig) -> None:
        config.validate()
        self.config = config
        self.rng = random.Random(config.seed)
        self.validator = GridValidator()

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self) -> GenerationResult:
        cfg = self.config
        grid = LightUpGrid(cfg.width, cfg.height)
        # Shuffled once: clue-clearing order for every attempt.
        order = list(range(cfg.width * cfg.height))
        self.rng.shuffle(order)

        black_percentage = cfg.black_percentage
        attempts = 0
        rounds_at_cap = 0
        while True:
            for _ in range(cfg.max_tries):
                attempts += 1
                depth = self.attempt(grid, black_percentage, order)
                if depth is not None:
                    return self._finish(grid, black_percentage, depth, attempts)

            if black_percentage < cfg.density_cap:
                black_percentage = min(black_percentage + cfg.density_step, MAX_BLACK_PERCENTAGE)
                LOGGER.info("New opaque layout density %d%%", black_percentage)
                continue
            rounds_at_cap += 1
            if rounds_at_cap >= cfg.max_rounds_at_cap:
                raise GenerationExhaustedError(
                    f"No valid {cfg.width}x{cfg.height} {cfg.difficulty.value} puzzle after "
                    f"{attempts} attempts (density {black_percentage}%)"
                )
            LOGGER.warning(
                "Still no puzzle at %d%% density (%d/%d rounds at cap)",
                black_percentage,
                rounds_at_cap,
                cfg.max_rounds_at_cap,
            )

    def attempt(self, grid: LightUpGrid, black_percentage: int, order: List[int]) -> Optional[int]:
        """One full try; returns the recursion depth of the result, or None on failure."""

        self.layout_opaque_cells(grid, black_percentage)
        if not self.place_lights(grid):
            LOGGER.debug("Light placement left overlapping lights; retrying")
            return None
        self.place_numbers(grid)
        good, _ = self.puzzle_is_good(grid)
        if not good:
            LOGGER.debug("Initial numbered grid is not good; retrying")
            return None

        snapshot = grid.snapshot()
        stripped = self.strip_unused_clues(grid)
        LOGGER.debug("Stripped %d unused clues", stripped)
        if not self.puzzle_is_good(grid)[0]:
            LOGGER.debug("Stripped grid is not good, reverting")
            grid.restore(snapshot)

        self.minimize_clues(grid, order)

        good, depth = self.puzzle_is_good(grid)
        if not good:
            raise LightUpError("Minimized grid lost its unique solution")
        if self.config.difficulty == Difficulty.HARD and depth == 0:
            LOGGER.debug("Maximum-difficulty puzzle still not recursive, skipping")
            return None
        return depth

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def layout_opaque_cells(self, grid: LightUpGrid, black_percentage: int) -> None:
        """Randomise opaque cells in the fundamental domain and replicate them."""

        symmetry = self.config.symmetry
        width, height = grid.width, grid.height
        domain_w, domain_h = fundamental_domain(symmetry, width, height)

        grid.clean(preserve_opaque=False)
        count = (domain_w * domain_h * black_percentage) // 100
        for index in self.rng.sample(range(domain_w * domain_h), count):
            grid.set_opaque(index % domain_w, index // domain_w)

        if symmetry == Symmetry.NONE:
            return
        for x in range(domain_w):
            for y in range(domain_h):
                source_opaque = grid.is_opaque(x, y)
                for tx, ty in symmetry_images(symmetry, width, height, x, y)[1:]:
                    if source_opaque:
                        grid.set_opaque(tx, ty)
                    else:
                        grid.set_open(tx, ty)

        # The rotational domain misses the centre cell of odd grids.
        if symmetry == Symmetry.ROT4 and width % 2:
            if self.rng.randrange(100) <= black_percentage:
                grid.set_opaque(width // 2, height // 2)

    def place_lights(self, grid: LightUpGrid) -> bool:
        """Find one fully-lit, non-overlapping light placement for the layout.

        Returns False if the shuffled pass still leaves overlapping lights.
        """

        for x, y, cell in grid.iter_cells():
            if not cell.opaque:
                grid.set_light(x, y, True)
        if not grid.has_overlap():
            return True

        order = list(range(grid.width * grid.height))
        self.rng.shuffle(order)
        processed = set()
        for index in order:
            x, y = index % grid.width, index // grid.width
            if not grid.is_light(x, y) or (x, y) in processed:
                continue
            seen = [
                pos for pos in grid.illumination_set(x, y, include_origin=False)
                if grid.is_light(*pos)
            ]
            if not seen:
                continue
            if not self._would_darken(grid, seen):
                for lx, ly in seen:
                    grid.set_light(lx, ly, False)
                processed.add((x, y))
            if not grid.has_overlap():
                return True
        return False

    @staticmethod
    def _would_darken(grid: LightUpGrid, lights: List[Position]) -> bool:
        hits: Dict[Position, int] = Counter()
        for lx, ly in lights:
            for pos in grid.illumination_set(lx, ly, include_origin=True):
                hits[pos] += 1
        return any(grid.illumination_count(*pos) <= n for pos, n in hits.items())

    def place_numbers(self, grid: LightUpGrid) -> None:
        for x, y, cell in grid.iter_cells():
            if cell.opaque:
                grid.set_clue(x, y, grid.adjacent_lights(x, y))

    # ------------------------------------------------------------------
    # Validation and clue minimisation
    # ------------------------------------------------------------------
    def puzzle_is_good(self, grid: LightUpGrid) -> Tuple[bool, int]:
        """Solve from scratch requiring uniqueness; returns (good, recursion depth)."""

        grid.unplace_lights()
        hard = self.config.difficulty == Difficulty.HARD
        result, stats = solve_grid(
            grid,
            allow_recursion=hard,
            force_unique=True,
            max_depth=self.config.max_depth,
        )
        depth = stats.max_depth_reached
        if not hard and depth > 0:
            LOGGER.debug("Ignoring recursive puzzle")
            return False, depth
        return result.is_unique, depth

    @staticmethod
    def strip_unused_clues(grid: LightUpGrid) -> int:
        """Clear every clue the last solve did not rely on."""

        removed = 0
        for x, y, cell in grid.iter_cells():
            if grid.has_clue(x, y) and not cell.load_bearing:
                grid.clear_clue(x, y)
                removed += 1
        return removed

    def minimize_clues(self, grid: LightUpGrid, order: List[int]) -> int:
        """Clear clues in ``order`` while the puzzle stays good; returns how many went."""

        removed = 0
        for index in order:
            x, y = index % grid.width, index // grid.width
            clue = grid.clue_value(x, y)
            if clue is None:
                continue
            grid.clear_clue(x, y)
            if self.puzzle_is_good(grid)[0]:
                LOGGER.debug("Removed clue at (%d,%d); still soluble", x, y)
                removed += 1
            else:
                grid.set_clue(x, y, clue)
        return removed

    # ------------------------------------------------------------------
    # Result
    # ------------------------------------------------------------------
    def _finish(
        self, grid: LightUpGrid, black_percentage: int, depth: int, attempts: int
    ) -> GenerationResult:
        validation = self.validator.validate(grid)
        if not validation.ok:
            raise ValidationError(f"Generated grid failed validation: {validation.messages}")

        description = encode_description(grid)
        grid.unplace_lights()
        if self.config.cross_check:
            from .cpsat import count_solutions

            solutions = count_solutions(grid, limit=2)
            if solutions != 1:
                raise ValidationError(
                    f"CP-SAT found {solutions} solution(s) for generated puzzle {description!r}"
                )

        params = self.config.to_params(black_percentage)
        LOGGER.info(
            "Generated %s puzzle after %d attempts (density %d%%, depth %d)",
            params.encode(),
            attempts,
            black_percentage,
            depth,
        )
        return GenerationResult(
            description=description,
            params=params,
            black_percentage=black_percentage,
            recursion_depth=depth,
            attempts=attempts,
            grid=grid,
            seed=self.config.seed,
        )
