"""Depth-bounded backtracking search over deduction fixpoints.

The search alternates deduction passes with a single binary branch (cell is
impossible / cell holds a light) whenever deduction stalls. Each branch owns
a private copy of the grid; the better-determined copy is merged back into the
caller's grid on return, so a successful call leaves ``grid`` solved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..core.constants import MAX_RECURSE
from ..core.exceptions import UnsolvablePuzzleError
from ..io.hints import solution_hint
from ..utils.logger import get_logger
from .deduction import propagate_once
from .grid import LightUpGrid


LOGGER = get_logger(__name__)


class SearchStatus(str, Enum):
    """Outcome class of a search."""

    NO_SOLUTION = "NO_SOLUTION"
    SOLVED = "SOLVED"
    TRUNCATED = "TRUNCATED"


@dataclass(frozen=True)
class SearchResult:
    """Three-way search outcome; ``count`` is only meaningful when solved."""

    status: SearchStatus
    count: int = 0

    @classmethod
    def no_solution(cls) -> "SearchResult":
        return cls(SearchStatus.NO_SOLUTION)

    @classmethod
    def solved(cls, count: int = 1) -> "SearchResult":
        return cls(SearchStatus.SOLVED, count)

    @classmethod
    def truncated(cls) -> "SearchResult":
        return cls(SearchStatus.TRUNCATED)

    @property
    def found(self) -> bool:
        return self.status == SearchStatus.SOLVED and self.count > 0

    @property
    def is_unique(self) -> bool:
        return self.status == SearchStatus.SOLVED and self.count == 1

    @property
    def is_truncated(self) -> bool:
        return self.status == SearchStatus.TRUNCATED


@dataclass
class SearchStats:
    max_depth_reached: int = 0
    branches: int = 0


@dataclass
class SolveOutcome:
    grid: LightUpGrid
    hint: str
    from_current: bool


def choose_branch_cell(grid: LightUpGrid) -> Optional[Tuple[int, int]]:
    """Pick the placeable cell that would light the most unlit cells.

    Ties go to the first such cell in row-major order.
    """

    best: Optional[Tuple[int, int]] = None
    best_n = 0
    for y in range(grid.height):
        for x in range(grid.width):
            if not grid.could_place_light(x, y):
                continue
            n = sum(
                1
                for lx, ly in grid.illumination_set(x, y, include_origin=True)
                if grid.illumination_count(lx, ly) == 0
            )
            if n > best_n:
                best_n = n
                best = (x, y)
    return best


def solve_sub(
    grid: LightUpGrid,
    force_unique: bool,
    max_depth: int,
    depth: int,
    stats: SearchStats,
) -> SearchResult:
    if stats.max_depth_reached < depth:
        stats.max_depth_reached = depth

    while True:
        if grid.has_overlap():
            # Only reachable from an inconsistent starting grid, e.g. a player's.
            return SearchResult.no_solution()
        if grid.is_solved():
            return SearchResult.solved(1)

        changed, placeable = propagate_once(grid)
        if changed:
            continue
        if not placeable:
            return SearchResult.no_solution()
        if depth >= max_depth:
            return SearchResult.truncated()

        choice = choose_branch_cell(grid)
        if choice is None:
            return SearchResult.no_solution()
        bx, by = choice
        stats.branches += 1
        LOGGER.debug("Branching on (%d,%d) at depth %d", bx, by, depth)

        branch = grid.copy()
        grid.mark_impossible(bx, by)
        own = solve_sub(grid, force_unique, max_depth, depth + 1, stats)
        if not force_unique and own.found:
            return own

        branch.set_light(bx, by, True)
        other = solve_sub(branch, force_unique, max_depth, depth + 1, stats)
        return _combine(grid, branch, own, other, force_unique)


def _combine(
    grid: LightUpGrid,
    branch: LightUpGrid,
    own: SearchResult,
    other: SearchResult,
    force_unique: bool,
) -> SearchResult:
    if force_unique and (own.is_truncated or other.is_truncated):
        # Cannot certify uniqueness below the depth cap.
        return SearchResult.truncated()
    if not other.found:
        return own
    if not own.found:
        grid.restore(branch.snapshot())
        return other
    return SearchResult.solved(own.count + other.count)


def solve_grid(
    grid: LightUpGrid,
    allow_recursion: bool = True,
    force_unique: bool = False,
    max_depth: int = MAX_RECURSE,
) -> Tuple[SearchResult, SearchStats]:
    """Fill ``grid`` in as far as possible and report how many solutions exist.

    On a found result ``grid`` is left in one solved state. Load-bearing
    markers are reset first so they describe this solve only.
    """

    grid.clear_load_bearing()
    stats = SearchStats()
    cap = max_depth if allow_recursion else 0
    result = solve_sub(grid, force_unique, cap, 0, stats)
    LOGGER.debug(
        "Solve finished: %s (count=%d, depth=%d, branches=%d)",
        result.status.value,
        result.count,
        stats.max_depth_reached,
        stats.branches,
    )
    return result, stats


def solve_game(
    puzzle: LightUpGrid,
    current: Optional[LightUpGrid] = None,
    max_depth: int = MAX_RECURSE,
) -> SolveOutcome:
    """Solve from the player's state, falling back to the clean puzzle.

    Uniqueness is not required. The returned hint toggles ``current`` (or the
    puzzle when there is no current state) into the solved grid.
    """

    start = current if current is not None else puzzle
    attempt = start.copy()
    result, _ = solve_grid(attempt, allow_recursion=True, force_unique=False, max_depth=max_depth)
    if result.found:
        return SolveOutcome(grid=attempt, hint=solution_hint(start, attempt), from_current=True)

    LOGGER.info("Current state not soluble (%s); solving from the clean puzzle", result.status.value)
    attempt = puzzle.copy()
    attempt.unplace_lights()
    result, _ = solve_grid(attempt, allow_recursion=True, force_unique=False, max_depth=max_depth)
    if result.found:
        return SolveOutcome(grid=attempt, hint=solution_hint(start, attempt), from_current=False)
    raise UnsolvablePuzzleError("Puzzle is not self-consistent.")
