"""Exact Light Up model on OR-Tools CP-SAT.

Unlike the depth-capped search this never gives up on hard puzzles, so it is
used to cross-check generated puzzles and to solve grids the search truncates.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ortools.sat.python import cp_model

from ..core.exceptions import LightUpError
from ..core.models import OpaqueCell, OpenCell
from ..utils.logger import get_logger
from .grid import LightUpGrid

LOGGER = get_logger(__name__)

Position = Tuple[int, int]


def _open_segments(grid: LightUpGrid) -> List[List[Position]]:
    """Maximal horizontal and vertical runs of open cells."""

    segments: List[List[Position]] = []
    for y in range(grid.height):
        run: List[Position] = []
        for x in range(grid.width):
            if grid.is_opaque(x, y):
                if run:
                    segments.append(run)
                run = []
            else:
                run.append((x, y))
        if run:
            segments.append(run)
    for x in range(grid.width):
        run = []
        for y in range(grid.height):
            if grid.is_opaque(x, y):
                if run:
                    segments.append(run)
                run = []
            else:
                run.append((x, y))
        if run:
            segments.append(run)
    return segments


def build_model(
    grid: LightUpGrid, respect_marks: bool = False
) -> Tuple[cp_model.CpModel, Dict[Position, cp_model.IntVar]]:
    """One Boolean per open cell; lit, no-overlap and clue constraints."""

    model = cp_model.CpModel()
    light_vars: Dict[Position, cp_model.IntVar] = {}

    for x, y, cell in grid.iter_cells():
        if not isinstance(cell, OpenCell):
            continue
        var = model.new_bool_var(f"L_{x}_{y}")
        light_vars[(x, y)] = var
        if respect_marks:
            if cell.light:
                model.add(var == 1)
            elif cell.impossible:
                model.add(var == 0)

    for (x, y) in light_vars:
        model.add_bool_or([light_vars[pos] for pos in grid.illumination_set(x, y)])

    for segment in _open_segments(grid):
        if len(segment) > 1:
            model.add_at_most_one([light_vars[pos] for pos in segment])

    for x, y, cell in grid.iter_cells():
        if not isinstance(cell, OpaqueCell) or cell.clue is None:
            continue
        neighbours = [light_vars[pos] for pos in grid.neighbors(x, y) if pos in light_vars]
        if neighbours:
            model.add(sum(neighbours) == cell.clue)

    return model, light_vars


def _has_unreachable_clue(grid: LightUpGrid) -> bool:
    for x, y, cell in grid.iter_cells():
        if isinstance(cell, OpaqueCell) and cell.clue:
            if sum(1 for pos in grid.neighbors(x, y) if not grid.is_opaque(*pos)) < cell.clue:
                return True
    return False


def _new_solver(timeout: float) -> cp_model.CpSolver:
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = 1
    return solver


def _check_status(solver: cp_model.CpSolver, status: int) -> bool:
    if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        return True
    if status == cp_model.INFEASIBLE:
        return False
    raise LightUpError(f"CP-SAT gave no answer (status={solver.status_name(status)})")


def count_solutions(
    grid: LightUpGrid,
    limit: int = 2,
    respect_marks: bool = False,
    timeout: float = 10.0,
) -> int:
    """Count solutions of ``grid`` up to ``limit`` by re-solving with no-good cuts."""

    if _has_unreachable_clue(grid):
        return 0
    model, light_vars = build_model(grid, respect_marks)
    solver = _new_solver(timeout)
    count = 0
    while count < limit:
        status = solver.solve(model)
        if not _check_status(solver, status):
            break
        count += 1
        if not light_vars:
            break
        # Exclude exactly this assignment from later solves.
        model.add_bool_or(
            [~var if solver.value(var) else var for var in light_vars.values()]
        )
    LOGGER.debug("CP-SAT counted %d solution(s) (limit %d)", count, limit)
    return count


def solve_exact(
    grid: LightUpGrid, respect_marks: bool = False, timeout: float = 10.0
) -> Optional[LightUpGrid]:
    """Return a copy of ``grid`` with one solution's lights placed, or None."""

    if _has_unreachable_clue(grid):
        return None
    model, light_vars = build_model(grid, respect_marks)
    solver = _new_solver(timeout)
    status = solver.solve(model)
    if not _check_status(solver, status):
        LOGGER.info("CP-SAT: puzzle has no solution")
        return None

    solved = grid.copy()
    if not respect_marks:
        solved.unplace_lights()
    for (x, y), var in light_vars.items():
        if solver.value(var):
            solved.mark_impossible(x, y, False)
            solved.set_light(x, y, True)
    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)
    return solved
