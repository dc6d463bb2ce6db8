"""Local inference rules: forced lights and clue saturation/exhaustion.

Both rules only ever add information (a light or an impossible mark); neither
retracts anything, so repeated passes converge.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..core.models import OpaqueCell, OpenCell
from ..utils.logger import get_logger
from .grid import LightUpGrid


LOGGER = get_logger(__name__)


def try_solve_light(grid: LightUpGrid, x: int, y: int) -> bool:
    """Light the only remaining position able to reach the unlit cell ``(x, y)``."""

    cell = grid.cell(x, y)
    if not isinstance(cell, OpenCell) or cell.illumination > 0:
        return False

    candidate: Optional[Tuple[int, int]] = None
    count = 0
    for lx, ly in grid.illumination_set(x, y, include_origin=True):
        if not grid.could_place_light(lx, ly):
            continue
        candidate = (lx, ly)
        count += 1
        if count > 1:
            return False
    if count != 1 or candidate is None:
        return False

    LOGGER.debug("(%d,%d) can only be lit from %s; placing light", x, y, candidate)
    grid.set_light(candidate[0], candidate[1], True)
    return True


def try_solve_number(grid: LightUpGrid, x: int, y: int) -> bool:
    """Apply clue exhaustion or saturation to the numbered cell ``(x, y)``."""

    cell = grid.cell(x, y)
    if not isinstance(cell, OpaqueCell) or cell.clue is None:
        return False

    needed = cell.clue
    undetermined: List[Tuple[int, int]] = []
    slots = 0
    for nx, ny in grid.neighbors(x, y):
        slots += 1
        if grid.is_light(nx, ny):
            needed -= 1
            slots -= 1
        elif not grid.could_place_light(nx, ny):
            slots -= 1
        else:
            undetermined.append((nx, ny))

    if slots == 0:
        return False
    if needed == 0:
        LOGGER.debug("Clue at (%d,%d) exhausted; marking %s impossible", x, y, undetermined)
        cell.load_bearing = True
        for nx, ny in undetermined:
            grid.mark_impossible(nx, ny)
        return bool(undetermined)
    if needed == slots:
        LOGGER.debug("Clue at (%d,%d) saturated; lighting %s", x, y, undetermined)
        cell.load_bearing = True
        for nx, ny in undetermined:
            grid.set_light(nx, ny, True)
        return bool(undetermined)
    return False


def propagate_once(grid: LightUpGrid) -> Tuple[bool, int]:
    """Run one row-major pass of both rules.

    Returns whether anything changed and how many cells could accept a light
    when the pass reached them.
    """

    changed = False
    placeable = 0
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.could_place_light(x, y):
                placeable += 1
            if try_solve_light(grid, x, y):
                changed = True
            if try_solve_number(grid, x, y):
                changed = True
    return changed, placeable


def propagate(grid: LightUpGrid) -> int:
    """Apply passes until one changes nothing; return the number of productive passes.

    Test and debugging helper: the search interleaves single passes with its
    own checks through :func:`propagate_once`.
    """

    passes = 0
    while True:
        changed, _ = propagate_once(grid)
        if not changed:
            return passes
        passes += 1
