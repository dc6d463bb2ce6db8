"""Grid representation and invariant-preserving mutators."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from ..core.constants import MAX_CLUE, ORTHOGONAL_STEPS, Bounds
from ..core.exceptions import GridContractError
from ..core.models import Cell, OpaqueCell, OpenCell
from ..utils.logger import get_logger
from .illumination import IlluminationSet, illumination_set


LOGGER = get_logger(__name__)


@dataclass
class GridSnapshot:
    cells: List[List[Cell]]
    light_count: int = 0


class LightUpGrid:
    """Encapsulates the puzzle grid: opaque layout, clues, lights and marks.

    Illumination counts on open cells are only ever changed by
    :meth:`set_light`, which keeps them equal to the number of lights that can
    see each cell.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 2 or height < 2:
            raise GridContractError("Width and height must be at least 2")
        self.width = width
        self.height = height
        self.bounds = Bounds(width=width, height=height)
        self.cells: List[List[Cell]] = [
            [OpenCell() for _ in range(width)] for _ in range(height)
        ]
        self._light_count = 0

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def copy(self) -> "LightUpGrid":
        duplicate = LightUpGrid.__new__(LightUpGrid)
        duplicate.width = self.width
        duplicate.height = self.height
        duplicate.bounds = self.bounds
        duplicate.cells = self._copy_cells()
        duplicate._light_count = self._light_count
        return duplicate

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(cells=self._copy_cells(), light_count=self._light_count)

    def restore(self, snapshot: GridSnapshot) -> None:
        if len(snapshot.cells) != self.height or len(snapshot.cells[0]) != self.width:
            raise GridContractError("Snapshot dimensions do not match grid")
        self.cells = [[copy.copy(cell) for cell in row] for row in snapshot.cells]
        self._light_count = snapshot.light_count

    def _copy_cells(self) -> List[List[Cell]]:
        return [[copy.copy(cell) for cell in row] for row in self.cells]

    # ------------------------------------------------------------------
    # Layout mutators
    # ------------------------------------------------------------------
    def _require_no_lights(self, action: str) -> None:
        if self._light_count:
            raise GridContractError(f"Cannot {action} while lights are placed")

    def set_opaque(self, x: int, y: int, clue: Optional[int] = None) -> None:
        self._require_no_lights("change opacity")
        self._check_clue(clue)
        self.cells[y][x] = OpaqueCell(clue=clue)

    def set_open(self, x: int, y: int) -> None:
        self._require_no_lights("change opacity")
        self.cells[y][x] = OpenCell()

    def set_clue(self, x: int, y: int, clue: Optional[int]) -> None:
        cell = self._opaque(x, y)
        self._check_clue(clue)
        cell.clue = clue
        cell.load_bearing = False

    def clear_clue(self, x: int, y: int) -> None:
        self.set_clue(x, y, None)

    @staticmethod
    def _check_clue(clue: Optional[int]) -> None:
        if clue is not None and not 0 <= clue <= MAX_CLUE:
            raise GridContractError(f"Clue {clue} outside 0..{MAX_CLUE}")

    def clean(self, preserve_opaque: bool) -> None:
        """Reset counts and flags; optionally keep which cells are opaque."""

        LOGGER.debug("Cleaning %sx%s grid (preserve_opaque=%s)", self.width, self.height, preserve_opaque)
        for y in range(self.height):
            for x in range(self.width):
                if preserve_opaque and self.cells[y][x].opaque:
                    self.cells[y][x] = OpaqueCell()
                else:
                    self.cells[y][x] = OpenCell()
        self._light_count = 0

    def unplace_lights(self) -> None:
        """Return to the bare puzzle: no lights, no marks, no load-bearing flags."""

        for x, y, cell in self.iter_cells():
            if isinstance(cell, OpaqueCell):
                cell.load_bearing = False
                continue
            if cell.light:
                self.set_light(x, y, False)
            cell.impossible = False

    def clear_load_bearing(self) -> None:
        for _, _, cell in self.iter_cells():
            if isinstance(cell, OpaqueCell):
                cell.load_bearing = False

    # ------------------------------------------------------------------
    # Light mutators
    # ------------------------------------------------------------------
    def set_light(self, x: int, y: int, on: bool) -> None:
        """Make sure the light at ``(x, y)`` is in the given state."""

        cell = self._open(x, y, "hold a light")
        if on == cell.light:
            return
        if on and cell.impossible:
            raise GridContractError(f"Cell {(x, y)} is marked impossible")
        diff = 1 if on else -1
        cell.light = on
        self._light_count += diff
        for lx, ly in self.illumination_set(x, y, include_origin=True):
            target = self.cells[ly][lx]
            if isinstance(target, OpenCell):
                target.illumination += diff

    def mark_impossible(self, x: int, y: int, on: bool = True) -> None:
        cell = self._open(x, y, "be marked impossible")
        if on and cell.light:
            raise GridContractError(f"Cell {(x, y)} holds a light")
        cell.impossible = on

    def _open(self, x: int, y: int, action: str) -> OpenCell:
        cell = self.cells[y][x]
        if not isinstance(cell, OpenCell):
            raise GridContractError(f"Opaque cell {(x, y)} cannot {action}")
        return cell

    def _opaque(self, x: int, y: int) -> OpaqueCell:
        cell = self.cells[y][x]
        if not isinstance(cell, OpaqueCell):
            raise GridContractError(f"Open cell {(x, y)} cannot carry a clue")
        return cell

    # ------------------------------------------------------------------
    # Cell queries
    # ------------------------------------------------------------------
    def cell(self, x: int, y: int) -> Cell:
        return self.cells[y][x]

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """Yield ``(x, y, cell)`` in row-major order."""

        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                yield x, y, cell

    def is_opaque(self, x: int, y: int) -> bool:
        return self.cells[y][x].opaque

    def has_clue(self, x: int, y: int) -> bool:
        cell = self.cells[y][x]
        return isinstance(cell, OpaqueCell) and cell.clue is not None

    def clue_value(self, x: int, y: int) -> Optional[int]:
        cell = self.cells[y][x]
        return cell.clue if isinstance(cell, OpaqueCell) else None

    def is_light(self, x: int, y: int) -> bool:
        cell = self.cells[y][x]
        return isinstance(cell, OpenCell) and cell.light

    def is_impossible(self, x: int, y: int) -> bool:
        cell = self.cells[y][x]
        return isinstance(cell, OpenCell) and cell.impossible

    def illumination_count(self, x: int, y: int) -> int:
        cell = self.cells[y][x]
        return cell.illumination if isinstance(cell, OpenCell) else 0

    def could_place_light(self, x: int, y: int) -> bool:
        cell = self.cells[y][x]
        return isinstance(cell, OpenCell) and not cell.impossible and cell.illumination == 0

    @property
    def light_count(self) -> int:
        return self._light_count

    def neighbors(self, x: int, y: int) -> Iterable[Tuple[int, int]]:
        for dx, dy in ORTHOGONAL_STEPS:
            nx, ny = x + dx, y + dy
            if self.bounds.contains(nx, ny):
                yield nx, ny

    def illumination_set(self, x: int, y: int, include_origin: bool = True) -> IlluminationSet:
        return illumination_set(self, x, y, include_origin)

    # ------------------------------------------------------------------
    # Clue checks
    # ------------------------------------------------------------------
    def adjacent_lights(self, x: int, y: int) -> int:
        return sum(1 for nx, ny in self.neighbors(x, y) if self.is_light(nx, ny))

    def clue_is_correct(self, x: int, y: int) -> bool:
        clue = self._opaque(x, y).clue
        if clue is None:
            raise GridContractError(f"Cell {(x, y)} has no clue")
        return self.adjacent_lights(x, y) == clue

    def clue_is_wrong(self, x: int, y: int) -> bool:
        """True if the clue has too many lights, or too few slots left to reach it."""

        clue = self._opaque(x, y).clue
        if clue is None:
            raise GridContractError(f"Cell {(x, y)} has no clue")
        lights = 0
        empty = 0
        for nx, ny in self.neighbors(x, y):
            if self.is_light(nx, ny):
                lights += 1
            elif self.could_place_light(nx, ny):
                empty += 1
        return lights > clue or lights + empty < clue

    # ------------------------------------------------------------------
    # Completion checks
    # ------------------------------------------------------------------
    def is_lit(self) -> bool:
        return all(
            cell.illumination > 0
            for _, _, cell in self.iter_cells()
            if isinstance(cell, OpenCell)
        )

    def has_overlap(self) -> bool:
        return any(
            cell.light and cell.illumination > 1
            for _, _, cell in self.iter_cells()
            if isinstance(cell, OpenCell)
        )

    def clues_satisfied(self) -> bool:
        for x, y, cell in self.iter_cells():
            if isinstance(cell, OpaqueCell) and cell.clue is not None:
                if not self.clue_is_correct(x, y):
                    return False
        return True

    def is_solved(self) -> bool:
        return self.is_lit() and not self.has_overlap() and self.clues_satisfied()

    # ------------------------------------------------------------------
    # Comparison helpers
    # ------------------------------------------------------------------
    def same_layout(self, other: "LightUpGrid") -> bool:
        """True if both grids have identical opaque cells and clues."""

        if (self.width, self.height) != (other.width, other.height):
            return False
        for x, y, cell in self.iter_cells():
            theirs = other.cells[y][x]
            if cell.opaque != theirs.opaque:
                return False
            if isinstance(cell, OpaqueCell) and cell.clue != theirs.clue:
                return False
        return True

    def light_positions(self) -> List[Tuple[int, int]]:
        return [(x, y) for x, y, cell in self.iter_cells() if isinstance(cell, OpenCell) and cell.light]
