"""Deterministic rule validation for finished grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.exceptions import ValidationError
from ..core.models import OpaqueCell, OpenCell
from ..utils.logger import get_logger
from .grid import LightUpGrid


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs the solved-grid checks and reports the first violation."""

    def validate(self, grid: LightUpGrid) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_all_lit(grid)
            self._check_no_overlap(grid)
            self._check_clues(grid)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_all_lit(self, grid: LightUpGrid) -> None:
        for x, y, cell in grid.iter_cells():
            if isinstance(cell, OpenCell) and cell.illumination == 0:
                raise ValidationError(f"Cell ({x},{y}) is not lit")

    def _check_no_overlap(self, grid: LightUpGrid) -> None:
        for x, y, cell in grid.iter_cells():
            if isinstance(cell, OpenCell) and cell.light and cell.illumination > 1:
                raise ValidationError(f"Light at ({x},{y}) is lit by another light")

    def _check_clues(self, grid: LightUpGrid) -> None:
        for x, y, cell in grid.iter_cells():
            if not isinstance(cell, OpaqueCell) or cell.clue is None:
                continue
            found = grid.adjacent_lights(x, y)
            if found != cell.clue:
                raise ValidationError(
                    f"Clue {cell.clue} at ({x},{y}) has {found} adjacent light(s)"
                )
