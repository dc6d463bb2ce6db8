"""Compact textual puzzle description.

One character per cell in row-major order: ``0``-``4`` is an opaque cell with
that clue, ``B`` an opaque cell without one, and ``a``-``z`` a run of 1-26
open cells. Runs may continue across row ends.
"""

from __future__ import annotations

from typing import List, Optional

from ..core.constants import MAX_CLUE, MAX_RUN
from ..core.exceptions import MalformedDescriptionError
from ..core.models import OpaqueCell
from ..engine.grid import LightUpGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def _run_letter(run: int) -> str:
    return chr(ord("a") - 1 + run)


def encode_description(grid: LightUpGrid) -> str:
    """Serialize opaque cells and clues; lights and marks are not encoded."""

    parts: List[str] = []
    run = 0
    for _, _, cell in grid.iter_cells():
        if isinstance(cell, OpaqueCell):
            if run:
                parts.append(_run_letter(run))
                run = 0
            parts.append(str(cell.clue) if cell.clue is not None else "B")
            continue
        if run == MAX_RUN:
            parts.append(_run_letter(run))
            run = 0
        run += 1
    if run:
        parts.append(_run_letter(run))
    return "".join(parts)


def validate_description(description: str, width: int, height: int) -> None:
    """Raise :class:`MalformedDescriptionError` unless ``description`` covers the grid exactly."""

    total = width * height
    covered = 0
    for char in description:
        if covered >= total:
            raise MalformedDescriptionError("Game description longer than expected")
        if "0" <= char <= str(MAX_CLUE) or char == "B":
            covered += 1
        elif "a" <= char <= "z":
            covered += ord(char) - ord("a") + 1
        else:
            raise MalformedDescriptionError(
                f"Game description contained unexpected character {char!r}"
            )
    if covered < total:
        raise MalformedDescriptionError("Game description shorter than expected")
    if covered > total:
        raise MalformedDescriptionError("Game description longer than expected")


def decode_description(description: str, width: int, height: int) -> LightUpGrid:
    """Build a fresh puzzle grid (no lights, no marks) from a description."""

    validate_description(description, width, height)
    grid = LightUpGrid(width, height)
    index = 0
    for char in description:
        if "a" <= char <= "z":
            index += ord(char) - ord("a") + 1
            continue
        clue: Optional[int] = None if char == "B" else int(char)
        grid.set_opaque(index % width, index // width, clue)
        index += 1
    LOGGER.debug("Decoded %dx%d description %r", width, height, description)
    return grid
