"""Plain-text rendering of Light Up grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from ..core.models import OpaqueCell

if TYPE_CHECKING:
    from ..engine.generator import GenerationResult
    from ..engine.grid import LightUpGrid


def cell_symbol(grid: LightUpGrid, x: int, y: int) -> str:
    cell = grid.cell(x, y)
    if isinstance(cell, OpaqueCell):
        return str(cell.clue) if cell.clue is not None else "#"
    if cell.light:
        return "L"
    if cell.impossible:
        return "x"
    return "." if cell.illumination > 0 else " "


def format_grid(grid: LightUpGrid) -> str:
    width = grid.width
    header_cells = [f"{x:>2}" for x in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for y in range(grid.height):
        row_cells = [cell_symbol(grid, x, y) for x in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{y:>2} | {row_render}")
    return "\n".join(lines)


def pretty_print_grid(grid: LightUpGrid, *, label: str | None = None, stream=None) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def print_generation_stats(result: GenerationResult, *, stream=None) -> None:
    """Print the puzzle and a short summary of how it was generated."""

    stream = stream or sys.stdout
    grid = result.grid
    print(format_grid(grid), file=stream)

    total = grid.bounds.area
    opaque = sum(1 for _, _, cell in grid.iter_cells() if cell.opaque)
    clues = sum(1 for x, y, _ in grid.iter_cells() if grid.has_clue(x, y))
    print(f"Params:      {result.params.encode()}", file=stream)
    print(f"Description: {result.description}", file=stream)
    print(
        f"Opaque:      {opaque}/{total} ({opaque / total * 100:.0f}%), {clues} clues",
        file=stream,
    )
    print(f"Density:     {result.black_percentage}% after {result.attempts} attempts", file=stream)
    print(f"Recursion:   depth {result.recursion_depth}", file=stream)
