"""Line-of-sight computation for lights.

A light at ``(x, y)`` illuminates the cross of open cells reachable along the
four axis directions, each ray stopping before the first opaque cell or the
grid edge. The relation is symmetric, so the same cross also lists every
position whose light could reach ``(x, y)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Tuple

if TYPE_CHECKING:
    from .grid import LightUpGrid


@dataclass(frozen=True)
class IlluminationSet:
    """Rectangle-cross of cells sharing line of sight with ``origin``."""

    origin: Tuple[int, int]
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    include_origin: bool = True

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        ox, oy = self.origin
        for x in range(self.min_x, self.max_x + 1):
            if x == ox:
                continue
            yield x, oy
        for y in range(self.min_y, self.max_y + 1):
            if y == oy and not self.include_origin:
                continue
            yield ox, y

    def __len__(self) -> int:
        size = (self.max_x - self.min_x) + (self.max_y - self.min_y)
        return size + 1 if self.include_origin else size

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        x, y = item
        ox, oy = self.origin
        if (x, y) == (ox, oy):
            return self.include_origin
        if y == oy:
            return self.min_x <= x <= self.max_x
        if x == ox:
            return self.min_y <= y <= self.max_y
        return False


def illumination_set(
    grid: "LightUpGrid", x: int, y: int, include_origin: bool = True
) -> IlluminationSet:
    """Scan the four rays from ``(x, y)`` and return the cells they cover."""

    min_x = max_x = x
    min_y = max_y = y

    scan = x - 1
    while scan >= 0 and not grid.is_opaque(scan, y):
        min_x = scan
        scan -= 1
    scan = x + 1
    while scan < grid.width and not grid.is_opaque(scan, y):
        max_x = scan
        scan += 1

    scan = y - 1
    while scan >= 0 and not grid.is_opaque(x, scan):
        min_y = scan
        scan -= 1
    scan = y + 1
    while scan < grid.height and not grid.is_opaque(x, scan):
        max_y = scan
        scan += 1

    return IlluminationSet(
        origin=(x, y),
        min_x=min_x,
        max_x=max_x,
        min_y=min_y,
        max_y=max_y,
        include_origin=include_origin,
    )
