"""Shared constants and enumerations for the Light Up engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Difficulty(str, Enum):
    """Generation difficulty: propagation only, or recursion required."""

    EASY = "easy"
    HARD = "hard"


class Symmetry(str, Enum):
    """Symmetry classes for the opaque-cell layout."""

    NONE = "none"
    REF2 = "ref2"
    ROT2 = "rot2"
    REF4 = "ref4"
    ROT4 = "rot4"

    @property
    def code(self) -> int:
        return SYMMETRY_CODES.index(self)

    @property
    def degree(self) -> int:
        if self == Symmetry.NONE:
            return 1
        if self in (Symmetry.REF2, Symmetry.ROT2):
            return 2
        return 4

    @property
    def rotational(self) -> bool:
        return self in (Symmetry.ROT2, Symmetry.ROT4)

    @classmethod
    def from_code(cls, code: int) -> "Symmetry":
        if code < 0 or code >= len(SYMMETRY_CODES):
            raise ValueError(f"Unknown symmetry code {code}")
        return SYMMETRY_CODES[code]


# Index in this tuple is the numeric code used in parameter strings.
SYMMETRY_CODES: Tuple[Symmetry, ...] = (
    Symmetry.NONE,
    Symmetry.REF2,
    Symmetry.ROT2,
    Symmetry.REF4,
    Symmetry.ROT4,
)

# Left, right, up, down as (dx, dy).
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

MAX_CLUE = 4
MAX_RUN = 26

# Recursion budget shared by generation-time validation and interactive solve.
MAX_RECURSE = 5
MAX_GRIDGEN_TRIES = 20

MIN_BLACK_PERCENTAGE = 5
MAX_BLACK_PERCENTAGE = 100
DENSITY_STEP = 5
DENSITY_CAP = 90


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    @property
    def area(self) -> int:
        return self.width * self.height
