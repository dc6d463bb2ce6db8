"""Data models supporting the Light Up engine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .constants import (
    MAX_BLACK_PERCENTAGE,
    MIN_BLACK_PERCENTAGE,
    Difficulty,
    Symmetry,
)
from .exceptions import InvalidParamsError


@dataclass
class OpaqueCell:
    """A black cell. Blocks light and optionally carries a clue."""

    clue: Optional[int] = None
    load_bearing: bool = False

    @property
    def opaque(self) -> bool:
        return True


@dataclass
class OpenCell:
    """A white cell that may hold a light and must end up lit."""

    light: bool = False
    impossible: bool = False
    illumination: int = 0

    @property
    def opaque(self) -> bool:
        return False


Cell = Union[OpaqueCell, OpenCell]


_NUMBER = re.compile(r"\d*")


@dataclass
class GameParams:
    """Puzzle parameters, round-trippable through the compact ``7x7b20s4r`` form."""

    width: int = 7
    height: int = 7
    black_percentage: int = 20
    symmetry: Symmetry = Symmetry.ROT4
    difficulty: Difficulty = Difficulty.EASY

    @property
    def recurse(self) -> bool:
        return self.difficulty == Difficulty.HARD

    def validate(self, full: bool = True) -> None:
        if self.width < 2 or self.height < 2:
            raise InvalidParamsError("Width and height must be at least 2")
        if not full:
            return
        if not MIN_BLACK_PERCENTAGE <= self.black_percentage <= MAX_BLACK_PERCENTAGE:
            raise InvalidParamsError(
                "Percentage of black squares must be between 5% and 100%"
            )
        if not isinstance(self.symmetry, Symmetry):
            raise InvalidParamsError("Unknown symmetry type")
        if self.width != self.height and self.symmetry == Symmetry.ROT4:
            raise InvalidParamsError("4-fold symmetry is only available with square grids")

    def encode(self, full: bool = True) -> str:
        if not full:
            return f"{self.width}x{self.height}"
        suffix = "r" if self.recurse else ""
        return (
            f"{self.width}x{self.height}b{self.black_percentage}"
            f"s{self.symmetry.code}{suffix}"
        )

    @classmethod
    def decode(cls, text: str) -> "GameParams":
        """Parse a parameter string; absent sections keep their defaults."""

        params = cls()
        pos = 0

        def eat_number() -> int:
            nonlocal pos
            match = _NUMBER.match(text, pos)
            digits = match.group(0) if match else ""
            pos += len(digits)
            return int(digits) if digits else 0

        params.width = eat_number()
        if text[pos:pos + 1] == "x":
            pos += 1
            params.height = eat_number()
        if text[pos:pos + 1] == "b":
            pos += 1
            params.black_percentage = eat_number()
        if text[pos:pos + 1] == "s":
            pos += 1
            try:
                params.symmetry = Symmetry.from_code(eat_number())
            except ValueError as exc:
                raise InvalidParamsError("Unknown symmetry type") from exc
        params.difficulty = Difficulty.EASY
        if text[pos:pos + 1] == "r":
            params.difficulty = Difficulty.HARD
        return params


PRESETS = (
    GameParams(7, 7, 20, Symmetry.ROT4, Difficulty.EASY),
    GameParams(7, 7, 20, Symmetry.ROT4, Difficulty.HARD),
    GameParams(10, 10, 20, Symmetry.ROT2, Difficulty.EASY),
    GameParams(10, 10, 20, Symmetry.ROT2, Difficulty.HARD),
    GameParams(14, 14, 20, Symmetry.ROT2, Difficulty.EASY),
    GameParams(14, 14, 20, Symmetry.ROT2, Difficulty.HARD),
)
