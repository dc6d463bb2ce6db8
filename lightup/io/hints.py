"""Solution hint move strings.

A hint starts with ``S`` (the solver was used) followed by ``;``-separated
``L<x>,<y>`` (toggle light) and ``I<x>,<y>`` (toggle impossible mark) tokens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..engine.grid import LightUpGrid


def solution_hint(current: "LightUpGrid", solved: "LightUpGrid") -> str:
    """Tokens turning ``current`` into ``solved``, in row-major order."""

    tokens: List[str] = ["S"]
    for x, y, _ in current.iter_cells():
        if current.is_opaque(x, y):
            continue
        if current.is_light(x, y) != solved.is_light(x, y):
            tokens.append(f"L{x},{y}")
        elif current.is_impossible(x, y) != solved.is_impossible(x, y):
            tokens.append(f"I{x},{y}")
    return ";".join(tokens)
