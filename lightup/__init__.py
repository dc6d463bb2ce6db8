"""Light Up (Akari) puzzle generator and solver.

This package exposes the public API surface via:

- ``lightup.engine.generator.LightUpGenerator``: generates unique puzzles.
- ``lightup.engine.solver`` helpers: depth-bounded search and interactive solve.
- ``lightup.io.description`` helpers: the compact puzzle description codec.
"""

from .core.models import GameParams
from .engine.generator import GenerationResult, GeneratorConfig, LightUpGenerator
from .engine.grid import LightUpGrid
from .engine.solver import solve_game, solve_grid
from .io.description import decode_description, encode_description

__all__ = [
    "GameParams",
    "GenerationResult",
    "GeneratorConfig",
    "LightUpGenerator",
    "LightUpGrid",
    "decode_description",
    "encode_description",
    "solve_game",
    "solve_grid",
]

__version__ = "0.1.0"
