import unittest

from lightup.core.constants import Difficulty, Symmetry
from lightup.core.exceptions import GenerationExhaustedError, InvalidParamsError
from lightup.engine.generator import (
    GeneratorConfig,
    LightUpGenerator,
    fundamental_domain,
    symmetry_images,
)
from lightup.engine.grid import LightUpGrid
from lightup.engine.solver import solve_grid
from lightup.io.description import decode_description


def make_generator(width: int, height: int, symmetry: Symmetry, **kwargs) -> LightUpGenerator:
    return LightUpGenerator(GeneratorConfig(width, height, symmetry=symmetry, **kwargs))


class LayoutTests(unittest.TestCase):
    def test_fundamental_domains(self) -> None:
        self.assertEqual(fundamental_domain(Symmetry.NONE, 6, 5), (6, 5))
        self.assertEqual(fundamental_domain(Symmetry.REF2, 6, 5), (6, 3))
        self.assertEqual(fundamental_domain(Symmetry.ROT2, 6, 5), (6, 3))
        self.assertEqual(fundamental_domain(Symmetry.REF4, 5, 5), (3, 3))
        self.assertEqual(fundamental_domain(Symmetry.ROT4, 5, 5), (2, 3))
        self.assertEqual(fundamental_domain(Symmetry.ROT4, 6, 6), (3, 3))

    def test_layout_is_symmetric(self) -> None:
        cases = (
            (Symmetry.NONE, 6, 5),
            (Symmetry.REF2, 6, 5),
            (Symmetry.ROT2, 6, 5),
            (Symmetry.REF4, 6, 5),
            (Symmetry.REF4, 5, 5),
            (Symmetry.ROT4, 5, 5),
            (Symmetry.ROT4, 6, 6),
        )
        for symmetry, width, height in cases:
            for seed in range(5):
                generator = make_generator(width, height, symmetry, seed=seed)
                grid = LightUpGrid(width, height)
                generator.layout_opaque_cells(grid, 40)
                for x, y, cell in grid.iter_cells():
                    for tx, ty in symmetry_images(symmetry, width, height, x, y):
                        self.assertEqual(
                            grid.is_opaque(tx, ty),
                            cell.opaque,
                            msg=f"{symmetry.value} {width}x{height} seed={seed} {(x, y)}->{(tx, ty)}",
                        )

    def test_full_density_makes_every_cell_opaque(self) -> None:
        generator = make_generator(4, 4, Symmetry.ROT2, seed=1)
        grid = LightUpGrid(4, 4)
        generator.layout_opaque_cells(grid, 100)
        self.assertTrue(all(cell.opaque for _, _, cell in grid.iter_cells()))
        self.assertTrue(generator.place_lights(grid))
        self.assertEqual(grid.light_count, 0)

    def test_place_lights_and_numbers(self) -> None:
        for seed in range(8):
            generator = make_generator(6, 6, Symmetry.ROT2, seed=seed)
            grid = LightUpGrid(6, 6)
            generator.layout_opaque_cells(grid, 30)
            self.assertTrue(generator.place_lights(grid))
            self.assertTrue(grid.is_lit())
            self.assertFalse(grid.has_overlap())

            generator.place_numbers(grid)
            for x, y, cell in grid.iter_cells():
                if cell.opaque:
                    self.assertEqual(cell.clue, grid.adjacent_lights(x, y))
            self.assertTrue(grid.is_solved())


class ClueReductionTests(unittest.TestCase):
    def test_puzzle_is_good(self) -> None:
        generator = make_generator(3, 3, Symmetry.NONE)
        good, depth = generator.puzzle_is_good(decode_description("d4d", 3, 3))
        self.assertTrue(good)
        self.assertEqual(depth, 0)

        corridor = decode_description("BBBBBeBBBBB", 5, 3)
        self.assertFalse(generator.puzzle_is_good(corridor)[0])
        hard = make_generator(5, 3, Symmetry.NONE, difficulty=Difficulty.HARD)
        self.assertFalse(hard.puzzle_is_good(corridor)[0])

    def test_puzzle_is_good_resets_lights(self) -> None:
        generator = make_generator(3, 3, Symmetry.NONE)
        grid = decode_description("d4d", 3, 3)
        grid.set_light(0, 0, True)
        self.assertTrue(generator.puzzle_is_good(grid)[0])
        self.assertFalse(grid.is_light(0, 0))

    def test_strip_unused_clues(self) -> None:
        grid = decode_description("d4d", 3, 3)
        solve_grid(grid)
        self.assertEqual(LightUpGenerator.strip_unused_clues(grid), 0)
        grid.clear_load_bearing()
        self.assertEqual(LightUpGenerator.strip_unused_clues(grid), 1)
        self.assertFalse(grid.has_clue(1, 1))

    def test_minimize_keeps_needed_clue(self) -> None:
        generator = make_generator(2, 2, Symmetry.NONE)
        grid = decode_description("0c", 2, 2)
        self.assertEqual(generator.minimize_clues(grid, [0, 1, 2, 3]), 0)
        self.assertEqual(grid.clue_value(0, 0), 0)


class GenerateTests(unittest.TestCase):
    def test_easy_generation_is_unique_without_recursion(self) -> None:
        config = GeneratorConfig(5, 5, symmetry=Symmetry.ROT2, seed=3)
        result = LightUpGenerator(config).generate()

        self.assertEqual(result.recursion_depth, 0)
        self.assertEqual(result.grid.light_count, 0)
        self.assertEqual(result.seed, 3)
        self.assertEqual(result.params.encode(), f"5x5b{result.black_percentage}s2")
        self.assertGreaterEqual(result.attempts, 1)

        puzzle = decode_description(result.description, 5, 5)
        self.assertTrue(puzzle.same_layout(result.grid))
        outcome, stats = solve_grid(puzzle, allow_recursion=False, force_unique=True)
        self.assertTrue(outcome.is_unique)
        self.assertTrue(puzzle.is_solved())

    def test_generation_is_reproducible(self) -> None:
        first = LightUpGenerator(GeneratorConfig(6, 6, seed=11)).generate()
        second = LightUpGenerator(GeneratorConfig(6, 6, seed=11)).generate()
        self.assertEqual(first.description, second.description)
        self.assertEqual(first.attempts, second.attempts)

    def test_density_escalates_until_a_puzzle_exists(self) -> None:
        config = GeneratorConfig(2, 2, black_percentage=5, symmetry=Symmetry.NONE, seed=0)
        result = LightUpGenerator(config).generate()
        # Below 25% a 2x2 grid gets no opaque cell and is never unique.
        self.assertEqual(result.black_percentage, 25)
        self.assertEqual(result.attempts, 4 * 20 + 1)
        self.assertEqual(config.black_percentage, 5)

    def test_exhaustion_raises(self) -> None:
        config = GeneratorConfig(
            2,
            2,
            black_percentage=5,
            symmetry=Symmetry.NONE,
            seed=0,
            max_tries=2,
            density_cap=10,
            max_rounds_at_cap=1,
        )
        with self.assertRaises(GenerationExhaustedError):
            LightUpGenerator(config).generate()

    def test_hard_generation_needs_recursion(self) -> None:
        config = GeneratorConfig(7, 7, symmetry=Symmetry.ROT4, difficulty=Difficulty.HARD, seed=0)
        result = LightUpGenerator(config).generate()

        self.assertGreater(result.recursion_depth, 0)
        self.assertTrue(result.params.encode().endswith("s4r"))
        self.assertEqual(result.grid.light_count, 0)

        flat, _ = solve_grid(
            decode_description(result.description, 7, 7),
            allow_recursion=False,
            force_unique=True,
        )
        self.assertTrue(flat.is_truncated)
        deep, stats = solve_grid(decode_description(result.description, 7, 7), force_unique=True)
        self.assertTrue(deep.is_unique)
        self.assertEqual(stats.max_depth_reached, result.recursion_depth)

    def test_hard_attempt_discards_puzzle_solved_without_recursion(self) -> None:
        # A single opaque cell on 2x2 always gives a clue that deduction alone resolves.
        generator = make_generator(2, 2, Symmetry.NONE, difficulty=Difficulty.HARD, seed=1)
        grid = LightUpGrid(2, 2)
        self.assertIsNone(generator.attempt(grid, 25, [0, 1, 2, 3]))
        self.assertEqual(generator.puzzle_is_good(grid), (True, 0))

    def test_invalid_config_rejected(self) -> None:
        with self.assertRaises(InvalidParamsError):
            LightUpGenerator(GeneratorConfig(6, 5, symmetry=Symmetry.ROT4))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
