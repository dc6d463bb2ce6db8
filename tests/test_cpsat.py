import unittest

from lightup.core.constants import Symmetry
from lightup.engine.cpsat import count_solutions, solve_exact
from lightup.engine.generator import GeneratorConfig, LightUpGenerator
from lightup.io.description import decode_description


class CountSolutionsTests(unittest.TestCase):
    def test_corridor_count(self) -> None:
        grid = decode_description("BBBBBeBBBBB", 5, 3)
        self.assertEqual(count_solutions(grid, limit=10), 5)
        self.assertEqual(count_solutions(grid, limit=2), 2)

    def test_existing_lights_respected_on_request(self) -> None:
        grid = decode_description("BBBBBeBBBBB", 5, 3)
        grid.set_light(2, 1, True)
        self.assertEqual(count_solutions(grid, limit=10, respect_marks=True), 1)
        self.assertEqual(count_solutions(grid, limit=10), 5)

    def test_unique_puzzle(self) -> None:
        self.assertEqual(count_solutions(decode_description("d4d", 3, 3)), 1)

    def test_unreachable_clue_has_no_solution(self) -> None:
        grid = decode_description("4c", 2, 2)
        self.assertEqual(count_solutions(grid), 0)
        self.assertIsNone(solve_exact(grid))

    def test_removing_a_clue_never_reduces_solutions(self) -> None:
        with_clue = count_solutions(decode_description("d0d", 3, 3), limit=10)
        without_clue = count_solutions(decode_description("dBd", 3, 3), limit=10)
        self.assertEqual(with_clue, 2)
        self.assertGreaterEqual(without_clue, with_clue)


class SolveExactTests(unittest.TestCase):
    def test_solution_grid(self) -> None:
        puzzle = decode_description("d4d", 3, 3)
        solved = solve_exact(puzzle)
        self.assertIsNotNone(solved)
        self.assertTrue(solved.is_solved())
        self.assertEqual(solved.light_positions(), [(1, 0), (0, 1), (2, 1), (1, 2)])
        self.assertEqual(puzzle.light_count, 0)

    def test_generated_puzzle_cross_check(self) -> None:
        config = GeneratorConfig(5, 5, symmetry=Symmetry.ROT2, seed=5, cross_check=True)
        result = LightUpGenerator(config).generate()
        self.assertEqual(count_solutions(result.grid, limit=3), 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
