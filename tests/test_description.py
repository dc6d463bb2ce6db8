import unittest

from lightup.core.exceptions import MalformedDescriptionError
from lightup.engine.grid import LightUpGrid
from lightup.io.description import decode_description, encode_description, validate_description
from lightup.io.hints import solution_hint


class DescriptionDecodeTests(unittest.TestCase):
    def test_decode_places_opaque_cells_and_clues(self) -> None:
        grid = decode_description("d4cB", 3, 3)
        self.assertEqual(grid.clue_value(1, 1), 4)
        self.assertTrue(grid.is_opaque(2, 2))
        self.assertFalse(grid.has_clue(2, 2))
        self.assertEqual(sum(1 for _, _, cell in grid.iter_cells() if cell.opaque), 2)
        self.assertEqual(grid.light_count, 0)

    def test_runs_cross_row_boundaries(self) -> None:
        grid = decode_description("eBc", 3, 3)
        self.assertTrue(grid.is_opaque(2, 1))
        self.assertFalse(grid.is_opaque(0, 1))

    def test_round_trip_is_stable(self) -> None:
        for description, width, height in (
            ("d4d", 3, 3),
            ("BBBBBeBBBBB", 5, 3),
            ("a0b1B2c3a", 4, 3),
        ):
            grid = decode_description(description, width, height)
            encoded = encode_description(grid)
            again = decode_description(encoded, width, height)
            self.assertTrue(grid.same_layout(again), msg=description)
            self.assertEqual(encode_description(again), encoded)


class DescriptionEncodeTests(unittest.TestCase):
    def test_long_runs_are_split(self) -> None:
        grid = LightUpGrid(30, 2)
        self.assertEqual(encode_description(grid), "zzh")
        self.assertEqual(encode_description(decode_description("zzh", 30, 2)), "zzh")

    def test_unclued_opaque_cells_use_b(self) -> None:
        grid = LightUpGrid(3, 2)
        grid.set_opaque(0, 0)
        grid.set_opaque(2, 1, clue=0)
        self.assertEqual(encode_description(grid), "Bd0")

    def test_lights_are_not_encoded(self) -> None:
        grid = decode_description("d4d", 3, 3)
        before = encode_description(grid)
        grid.set_light(1, 0, True)
        self.assertEqual(encode_description(grid), before)


class DescriptionValidationTests(unittest.TestCase):
    def test_shorter_than_expected(self) -> None:
        with self.assertRaisesRegex(MalformedDescriptionError, "shorter than expected"):
            validate_description("d4", 3, 3)

    def test_longer_than_expected(self) -> None:
        with self.assertRaisesRegex(MalformedDescriptionError, "longer than expected"):
            validate_description("d4e", 3, 3)
        with self.assertRaisesRegex(MalformedDescriptionError, "longer than expected"):
            validate_description("d4da", 3, 3)

    def test_unexpected_character(self) -> None:
        with self.assertRaisesRegex(MalformedDescriptionError, "unexpected character"):
            validate_description("d!d", 3, 3)
        with self.assertRaisesRegex(MalformedDescriptionError, "unexpected character"):
            validate_description("d5d", 3, 3)

    def test_decode_validates_first(self) -> None:
        with self.assertRaises(MalformedDescriptionError):
            decode_description("i", 3, 4)


class SolutionHintTests(unittest.TestCase):
    def test_hint_prefers_light_tokens(self) -> None:
        current = decode_description("d0d", 3, 3)
        current.set_light(1, 0, True)
        solved = decode_description("d0d", 3, 3)
        solved.mark_impossible(1, 0)
        solved.set_light(0, 0, True)

        self.assertEqual(solution_hint(current, solved), "S;L0,0;L1,0")

    def test_identical_grids_give_bare_marker(self) -> None:
        grid = decode_description("d4d", 3, 3)
        self.assertEqual(solution_hint(grid, grid.copy()), "S")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
