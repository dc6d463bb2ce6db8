import unittest

from lightup.core.constants import Difficulty, Symmetry
from lightup.core.exceptions import InvalidParamsError
from lightup.core.models import PRESETS, GameParams
from lightup.engine.generator import GeneratorConfig


class GameParamsCodecTests(unittest.TestCase):
    def test_encode_full_and_short(self) -> None:
        params = GameParams()
        self.assertEqual(params.encode(), "7x7b20s4")
        self.assertEqual(params.encode(full=False), "7x7")
        params.difficulty = Difficulty.HARD
        self.assertEqual(params.encode(), "7x7b20s4r")

    def test_decode_full_string(self) -> None:
        params = GameParams.decode("10x8b25s2r")
        self.assertEqual((params.width, params.height), (10, 8))
        self.assertEqual(params.black_percentage, 25)
        self.assertEqual(params.symmetry, Symmetry.ROT2)
        self.assertEqual(params.difficulty, Difficulty.HARD)

    def test_decode_short_string_keeps_defaults(self) -> None:
        params = GameParams.decode("5x6")
        self.assertEqual((params.width, params.height), (5, 6))
        self.assertEqual(params.black_percentage, 20)
        self.assertEqual(params.symmetry, Symmetry.ROT4)
        self.assertEqual(params.difficulty, Difficulty.EASY)

    def test_decode_unknown_symmetry(self) -> None:
        with self.assertRaisesRegex(InvalidParamsError, "Unknown symmetry type"):
            GameParams.decode("7x7b20s9")

    def test_symmetry_codes(self) -> None:
        for code, symmetry in enumerate(
            (Symmetry.NONE, Symmetry.REF2, Symmetry.ROT2, Symmetry.REF4, Symmetry.ROT4)
        ):
            self.assertEqual(symmetry.code, code)
            self.assertIs(Symmetry.from_code(code), symmetry)


class GameParamsValidationTests(unittest.TestCase):
    def test_minimum_size(self) -> None:
        with self.assertRaisesRegex(InvalidParamsError, "at least 2"):
            GameParams(width=1, height=5).validate(full=False)

    def test_percentage_only_checked_when_full(self) -> None:
        params = GameParams(black_percentage=3)
        params.validate(full=False)
        with self.assertRaisesRegex(InvalidParamsError, "between 5% and 100%"):
            params.validate(full=True)

    def test_four_fold_rotation_needs_square_grid(self) -> None:
        with self.assertRaisesRegex(InvalidParamsError, "square grids"):
            GameParams(width=6, height=5, symmetry=Symmetry.ROT4).validate()
        GameParams(width=6, height=5, symmetry=Symmetry.REF4).validate()

    def test_presets_are_valid(self) -> None:
        for preset in PRESETS:
            preset.validate(full=True)
            self.assertEqual(GameParams.decode(preset.encode()), preset)


class GeneratorConfigTests(unittest.TestCase):
    def test_from_params_round_trip(self) -> None:
        params = GameParams.decode("10x10b30s2r")
        config = GeneratorConfig.from_params(params, seed=4, max_depth=3)
        self.assertEqual(config.seed, 4)
        self.assertEqual(config.max_depth, 3)
        self.assertEqual(config.to_params(), params)
        self.assertEqual(config.to_params(black_percentage=45).black_percentage, 45)

    def test_validate_rejects_bad_limits(self) -> None:
        with self.assertRaises(InvalidParamsError):
            GeneratorConfig(5, 5, max_tries=0).validate()
        with self.assertRaises(InvalidParamsError):
            GeneratorConfig(5, 5, max_depth=-1).validate()
        with self.assertRaises(InvalidParamsError):
            GeneratorConfig(6, 5).validate()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
