import unittest
import numpy as np
from xtalsym.errors import InvalidArgumentError
from xtalsym.fmt.hall import HALL_ROTATIONS, parse_hall_symbol


class HallSymbolTestCase(unittest.TestCase):
    def test_lattice(self):
        hall = parse_hall_symbol("p 1")
        self.assertFalse(hall.centric)
        self.assertEqual(hall.centering, "P")
        self.assertEqual(hall.centering_translations, ())
        self.assertEqual(len(hall.generators), 1)
        self.assertIsNone(hall.origin_shift)

        hall = parse_hall_symbol("-F 4 2 3")
        self.assertTrue(hall.centric)
        self.assertEqual(hall.centering, "F")
        self.assertEqual(len(hall.centering_translations), 3)

    def test_centric_doubles_generators(self):
        hall = parse_hall_symbol("-P 2ac 2n")
        self.assertEqual(len(hall.generators), 4)
        (w1, t1), (w2, t2) = hall.generators[:2]
        np.testing.assert_allclose(w2, -w1)
        np.testing.assert_allclose(t2, t1)

    def test_translation_letters(self):
        hall = parse_hall_symbol("P 2ac 2ab")
        (w1, t1), (w2, t2) = hall.generators
        np.testing.assert_allclose(w1, HALL_ROTATIONS["2Z"])
        np.testing.assert_allclose(t1, [0.5, 0, 0.5])
        np.testing.assert_allclose(w2, HALL_ROTATIONS["2X"])
        np.testing.assert_allclose(t2, [0.5, 0.5, 0])

        # n + a = (1, 1/2, 1/2) is reduced into the unit cell
        (_, t), = parse_hall_symbol("P 2na").generators
        np.testing.assert_allclose(t, [0, 0.5, 0.5])

    def test_default_axes(self):
        generators = parse_hall_symbol("P 3 2").generators
        np.testing.assert_allclose(generators[0][0], HALL_ROTATIONS["3Z"])
        np.testing.assert_allclose(generators[1][0], HALL_ROTATIONS["2'Z"])

        generators = parse_hall_symbol("P 4 2 3").generators
        np.testing.assert_allclose(generators[1][0], HALL_ROTATIONS["2X"])
        np.testing.assert_allclose(generators[2][0], HALL_ROTATIONS["3*"])

        generators = parse_hall_symbol('-R 3 2"c').generators
        np.testing.assert_allclose(generators[2][0], HALL_ROTATIONS['2"Z'])
        np.testing.assert_allclose(generators[2][1], [0, 0, 0.5])

    def test_explicit_axes(self):
        generators = parse_hall_symbol("P 2y").generators
        np.testing.assert_allclose(generators[0][0], HALL_ROTATIONS["2Y"])

        # diacritics refer to the axis of the preceding generator
        generators = parse_hall_symbol("P 2x 2'").generators
        np.testing.assert_allclose(generators[0][0], HALL_ROTATIONS["2X"])
        np.testing.assert_allclose(generators[1][0], HALL_ROTATIONS["2'X"])

    def test_body_diagonal_defaults(self):
        # the second generator after 3* takes the ' axis of Z
        generators = parse_hall_symbol("P 3* 2").generators
        np.testing.assert_allclose(generators[0][0], HALL_ROTATIONS["3*"])
        np.testing.assert_allclose(generators[1][0], HALL_ROTATIONS["2'Z"])

        (w, t), = parse_hall_symbol("P 3* -2n").generators[1:]
        np.testing.assert_allclose(w, -np.array(HALL_ROTATIONS["2'Z"]))
        np.testing.assert_allclose(t, [0.5, 0.5, 0.5])

        # an order 1 generator in third place is the identity along *
        generators = parse_hall_symbol("P 2 2 -1n").generators
        self.assertEqual(len(generators), 3)
        np.testing.assert_allclose(generators[2][0], -np.eye(3))
        np.testing.assert_allclose(generators[2][1], [0.5, 0.5, 0.5])

        (w, t), = parse_hall_symbol("P 1*").generators
        np.testing.assert_allclose(w, np.eye(3))

    def test_improper(self):
        (w, _), = parse_hall_symbol("P -4").generators
        np.testing.assert_allclose(w, -np.array(HALL_ROTATIONS["4Z"]))

    def test_screw(self):
        for symbol, expected in (
            ("P 31", [0, 0, 1 / 3]),
            ("P 32", [0, 0, 2 / 3]),
            ("P 41", [0, 0, 1 / 4]),
            ("P 43", [0, 0, 3 / 4]),
            ("P 61", [0, 0, 1 / 6]),
            ("P 62", [0, 0, 1 / 3]),
            ("P 64", [0, 0, 2 / 3]),
            ("P 65", [0, 0, 5 / 6]),
            ("P 41x", [1 / 4, 0, 0]),
            ("P 61c", [0, 0, 2 / 3]),
        ):
            with self.subTest(symbol=symbol):
                (_, t), = parse_hall_symbol(symbol).generators
                np.testing.assert_allclose(t, expected)

    def test_origin_shift(self):
        hall = parse_hall_symbol("P 2 (1 0 0)")
        np.testing.assert_allclose(hall.origin_shift, [1 / 12, 0, 0])
        (_, t), = hall.generators
        np.testing.assert_allclose(t, [1 / 6, 0, 0])

        hall = parse_hall_symbol("P 61 2 (0 0 -1)")
        np.testing.assert_allclose(hall.generators[0][1], [0, 0, 1 / 6])
        np.testing.assert_allclose(hall.generators[1][1], [0, 0, 5 / 6])

    def test_invalid(self):
        for symbol in (
            "",
            "P",
            "Q 1",
            "P 7",
            "P 21",
            "P 42",
            "P 2q",
            "P 2 3'",
            "P 3*1",
            "P 3* 2'",
            "P 2 (0 0)",
            "P 2 (0 0 x)",
        ):
            with self.subTest(symbol=symbol):
                with self.assertRaises(InvalidArgumentError):
                    parse_hall_symbol(symbol)

    def test_error_names_token(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            parse_hall_symbol("P 2ac 2x7")
        self.assertEqual(ctx.exception.token, "2X7")
