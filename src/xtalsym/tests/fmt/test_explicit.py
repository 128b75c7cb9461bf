import unittest
import numpy as np
from xtalsym.errors import InvalidArgumentError
from xtalsym.fmt.explicit import EXPLICIT_ROTATIONS, parse_explicit_symbol


class ExplicitSymbolTestCase(unittest.TestCase):
    def test_header(self):
        explicit = parse_explicit_symbol("pan$p1a000")
        self.assertEqual(explicit.centering, "P")
        self.assertEqual(explicit.centering_translations, ())
        (w, t), = explicit.generators
        np.testing.assert_allclose(w, np.eye(3))
        np.testing.assert_allclose(t, np.zeros(3))

        explicit = parse_explicit_symbol("FCN$P2C000$P2B000$P3Q000$I2E666")
        self.assertEqual(explicit.centering, "F")
        self.assertEqual(len(explicit.centering_translations), 3)
        self.assertEqual(len(explicit.generators), 4)

    def test_improper(self):
        (w, _), = parse_explicit_symbol("PAC$I1A000").generators
        np.testing.assert_allclose(w, -np.eye(3))
        (w, t), = parse_explicit_symbol("FCN$I2E666").generators
        np.testing.assert_allclose(w, -np.array(EXPLICIT_ROTATIONS["2E"]))
        np.testing.assert_allclose(t, [0.5, 0.5, 0.5])

    def test_twelfths(self):
        for code, expected in (
            ("P4C693", [1 / 2, 3 / 4, 1 / 4]),
            ("P4C393", [1 / 4, 3 / 4, 1 / 4]),
            ("P2C005", [0, 0, 5 / 6]),
            ("P2C048", [0, 1 / 3, 2 / 3]),
        ):
            with self.subTest(code=code):
                (_, t), = parse_explicit_symbol("PMC$" + code).generators
                np.testing.assert_allclose(t, expected)

    def test_invalid(self):
        for symbol in (
            "",
            "PAN",
            "PAN$",
            "QAN$P1A000",
            "PA$P1A000",
            "PANX$P1A000",
            "PAN$P1Z000",
            "PAN$X1A000",
            "PAN$P5A000",
            "PAN$P1A00",
            "PAN$P1A0000",
        ):
            with self.subTest(symbol=symbol):
                with self.assertRaises(InvalidArgumentError):
                    parse_explicit_symbol(symbol)

    def test_error_names_token(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            parse_explicit_symbol("PMC$P2C000$P2X000")
        self.assertEqual(ctx.exception.token, "P2X000")
