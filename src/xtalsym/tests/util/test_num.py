import unittest
import numpy as np
from xtalsym.crystal import SymmetryOperation
from xtalsym.util.num import (
    gcd,
    is_rotation_part_in_list,
    reduce_number,
    reduce_number_positive,
    rref,
    sign,
)


class ReduceNumberTestCase(unittest.TestCase):
    def test_reduce_number_positive(self):
        for value, expected in (
            (1, 0),
            (-1, 0),
            (0, 0),
            (2, 0),
            (-2, 0),
            (0.7, 0.7),
            (-0.7, 0.3),
            (1.7, 0.7),
            (-1.7, 0.3),
        ):
            with self.subTest(value=value):
                self.assertAlmostEqual(reduce_number_positive(value), expected)

    def test_reduce_number(self):
        for value, expected in (
            (1, 0),
            (-1, 0),
            (0, 0),
            (2, 0),
            (-2, 0),
            (0.7, 0.7),
            (-0.7, -0.7),
            (1.7, 0.7),
            (-1.7, -0.7),
        ):
            with self.subTest(value=value):
                self.assertAlmostEqual(reduce_number(value), expected)

    def test_snapping(self):
        self.assertEqual(reduce_number_positive(1 - 1e-10), 0.0)
        self.assertEqual(reduce_number_positive(-1e-10), 0.0)
        self.assertEqual(reduce_number(-1 + 1e-10), 0.0)
        self.assertLess(reduce_number_positive(1 - 1e-4), 1.0)

    def test_idempotent(self):
        for value in (
            -3.25,
            -0.5,
            0.0,
            0.125,
            2.75,
            -1.5e-8,
            1 - 1e-9,
            -2 + 1e-9,
            1 + 1e-9,
            -1 - 5e-9,
        ):
            with self.subTest(value=value):
                once = reduce_number_positive(value)
                self.assertGreaterEqual(once, 0.0)
                self.assertLess(once, 1.0)
                self.assertEqual(reduce_number_positive(once), once)
                once = reduce_number(value)
                self.assertGreater(once, -1.0)
                self.assertLess(once, 1.0)
                self.assertEqual(reduce_number(once), once)


class RotationPartTestCase(unittest.TestCase):
    symops = [SymmetryOperation.from_xyz(x) for x in ("x,y,z", "-x,-y,z")]

    def test_found(self):
        for code in ("x,y,z", "x,y,z+1/2", "-x+1/4,-y,z"):
            with self.subTest(code=code):
                self.assertTrue(
                    is_rotation_part_in_list(SymmetryOperation.from_xyz(code), self.symops)
                )

    def test_not_found(self):
        for code in ("-x,y,-z", "-x,-y,-z", "y,x,z"):
            with self.subTest(code=code):
                self.assertFalse(
                    is_rotation_part_in_list(SymmetryOperation.from_xyz(code), self.symops)
                )
        self.assertFalse(is_rotation_part_in_list(self.symops[0], []))


class HelpersTestCase(unittest.TestCase):
    def test_gcd_keeps_sign(self):
        self.assertEqual(gcd(12, 18), 6)
        self.assertEqual(gcd(10, 0), 10)
        self.assertEqual(gcd(0, -2), -2)
        self.assertEqual(gcd(-2, 2), -2)
        self.assertEqual(gcd(10, -10), 10)
        self.assertEqual(gcd(0, 0), 0)

    def test_sign(self):
        self.assertEqual(sign(-0.5), -1)
        self.assertEqual(sign(0), 0)
        self.assertEqual(sign(np.int64(3)), 1)

    def test_rref(self):
        np.testing.assert_allclose(rref([[2, 4], [1, 3]]), np.eye(2))
        np.testing.assert_allclose(
            rref([[1, 2, 3], [2, 4, 6]]), [[1, 2, 3], [0, 0, 0]]
        )
        np.testing.assert_allclose(
            rref([[0, 0, 0, 0], [0, -2, 0, -0.5], [0, 0, -2, 0]]),
            [[0, 1, 0, 0.25], [0, 0, 1, 0], [0, 0, 0, 0]],
        )
