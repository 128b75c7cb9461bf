import math
import numpy as np
from numbers import Number

# absolute tolerance used by every comparison and reduction in the package
TOLERANCE = 1e-8


def is_zero(value: Number, tol: float = TOLERANCE) -> bool:
    "Returns true if `value` is within `tol` of zero"
    return abs(value) < tol


def sign(value: Number) -> int:
    "The sign of `value` as an integer in {-1, 0, 1}"
    return int(value > 0) - int(value < 0)


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor which, unlike `math.gcd`, keeps the sign
    the Euclidean iteration arrives at. Remainders truncate toward zero.

    >>> gcd(0, -2)
    -2
    >>> gcd(-2, 2)
    -2
    >>> gcd(10, -10)
    10

    Args:
        a (int): first operand
        b (int): second operand

    Returns:
        int: the signed greatest common divisor, 0 if both operands are 0
    """
    while a != 0:
        a, b = int(math.fmod(b, a)), a
    return b


def _snap_to_integer(value: float, tol: float) -> float:
    s = sign(value)
    if math.trunc(value) != math.trunc(value + s * tol):
        value = float(math.trunc(value + s * tol))
    return value


def reduce_number_positive(value: Number, tol: float = TOLERANCE) -> float:
    """
    Reduce a number into the half-open interval [0, 1).

    Values within `tol` of an integer are first snapped to that integer,
    so that e.g. 0.9999999999 becomes 0 rather than staying just below 1.

    >>> reduce_number_positive(1.75)
    0.75
    >>> reduce_number_positive(-0.25)
    0.75

    Args:
        value (Number): the number to reduce
        tol (float, optional): snapping tolerance

    Returns:
        float: the reduced number, 0 <= result < 1
    """
    value = _snap_to_integer(float(value), tol)
    if value >= 1:
        value -= math.trunc(value)
    elif value < 0:
        if abs(value - math.trunc(value)) < tol:
            return 0.0
        value -= math.trunc(value) - 1
    return value + 0.0


def reduce_number(value: Number, tol: float = TOLERANCE) -> float:
    """
    Reduce a number into the open interval (-1, 1), preserving its sign.

    >>> reduce_number(-1.75)
    -0.75

    Args:
        value (Number): the number to reduce
        tol (float, optional): snapping tolerance

    Returns:
        float: the reduced number, -1 < result < 1
    """
    value = _snap_to_integer(float(value), tol)
    if value >= 1 or value <= -1:
        value -= math.trunc(value)
    return value + 0.0


def is_rotation_part_in_list(symop, symops, tol: float = TOLERANCE) -> bool:
    """
    Check whether an operation with the same rotation part as `symop`
    is already present in `symops`. Translations are ignored.

    Args:
        symop (SymmetryOperation): the operation to look for
        symops (Iterable[SymmetryOperation]): operations to search
        tol (float, optional): absolute tolerance on matrix entries

    Returns:
        bool: `True` if a matching rotation part was found
    """
    for other in symops:
        if np.allclose(symop.rotation, other.rotation, rtol=0.0, atol=tol):
            return True
    return False


def rref(matrix, tol: float = TOLERANCE) -> np.ndarray:
    """
    Reduced row echelon form of a matrix via Gauss-Jordan elimination
    with partial pivoting. Entries smaller than `tol` are treated (and
    returned) as exact zeros.

    Args:
        matrix (array_like): (M, N) matrix
        tol (float, optional): magnitude below which an entry counts as zero

    Returns:
        np.ndarray: (M, N) matrix in reduced row echelon form
    """
    m = np.array(matrix, dtype=np.float64)
    rows, cols = m.shape
    pivot_row = 0
    for col in range(cols):
        if pivot_row >= rows:
            break
        pivot = pivot_row + int(np.argmax(np.abs(m[pivot_row:, col])))
        if abs(m[pivot, col]) < tol:
            m[pivot_row:, col] = 0.0
            continue
        if pivot != pivot_row:
            m[[pivot_row, pivot]] = m[[pivot, pivot_row]]
        m[pivot_row] /= m[pivot_row, col]
        for r in range(rows):
            if r != pivot_row and m[r, col] != 0.0:
                m[r] -= m[r, col] * m[pivot_row]
        pivot_row += 1
    m[np.abs(m) < tol] = 0.0
    return m + 0.0
