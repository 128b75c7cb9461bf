import logging
from numbers import Number
import numpy as np
from xtalsym.errors import InvalidArgumentError
from xtalsym.fmt.xyz import parse_xyz
from xtalsym.util.num import (
    TOLERANCE,
    gcd,
    is_zero,
    reduce_number_positive,
    rref,
    sign,
)
from xtalsym.util.text import fraction_string

LOG = logging.getLogger(__name__)

AXES = "xyz"

# no crystallographic rotation has order above 6
MAX_ORDER = 24

# arbitrary vector not parallel to any rotation axis, used to find
# the characteristic direction of an operation
_PROBE_VECTOR = np.array((3, 5, 7), dtype=np.float64)

_AXIAL_NORMALS = ((1, 0, 0), (0, 1, 0), (0, 0, 1))
_DIFFERENCE_NORMALS = ((1, -1, 0), (0, 1, -1), (-1, 0, 1))
_SUM_NORMALS = ((1, 1, 0), (0, 1, 1), (1, 0, 1))

_GLIDE_AXES = {
    (1 / 2, 0, 0): "a",
    (0, 1 / 2, 0): "b",
    (0, 0, 1 / 2): "c",
}
_N_GLIDES_AXIAL = ((1 / 2, 1 / 2, 0), (1 / 2, 0, 1 / 2), (0, 1 / 2, 1 / 2))
_N_GLIDES_DIFFERENCE = ((1 / 2, 1 / 2, 1 / 2),)
_N_GLIDES_SUM = ((-1 / 2, 1 / 2, 1 / 2), (1 / 2, -1 / 2, 1 / 2), (1 / 2, 1 / 2, -1 / 2))

_ROTATION_SYMBOLS = {-1: "2", 0: "3", 1: "4", 2: "6"}
_ROTOINVERSION_SYMBOLS = {-2: "-6", -1: "-4", 0: "-3"}


def _vector_in(vector, candidates, tol=TOLERANCE):
    return any(
        np.allclose(vector, c, rtol=0.0, atol=tol) for c in candidates
    )


def _is_quarter(value, tol=TOLERANCE):
    return abs(abs(value) - 0.25) < tol or abs(abs(value) - 0.75) < tol


def _is_d_glide(vector, normal):
    quarters = [_is_quarter(v) for v in vector]
    if _vector_in(normal, _AXIAL_NORMALS):
        zeros = [is_zero(v) for v in vector]
        return sum(zeros) == 1 and sum(quarters) == 2
    if not all(quarters):
        return False
    negatives = sum(v < 0 for v in vector)
    if _vector_in(normal, _DIFFERENCE_NORMALS):
        return negatives <= 1
    if _vector_in(normal, _SUM_NORMALS):
        return 0 < negatives < 3
    return False


def glide_letter(vector, normal) -> str:
    """
    The letter of a glide reflection given its glide vector and the normal
    of its mirror plane.

    Args:
        vector (array_like): (3) glide (intrinsic translation) vector
        normal (array_like): (3) integer normal vector of the plane

    Returns:
        str: one of 'a', 'b', 'c', 'n', 'd' or 'g'
    """
    for axial, letter in _GLIDE_AXES.items():
        if np.allclose(vector, axial, rtol=0.0, atol=TOLERANCE):
            return letter
    if _vector_in(normal, _AXIAL_NORMALS) and _vector_in(vector, _N_GLIDES_AXIAL):
        return "n"
    if _vector_in(normal, _DIFFERENCE_NORMALS) and _vector_in(
        vector, _N_GLIDES_DIFFERENCE
    ):
        return "n"
    if _vector_in(normal, _SUM_NORMALS) and _vector_in(vector, _N_GLIDES_SUM):
        return "n"
    if _is_d_glide(vector, normal):
        return "d"
    return "g"


def _vector_string(vector) -> str:
    return ",".join(fraction_string(x) for x in vector)


def _signed_constant(value, prefix) -> str:
    if is_zero(value):
        return ""
    if value < 0:
        return "-" + fraction_string(-value)
    return ("+" if prefix else "") + fraction_string(value)


class SymmetryOperation:
    """
    Class to represent a crystallographic symmetry operation,
    composed of a rotation and a translation, as a (4, 4) augmented
    matrix acting on fractional coordinates.

    Instances are immutable: the underlying matrix is read-only and
    derived quantities are computed once, on first access.

    Attributes:
        matrix (np.ndarray): (4, 4) augmented matrix
        dimensionality (int): always 3
    """

    dimensionality = 3

    def __init__(self, matrix):
        """
        Construct a new symmetry operation from an augmented matrix

        Arguments:
            matrix (array_like): (4, 4) augmented matrix

        Raises:
            InvalidArgumentError: if the matrix is not (4, 4) or not numeric
        """
        try:
            m = np.array(matrix, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Invalid matrix: {matrix!r}") from e
        n = self.dimensionality + 1
        if m.shape != (n, n):
            raise InvalidArgumentError(
                f"Augmented matrix must have shape ({n}, {n}), got {m.shape}"
            )
        m.setflags(write=False)
        self._matrix = m

    @property
    def matrix(self) -> np.ndarray:
        "The (4, 4) augmented matrix of this SymmetryOperation"
        return self._matrix

    @property
    def seitz_matrix(self) -> np.ndarray:
        "The Seitz matrix form of this SymmetryOperation"
        return self._matrix

    @property
    def rotation(self) -> np.ndarray:
        "The (3, 3) rotation part W"
        return self._matrix[:3, :3]

    @property
    def translation(self) -> np.ndarray:
        "The (3) translation part t"
        return self._matrix[:3, 3]

    @classmethod
    def identity(cls):
        "Alternative constructor for the the identity symop i.e. x,y,z"
        return cls(np.eye(4))

    @classmethod
    def from_array(cls, values):
        """
        Alternative constructor from a nested sequence of numbers.

        Args:
            values (Sequence[Sequence[Number]]): (4, 4) augmented matrix

        Returns:
            SymmetryOperation: a new symmetry operation

        Raises:
            InvalidArgumentError: if the rows are ragged or any entry is not a number
        """
        try:
            rows = [list(row) for row in values]
        except TypeError as e:
            raise InvalidArgumentError(f"Invalid matrix: {values!r}") from e
        for row in rows:
            for value in row:
                if isinstance(value, bool) or not isinstance(value, Number):
                    raise InvalidArgumentError(
                        f"Non-numeric matrix entry {value!r}", token=str(value)
                    )
        if len({len(row) for row in rows}) > 1:
            raise InvalidArgumentError("Matrix rows have different lengths")
        return cls(rows)

    @classmethod
    def from_rotation_and_translation(cls, rotation, translation):
        """
        Alternative constructor from a rotation matrix and a
        translation vector.

        Args:
            rotation (array_like): (3, 3) rotation matrix
            translation (array_like): (3) translation vector

        Returns:
            SymmetryOperation: a new symmetry operation
        """
        rotation = np.asarray(rotation, dtype=np.float64)
        translation = np.asarray(translation, dtype=np.float64)
        n = cls.dimensionality
        if rotation.shape != (n, n) or translation.shape != (n,):
            raise InvalidArgumentError(
                f"Expected ({n}, {n}) rotation and ({n}) translation, "
                f"got {rotation.shape} and {translation.shape}"
            )
        m = np.eye(n + 1)
        m[:n, :n] = rotation
        m[:n, n] = translation
        return cls(m)

    @classmethod
    def from_xyz(cls, code: str):
        """
        Alternative constructor from the algebraic form
        of a symmetry operation e.g. '-y+1/2,x-y,z+1/3'.

        Constant terms are reduced into (-1, 1), keeping their sign.

        Args:
            code (str): algebraic form of the symmetry operation

        Returns:
            SymmetryOperation: a new symmetry operation

        Raises:
            InvalidArgumentError: if the string cannot be parsed
        """
        return cls.from_rotation_and_translation(*parse_xyz(code))

    def to_xyz(self) -> str:
        """
        The algebraic form of this operation, e.g. '-y,x-y,z+1/3'.
        Coefficients other than +-1 and the constant are written
        as (mixed) fractions.

        Returns:
            str: the encoded symmetry operation
        """
        if not hasattr(self, "_xyz"):
            terms = []
            for row in self._matrix[:3]:
                term = ""
                for axis, c in zip(AXES, row[:3]):
                    if is_zero(c):
                        continue
                    term += "-" if c < 0 else "+"
                    if not is_zero(abs(c) - 1):
                        term += fraction_string(abs(c))
                    term += axis
                term += _signed_constant(row[3], True)
                terms.append(term.lstrip("+"))
            setattr(self, "_xyz", ",".join(terms).rstrip(","))
        return getattr(self, "_xyz")

    def product(self, other):
        """
        Compose this operation with another, i.e. apply `other` first
        and then this operation. The translation of the result is
        reduced into [0, 1).

        Args:
            other (SymmetryOperation): the operation applied first

        Returns:
            SymmetryOperation: the composed operation
        """
        if other.dimensionality != self.dimensionality:
            raise InvalidArgumentError(
                f"Cannot multiply operations of dimensionality "
                f"{self.dimensionality} and {other.dimensionality}"
            )
        m = self._matrix @ other.matrix
        for i in range(self.dimensionality):
            m[i, 3] = reduce_number_positive(m[i, 3])
        return SymmetryOperation(m)

    def __matmul__(self, other):
        return self.product(other)

    @property
    def powers(self):
        "The powers W^0 = I, W, W^2, ..., W^(n-1) of the rotation part"
        if not hasattr(self, "_powers"):
            identity = np.eye(3)
            powers = [identity]
            w = self.rotation.copy()
            while not np.allclose(w, identity, rtol=0.0, atol=TOLERANCE):
                if len(powers) >= MAX_ORDER:
                    raise InvalidArgumentError(
                        f"Rotation part of {self} has no finite order "
                        f"(tried {MAX_ORDER} powers)"
                    )
                powers.append(w)
                w = w @ self.rotation
            setattr(self, "_powers", powers)
        return getattr(self, "_powers")

    @property
    def order(self) -> int:
        "The order n of the rotation part, i.e. the smallest n with W^n = I"
        return len(self.powers)

    @property
    def determinant(self) -> float:
        "The determinant of the rotation part"
        if not hasattr(self, "_determinant"):
            setattr(self, "_determinant", float(np.linalg.det(self.rotation)))
        return getattr(self, "_determinant")

    @property
    def trace(self) -> float:
        "The trace of the rotation part"
        return float(np.trace(self.rotation))

    def _power_sum(self, alternating=False):
        if alternating:
            return sum((-1) ** k * w for k, w in enumerate(self.powers))
        return sum(self.powers)

    @property
    def intrinsic_translation(self) -> np.ndarray:
        """
        The intrinsic (screw or glide) part of the translation,
        (1/n) (I + W + ... + W^(n-1)) t
        """
        if not hasattr(self, "_intrinsic_translation"):
            w = self._power_sum() @ self.translation / self.order
            w[np.abs(w) < TOLERANCE] = 0.0
            w.setflags(write=False)
            setattr(self, "_intrinsic_translation", w)
        return getattr(self, "_intrinsic_translation")

    @property
    def location(self) -> np.ndarray:
        "The location part of the translation, t minus the intrinsic translation"
        if not hasattr(self, "_location"):
            loc = self.translation - self.intrinsic_translation
            loc.setflags(write=False)
            setattr(self, "_location", loc)
        return getattr(self, "_location")

    @property
    def characteristic_axis(self) -> np.ndarray:
        """
        Integer direction of the rotation axis (or of the plane normal for
        reflections), with the sign convention of the International Tables
        for three-fold axes.
        """
        if not hasattr(self, "_characteristic_axis"):
            y = self._power_sum(alternating=self.determinant < 0)
            u = np.rint(y @ _PROBE_VECTOR).astype(int)
            divisor = gcd(gcd(int(u[0]), int(u[1])), int(u[2]))
            if divisor != 0:
                u = u // divisor
            if is_zero(self.trace) and np.count_nonzero(u < 0) == 1:
                u = -u
            u.setflags(write=False)
            setattr(self, "_characteristic_axis", u)
        return getattr(self, "_characteristic_axis")

    @property
    def orientation_matrix(self) -> np.ndarray:
        "Matrix [u | x | Wx] whose determinant gives the sense of rotation"
        if not hasattr(self, "_orientation_matrix"):
            u = self.characteristic_axis.astype(np.float64)
            x = np.array((1.0, 0.0, 0.0))
            if np.allclose(np.cross(x, u), 0.0):
                x = np.array((0.0, 1.0, 0.0))
            wx = self.rotation @ x
            if self.determinant < 0:
                wx = -wx
            z = np.column_stack((u, x, wx))
            setattr(self, "_orientation_matrix", z)
        return getattr(self, "_orientation_matrix")

    @property
    def rotation_sense(self) -> str:
        "'+' or '-' for rotations of order above 2, otherwise ''"
        if self.order <= 2:
            return ""
        return "-" if np.linalg.det(self.orientation_matrix) < 0 else "+"

    def fixed_points_matrix(self, use_location=False) -> np.ndarray:
        """
        Row reduced augmented matrix [W - I | -t] of the linear system
        whose solutions are the points left in place by this operation
        (or, with `use_location`, by its location part alone).

        Args:
            use_location (bool, optional): solve with the location part
                instead of the full translation

        Returns:
            np.ndarray: (3, 4) matrix in reduced row echelon form
        """
        t = self.location if use_location else self.translation
        system = np.hstack((self.rotation - np.eye(3), -t[:, np.newaxis]))
        return rref(system)

    def _fixed_point(self, use_location):
        # particular solution: each pivot variable takes the constant of its row,
        # free variables are zero
        point = np.zeros(3)
        for row in self.fixed_points_matrix(use_location):
            nonzero = np.flatnonzero(row[:3])
            if len(nonzero) > 0:
                point[nonzero[0]] = row[3]
        return point

    def _point_location(self, use_location=False):
        return _vector_string(self.fixed_points_matrix(use_location)[:, 3])

    def _line_location(self, use_location=False):
        u = self.characteristic_axis
        point = self._fixed_point(use_location)
        nonzero = np.flatnonzero(u)
        last = nonzero[-1]
        letter = AXES[nonzero[0]]
        # slide along the axis so that the last coordinate has no constant
        if not is_zero(point[2]):
            term = point[last] if u[last] < 0 else -point[last]
            point[last] = 0.0
            for i in range(last):
                if u[i] != 0:
                    point[i] += term * sign(u[i])
        coordinates = []
        for i in range(3):
            c = ""
            if u[i] != 0:
                c = ("-" if u[i] < 0 else "") + letter
            c += _signed_constant(point[i], c)
            coordinates.append(c or "0")
        return ",".join(coordinates)

    def _plane_location(self, use_location=False):
        coordinates = list(AXES)
        for row in self.fixed_points_matrix(use_location):
            axes = np.flatnonzero(row[:3])
            if len(axes) == 1:
                coordinates[axes[0]] = fraction_string(row[3])
            elif len(axes) == 2:
                a0, a1 = axes
                c = row[a1]
                if is_zero(abs(c) - 1):
                    coordinates[a0] += _signed_constant(row[3], True)
                    if a0 == 0 and a1 == 2 and c > 0:
                        coordinates[2] = "x"
                        coordinates[0] = "-x" + _signed_constant(row[3], True)
                    else:
                        coordinates[a1] = ("-" if c > 0 else "") + AXES[a0]
                else:
                    if abs(c) > 1:
                        coordinates[a0] = fraction_string(abs(c)) + AXES[a0]
                        coordinates[a1] = ("-" if c > 0 else "") + AXES[a0]
                    else:
                        coordinates[a1] = fraction_string(-1 / c) + AXES[a0]
                    coordinates[a0] += _signed_constant(row[3], True)
        return ",".join(coordinates)

    def to_symbol(self) -> str:
        """
        The geometric symbol of this operation in the notation of the
        International Tables Vol. A, e.g. '2(0,0,1/2) 1/4,0,z',
        'n(1/2,1/2,0) x,y,1/4' or '-4+ 0,0,z; 0,0,0'.

        Returns:
            str: the symbol

        Raises:
            RuntimeError: if the rotation part is not a crystallographic one
        """
        if not hasattr(self, "_symbol"):
            setattr(self, "_symbol", self._derive_symbol())
        return getattr(self, "_symbol")

    def _derive_symbol(self):
        trace = round(self.trace)
        if not is_zero(self.trace - trace) or not is_zero(abs(self.determinant) - 1):
            raise RuntimeError(f"{self} is not a crystallographic symmetry operation")
        intrinsic = self.intrinsic_translation
        has_intrinsic = not np.allclose(intrinsic, 0.0, rtol=0.0, atol=TOLERANCE)
        screw = f"({_vector_string(intrinsic)})" if has_intrinsic else ""

        if self.determinant > 0:
            if trace == 3:
                if np.allclose(self.translation, 0.0, rtol=0.0, atol=TOLERANCE):
                    return "1"
                return f"t ({_vector_string(intrinsic)})"
            if trace in _ROTATION_SYMBOLS:
                return "{}{}{} {}".format(
                    _ROTATION_SYMBOLS[trace],
                    self.rotation_sense,
                    screw,
                    self._line_location(use_location=True),
                )
        else:
            if trace == -3:
                return f"-1 ({self._point_location()})"
            if trace == 1:
                if not has_intrinsic:
                    return f"m {self._plane_location()}"
                letter = glide_letter(intrinsic, self.characteristic_axis)
                glide = screw if letter in ("g", "n", "d") else ""
                return f"{letter}{glide} {self._plane_location(use_location=True)}"
            if trace in _ROTOINVERSION_SYMBOLS:
                return "{}{}{} {}; {}".format(
                    _ROTOINVERSION_SYMBOLS[trace],
                    self.rotation_sense,
                    screw,
                    self._line_location(use_location=True),
                    self._point_location(use_location=True),
                )
        raise RuntimeError(f"No symbol for {self} (det={self.determinant}, trace={trace})")

    def is_identity(self) -> bool:
        "Returns true if this is the identity symmetry operation 'x,y,z'"
        return np.allclose(self._matrix, np.eye(4), rtol=0.0, atol=TOLERANCE)

    def inverted(self):
        """
        A copy of this symmetry operation under inversion
        through the origin, with translation reduced into [0, 1).

        Returns:
            SymmetryOperation: an inverted copy of this symmetry operation
        """
        inversion = SymmetryOperation.from_rotation_and_translation(
            -np.eye(3), np.zeros(3)
        )
        return inversion.product(self)

    def apply(self, coordinates: np.ndarray) -> np.ndarray:
        """
        Apply this symmetry operation to a set of fractional coordinates.

        Args:
            coordinates (np.ndarray): (N,3) or (N,4) array of fractional coordinates or homogeneous
                fractional coordinates.

        Returns:
            np.ndarray: (N, 3) array of transformed coordinates
        """
        if coordinates.shape[1] == 4:
            return np.dot(coordinates, self._matrix.T)
        else:
            return np.dot(coordinates, self.rotation.T) + self.translation

    def __call__(self, coordinates):
        return self.apply(coordinates)

    def __str__(self):
        return self.to_xyz()

    def __repr__(self):
        return "<{}: {}>".format(self.__class__.__name__, self)

    def __eq__(self, other):
        if not isinstance(other, SymmetryOperation):
            return NotImplemented
        return np.allclose(self._matrix, other.matrix, rtol=0.0, atol=TOLERANCE)

    __hash__ = None
