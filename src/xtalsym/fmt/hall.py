"""
Hall space group symbols, e.g. `-P 2ac 2n` or `P 61 2 (0 0 -1)`.

A Hall symbol names a lattice centering and a small set of generating
operations, from which the full group is obtained by closure. See
S. R. Hall, Acta Cryst. A37 (1981) 517-525.
"""
import logging
from collections import namedtuple
import numpy as np
import pyparsing as pp
from xtalsym.errors import InvalidArgumentError
from xtalsym.fmt.centering import CENTERING_TRANSLATIONS
from xtalsym.util.num import reduce_number_positive

LOG = logging.getLogger(__name__)

HALL_ROTATIONS = {
    "1X": ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
    "1Y": ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
    "1Z": ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
    "2X": ((1, 0, 0), (0, -1, 0), (0, 0, -1)),
    "2Y": ((-1, 0, 0), (0, 1, 0), (0, 0, -1)),
    "2Z": ((-1, 0, 0), (0, -1, 0), (0, 0, 1)),
    "3X": ((1, 0, 0), (0, 0, -1), (0, 1, -1)),
    "3Y": ((-1, 0, 1), (0, 1, 0), (-1, 0, 0)),
    "3Z": ((0, -1, 0), (1, -1, 0), (0, 0, 1)),
    "4X": ((1, 0, 0), (0, 0, -1), (0, 1, 0)),
    "4Y": ((0, 0, 1), (0, 1, 0), (-1, 0, 0)),
    "4Z": ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
    "6X": ((1, 0, 0), (0, 1, -1), (0, 1, 0)),
    "6Y": ((0, 0, 1), (0, 1, 0), (-1, 0, 1)),
    "6Z": ((1, -1, 0), (1, 0, 0), (0, 0, 1)),
    # two-fold axes along face diagonals, ' and " after the reference axis
    "2'X": ((-1, 0, 0), (0, 0, -1), (0, -1, 0)),
    '2"X': ((-1, 0, 0), (0, 0, 1), (0, 1, 0)),
    "2'Y": ((0, 0, -1), (0, -1, 0), (-1, 0, 0)),
    '2"Y': ((0, 0, 1), (0, -1, 0), (1, 0, 0)),
    "2'Z": ((0, -1, 0), (-1, 0, 0), (0, 0, -1)),
    '2"Z': ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
    # body diagonal
    "1*": ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
    "3*": ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
}

HALL_TRANSLATIONS = {
    "A": (1 / 2, 0, 0),
    "B": (0, 1 / 2, 0),
    "C": (0, 0, 1 / 2),
    "N": (1 / 2, 1 / 2, 1 / 2),
    "U": (1 / 4, 0, 0),
    "V": (0, 1 / 4, 0),
    "W": (0, 0, 1 / 4),
    "D": (1 / 4, 1 / 4, 1 / 4),
}

# (order, screw digit) -> fraction of a lattice vector along the axis
SCREW_TRANSLATIONS = {
    ("3", "1"): 1 / 3,
    ("3", "2"): 2 / 3,
    ("4", "1"): 1 / 4,
    ("4", "3"): 3 / 4,
    ("6", "1"): 1 / 6,
    ("6", "2"): 1 / 3,
    ("6", "4"): 2 / 3,
    ("6", "5"): 5 / 6,
}

HallSymbol = namedtuple(
    "HallSymbol",
    "centric centering centering_translations generators origin_shift",
)


class HallSymbolParser:
    def __init__(self):
        Minus = pp.Literal("-")
        self.lattice = (
            pp.Opt(Minus)("centric") + pp.Char("".join(CENTERING_TRANSLATIONS))("centering")
        ).leave_whitespace()
        self.generator = (
            pp.Opt(Minus)("improper")
            + pp.Char("12346")("order")
            + pp.Opt(pp.Char("12345"))("screw")
            + pp.Opt(pp.Char("XYZ*'\""))("axis")
            + pp.Opt(pp.Word("".join(HALL_TRANSLATIONS)))("translations")
        ).leave_whitespace()
        Integer = pp.Regex(r"[+-]?\d+").set_parse_action(lambda toks: int(toks[0]))
        self.origin_shift = (
            pp.Suppress("(") + Integer * 3 + pp.Suppress(")")
        )

    def _parse_token(self, element, token, s, what):
        try:
            return element.parse_string(token, parse_all=True)
        except pp.ParseException as e:
            raise InvalidArgumentError(
                f"Invalid {what} '{token}' in Hall symbol '{s}' "
                f"(column {e.col}: {e.msg})",
                token=token,
            ) from e

    def _rotation_key(self, index, order, axis, previous_order, previous_axis):
        if index == 0:
            return order + (axis or "Z"), axis or "Z"
        if axis in ("'", '"'):
            return order + axis + previous_axis, previous_axis
        if axis:
            return order + axis, axis
        if index == 1:
            if previous_order in ("2", "4"):
                return order + "X", "X"
            # a body-diagonal axis has no diacritic variants, fall back to Z
            reference = previous_axis if previous_axis in "XYZ" else "Z"
            return order + "'" + reference, reference
        return order + "*", "*"

    def _generator(self, index, token, s, previous):
        g = self._parse_token(self.generator, token, s, "generator")
        order = g["order"]
        axis = g.get("axis", "")
        key, resolved_axis = self._rotation_key(index, order, axis, *previous)
        if key not in HALL_ROTATIONS:
            raise InvalidArgumentError(
                f"Unknown rotation '{key}' for generator '{token}' in Hall symbol '{s}'",
                token=token,
            )
        rotation = np.array(HALL_ROTATIONS[key], dtype=np.float64)
        if g.get("improper"):
            rotation = -rotation

        translation = np.zeros(3, dtype=np.float64)
        screw = g.get("screw")
        if screw:
            if (order, screw) not in SCREW_TRANSLATIONS:
                raise InvalidArgumentError(
                    f"Invalid screw component '{order}{screw}' in Hall symbol '{s}'",
                    token=token,
                )
            if key[1:] not in ("X", "Y", "Z"):
                raise InvalidArgumentError(
                    f"Screw component requires a principal axis, got '{key}' "
                    f"in Hall symbol '{s}'",
                    token=token,
                )
            translation["XYZ".index(key[1:])] = SCREW_TRANSLATIONS[(order, screw)]
        for letter in g.get("translations", ""):
            translation += HALL_TRANSLATIONS[letter]
        translation = np.array([reduce_number_positive(t) for t in translation])
        return rotation, translation, (order, resolved_axis)

    def parse(self, s):
        text = s.strip().upper()
        text, paren, shift_text = text.partition("(")
        tokens = text.split()
        if len(tokens) < 2:
            raise InvalidArgumentError(
                f"Hall symbol '{s}' needs a lattice symbol and at least one generator",
                token=s,
            )
        lattice = self._parse_token(self.lattice, tokens[0], s, "lattice symbol")
        centric = bool(lattice.get("centric"))
        centering = lattice["centering"]

        generators = []
        previous = ("", "Z")
        for index, token in enumerate(tokens[1:]):
            rotation, translation, previous = self._generator(index, token, s, previous)
            generators.append((rotation, translation))
            if centric:
                generators.append((-rotation, translation.copy()))

        origin_shift = None
        if paren:
            shift = self._parse_token(self.origin_shift, paren + shift_text, s, "origin shift")
            origin_shift = np.array(list(shift), dtype=np.float64) / 12
            generators = [
                (
                    w,
                    np.array(
                        [
                            reduce_number_positive(x)
                            for x in t + origin_shift - w @ origin_shift
                        ]
                    ),
                )
                for w, t in generators
            ]
        LOG.debug("Hall symbol '%s': %d generators", s, len(generators))
        return HallSymbol(
            centric,
            centering,
            CENTERING_TRANSLATIONS[centering],
            generators,
            origin_shift,
        )


_DEFAULT_PARSER = HallSymbolParser()


def parse_hall_symbol(s):
    """
    Parse a Hall space group symbol into its lattice centering and
    generating operations.

    The first generator defaults to an axis along z, the second to x
    when it follows a 2- or 4-fold and otherwise to a face diagonal
    perpendicular to the preceding axis, and later ones to the body
    diagonal. A leading `-` on the lattice symbol adds the inverted copy
    of each generator. An optional trailing `(vx vy vz)` shifts the
    origin by the given vector in twelfths.

    Args:
        s (str): the Hall symbol, case insensitive

    Returns:
        HallSymbol: namedtuple of (centric, centering, centering_translations,
            generators, origin_shift) with generators as (rotation, translation)
            numpy array pairs

    Raises:
        InvalidArgumentError: if the symbol is malformed
    """
    return _DEFAULT_PARSER.parse(s)
