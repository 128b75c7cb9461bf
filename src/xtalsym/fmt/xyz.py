import logging
from fractions import Fraction
import numpy as np
import pyparsing as pp
from xtalsym.errors import InvalidArgumentError
from xtalsym.util.num import reduce_number

LOG = logging.getLogger(__name__)

AXES = "xyz"


def _rational(toks):
    text = toks[0]
    try:
        if " " in text:
            whole, rest = text.split(maxsplit=1)
            return Fraction(int(whole)) + Fraction(rest)
        return Fraction(text)
    except ZeroDivisionError as e:
        raise InvalidArgumentError(f"Zero denominator in '{text}'", token=text) from e


class XYZParser:
    """
    Parser for symmetry operations in the algebraic form used by the
    International Tables and CIF files, e.g. `-y+1/2,x-y,z+2/3`.

    Each of the three comma separated terms is a sum of signed monomials,
    either `[coefficient]axis` or a bare rational constant. Rationals may
    be integers, fractions (`1/3`), decimals (`0.25`) or mixed numbers
    (`2 1/3`).
    """

    def __init__(self):
        Sign = pp.one_of("+ -")
        Rational = pp.Regex(r"\d+\s+\d+/\d+|\d+/\d+|\d*\.\d+|\d+\.?").set_parse_action(
            _rational
        )
        Axis = pp.one_of("x y z")
        Variable = pp.Opt(Rational("coefficient")) + Axis("axis")
        Constant = Rational("constant")
        Leading = pp.Group(pp.Opt(Sign("sign")) + (Variable | Constant))
        Trailing = pp.Group(Sign("sign") + (Variable | Constant))
        self.parser = Leading + pp.ZeroOrMore(Trailing)

    def parse_term(self, term):
        """
        Parse one of the three terms of an xyz string.

        Args:
            term (str): e.g. `-x+y+1/2`

        Returns:
            Tuple[np.ndarray, float]: (3) row of the rotation matrix and
                the (unreduced) translation component
        """
        row = np.zeros(3, dtype=np.float64)
        constant = None
        seen = set()
        try:
            monomials = self.parser.parse_string(term, parse_all=True)
        except pp.ParseException as e:
            raise InvalidArgumentError(
                f"Invalid term '{term}' at column {e.col}: {e.msg}", token=term
            ) from e
        for monomial in monomials:
            factor = -1 if monomial.get("sign") == "-" else 1
            if "axis" in monomial:
                axis = monomial["axis"]
                if axis in seen:
                    raise InvalidArgumentError(
                        f"Axis '{axis}' given twice in term '{term}'", token=term
                    )
                seen.add(axis)
                coefficient = monomial.get("coefficient", Fraction(1))
                row[AXES.index(axis)] = float(factor * coefficient)
            else:
                if constant is not None:
                    raise InvalidArgumentError(
                        f"More than one constant in term '{term}'", token=term
                    )
                constant = factor * monomial["constant"]
        return row, float(constant or 0)

    def parse(self, s):
        terms = s.lower().split(",")
        if len(terms) != len(AXES):
            raise InvalidArgumentError(
                f"Expected {len(AXES)} comma separated terms in '{s}', found {len(terms)}",
                token=s,
            )
        rotation = np.zeros((3, 3), dtype=np.float64)
        translation = np.zeros(3, dtype=np.float64)
        for i, term in enumerate(terms):
            rotation[i], constant = self.parse_term(term.strip())
            translation[i] = reduce_number(constant)
        LOG.debug("Parsed '%s'", s)
        return rotation, translation


_DEFAULT_PARSER = XYZParser()


def parse_xyz(s):
    """
    Decode a symmetry operation represented in the algebraic
    form e.g. 'x-y, x, z+1/6' into a rotation matrix and translation
    vector. The translation is reduced into (-1, 1) keeping its sign.

    Args:
        s (str): the encoded symmetry operation string

    Returns:
        Tuple[np.ndarray, np.ndarray]: a (3,3) rotation matrix and a (3) translation vector

    Raises:
        InvalidArgumentError: if the string is not a valid operation
    """
    return _DEFAULT_PARSER.parse(s)
