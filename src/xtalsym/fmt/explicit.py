"""
Explicit space group symbols as used in International Tables Vol. B,
e.g. `PMC$P2C000$I1A000`: a three letter header whose first letter is
the lattice centering, followed by `$`-separated generators.

Each generator is `P` (proper) or `I` (improper, i.e. rotation composed
with inversion), a two character rotation code, and three digits giving
the translation in twelfths.
"""
import logging
from collections import namedtuple
import numpy as np
import pyparsing as pp
from xtalsym.errors import InvalidArgumentError
from xtalsym.fmt.centering import CENTERING_TRANSLATIONS

LOG = logging.getLogger(__name__)

EXPLICIT_ROTATIONS = {
    "1A": ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
    "2A": ((1, 0, 0), (0, -1, 0), (0, 0, -1)),
    "2B": ((-1, 0, 0), (0, 1, 0), (0, 0, -1)),
    "2C": ((-1, 0, 0), (0, -1, 0), (0, 0, 1)),
    "2D": ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
    "2E": ((0, -1, 0), (-1, 0, 0), (0, 0, -1)),
    "2F": ((1, -1, 0), (0, -1, 0), (0, 0, -1)),
    "2G": ((1, 0, 0), (1, -1, 0), (0, 0, -1)),
    "2H": ((0, -1, 0), (-1, 0, 0), (0, 0, -1)),
    "2I": ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
    "3Q": ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
    "3C": ((0, -1, 0), (1, -1, 0), (0, 0, 1)),
    "4C": ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
    "6C": ((1, -1, 0), (1, 0, 0), (0, 0, 1)),
}

# the digit 5 stands for 10/12 in explicit symbols
TWELFTHS = {str(d): d for d in range(10)}
TWELFTHS["5"] = 10

ExplicitSymbol = namedtuple(
    "ExplicitSymbol", "centering centering_translations generators"
)


class ExplicitSymbolParser:
    def __init__(self):
        self.header = (
            pp.Char("".join(CENTERING_TRANSLATIONS))("centering")
            + pp.Regex(r"\S{2}")
        ).leave_whitespace()
        self.generator = (
            pp.Char("PI")("kind")
            + pp.Regex(r"[1-46][A-Z]")("rotation")
            + pp.Regex(r"\d{3}")("translation")
        ).leave_whitespace()

    def _parse_token(self, element, token, s, what):
        try:
            return element.parse_string(token, parse_all=True)
        except pp.ParseException as e:
            raise InvalidArgumentError(
                f"Invalid {what} '{token}' in explicit symbol '{s}' "
                f"(column {e.col}: {e.msg})",
                token=token,
            ) from e

    def parse(self, s):
        tokens = s.strip().upper().split("$")
        if len(tokens) < 2:
            raise InvalidArgumentError(
                f"Explicit symbol '{s}' needs a header and at least one generator",
                token=s,
            )
        header = self._parse_token(self.header, tokens[0], s, "header")
        centering = header["centering"]

        generators = []
        for token in tokens[1:]:
            g = self._parse_token(self.generator, token, s, "generator")
            key = g["rotation"]
            if key not in EXPLICIT_ROTATIONS:
                raise InvalidArgumentError(
                    f"Unknown rotation '{key}' in explicit symbol '{s}'", token=token
                )
            rotation = np.array(EXPLICIT_ROTATIONS[key], dtype=np.float64)
            if g["kind"] == "I":
                rotation = -rotation
            translation = np.array(
                [TWELFTHS[d] / 12 for d in g["translation"]], dtype=np.float64
            )
            generators.append((rotation, translation))
        LOG.debug("Explicit symbol '%s': %d generators", s, len(generators))
        return ExplicitSymbol(centering, CENTERING_TRANSLATIONS[centering], generators)


_DEFAULT_PARSER = ExplicitSymbolParser()


def parse_explicit_symbol(s):
    """
    Parse an explicit space group symbol into its lattice centering and
    generating operations.

    Args:
        s (str): the explicit symbol e.g. `PMC$P2C000$I1A000`, case insensitive

    Returns:
        ExplicitSymbol: namedtuple of (centering, centering_translations, generators)
            with generators as (rotation, translation) numpy array pairs

    Raises:
        InvalidArgumentError: if the symbol is malformed
    """
    return _DEFAULT_PARSER.parse(s)
