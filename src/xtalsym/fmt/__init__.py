"""
Parsers for the text notations of symmetry operations (`parse_xyz`)
and space groups (`parse_hall_symbol`, `parse_explicit_symbol`).
"""

from .xyz import parse_xyz
from .hall import parse_hall_symbol, HallSymbol
from .explicit import parse_explicit_symbol, ExplicitSymbol

__all__ = [
    "ExplicitSymbol",
    "HallSymbol",
    "parse_explicit_symbol",
    "parse_hall_symbol",
    "parse_xyz",
]
