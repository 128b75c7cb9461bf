"""
This module implements symmetry operations in fractional coordinates
(`SymmetryOperation`), including their geometric interpretation, and
space groups (`SpaceGroup`) built from Hall or explicit symbols.
"""

from .symmetry_operation import SymmetryOperation
from .space_group import SpaceGroup

__all__ = [
    "SpaceGroup",
    "SymmetryOperation",
]
