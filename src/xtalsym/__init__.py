from .crystal import SpaceGroup, SymmetryOperation
from .errors import InvalidArgumentError

__all__ = [
    "InvalidArgumentError",
    "SpaceGroup",
    "SymmetryOperation",
]
