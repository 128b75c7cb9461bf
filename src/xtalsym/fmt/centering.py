"""
Lattice centering translations, keyed by the centering letter used
in both Hall and explicit space group symbols.
"""

CENTERING_TRANSLATIONS = {
    "P": (),
    "A": ((0, 1 / 2, 1 / 2),),
    "B": ((1 / 2, 0, 1 / 2),),
    "C": ((1 / 2, 1 / 2, 0),),
    "I": ((1 / 2, 1 / 2, 1 / 2),),
    # rhombohedral obverse, then the two alternative reverse settings
    "R": ((2 / 3, 1 / 3, 1 / 3), (1 / 3, 2 / 3, 2 / 3)),
    "S": ((1 / 3, 1 / 3, 2 / 3), (2 / 3, 2 / 3, 1 / 3)),
    "T": ((1 / 3, 2 / 3, 1 / 3), (2 / 3, 1 / 3, 2 / 3)),
    "F": ((0, 1 / 2, 1 / 2), (1 / 2, 0, 1 / 2), (1 / 2, 1 / 2, 0)),
}
