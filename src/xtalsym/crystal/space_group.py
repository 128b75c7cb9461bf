import logging
from numbers import Real
import numpy as np
from xtalsym.errors import InvalidArgumentError
from xtalsym.fmt.explicit import parse_explicit_symbol
from xtalsym.fmt.hall import parse_hall_symbol
from xtalsym.util.num import TOLERANCE, is_rotation_part_in_list, reduce_number_positive
from .symmetry_operation import SymmetryOperation

LOG = logging.getLogger(__name__)

PRIMARY_TRANSLATIONS = ((1, 0, 0), (0, 1, 0), (0, 0, 1))


def _check_centering_translation(vector):
    try:
        values = tuple(vector)
    except TypeError as e:
        raise InvalidArgumentError(
            f"Centering translation must be a sequence, got {vector!r}"
        ) from e
    if len(values) != 3:
        raise InvalidArgumentError(
            f"Centering translation must have 3 components, got {values!r}"
        )
    for value in values:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidArgumentError(
                f"Centering translation component {value!r} is not a number",
                token=str(value),
            )
    return tuple(float(x) for x in values)


class SpaceGroup:
    """
    Represent a crystallographic space group as a set of symmetry
    operations together with its lattice (primary) and centering
    translations.

    A group built from generators (e.g. by `from_hall_symbol(..., expand=False)`)
    holds only those generators and has no order; `generate_group` closes the
    set of operations and `expand_group` adds the centered copies.

    Attributes:
        symmetry_operations (Tuple[SymmetryOperation]): the operations
        primary_translations (Tuple[Tuple[float]]): the lattice translations,
            always the standard basis
        centering_translations (Tuple[Tuple[float]]): centering vectors not yet
            applied to the operations
        order (int, optional): number of operations of the complete group, if known
    """

    dimensionality = 3
    primary_translations = PRIMARY_TRANSLATIONS

    def __init__(self, symmetry_operations, centering_translations=()):
        """
        Construct a new space group from a list of symmetry operations and
        centering translations.

        Arguments:
            symmetry_operations (Iterable[SymmetryOperation]): the operations
            centering_translations (Iterable[array_like], optional): vectors
                with exactly 3 numeric components

        Raises:
            InvalidArgumentError: if any operation is not 3-dimensional, or any
                centering translation is malformed
        """
        symops = tuple(symmetry_operations)
        for symop in symops:
            if getattr(symop, "dimensionality", None) != self.dimensionality:
                raise InvalidArgumentError(
                    f"Expected a {self.dimensionality}-dimensional symmetry "
                    f"operation, got {symop!r}"
                )
        self._symmetry_operations = symops
        self._centering_translations = tuple(
            _check_centering_translation(v) for v in centering_translations
        )
        self._order = None

    @property
    def symmetry_operations(self):
        return self._symmetry_operations

    @property
    def symops(self):
        "alias for symmetry_operations"
        return self._symmetry_operations

    @property
    def centering_translations(self):
        return self._centering_translations

    @property
    def order(self):
        return self._order

    @classmethod
    def from_symmetry_operations(cls, symops, centering_translations=()):
        """
        Construct a space group directly from symmetry operations,
        without generating or expanding anything.

        Args:
            symops (List[SymmetryOperation]): the symmetry operations
            centering_translations (List[array_like], optional): centering vectors

        Returns:
            SpaceGroup: the new space group, with no order set
        """
        return cls(symops, centering_translations)

    def generate_group(self):
        """
        Close the current set of operations (treated as generators) under
        composition. Operations are distinguished by their rotation part
        only, so each rotation appears once; the identity comes first.

        Returns:
            SpaceGroup: a new space group with the same centering translations
                and order |operations| * (|centering translations| + 1)
        """
        result = [SymmetryOperation.identity()]
        for generator in self._symmetry_operations:
            power = generator
            for _ in range(1, generator.order):
                extended = list(result)
                for symop in result:
                    product = power.product(symop)
                    if not is_rotation_part_in_list(product, extended):
                        extended.append(product)
                result = extended
                power = power.product(generator)
        order = len(result) * (len(self._centering_translations) + 1)
        LOG.debug(
            "Generated %d symops from %d generators (order %d)",
            len(result),
            len(self._symmetry_operations),
            order,
        )
        generated = SpaceGroup(result, self._centering_translations)
        generated._order = order
        return generated

    def expand_group(self):
        """
        Apply the centering translations, appending a shifted copy of every
        operation for each centering vector after the original operations.

        Returns:
            SpaceGroup: a new space group with no centering translations and
                order equal to its number of operations
        """
        expanded = list(self._symmetry_operations)
        for centering in self._centering_translations:
            for symop in self._symmetry_operations:
                translation = [
                    reduce_number_positive(t + c)
                    for t, c in zip(symop.translation, centering)
                ]
                expanded.append(
                    SymmetryOperation.from_rotation_and_translation(
                        symop.rotation, translation
                    )
                )
        LOG.debug(
            "Expanded %d symops to %d with %d centering translations",
            len(self._symmetry_operations),
            len(expanded),
            len(self._centering_translations),
        )
        result = SpaceGroup(expanded)
        result._order = len(expanded)
        return result

    def is_equal_ignore_translations(self, other) -> bool:
        """
        Check whether both groups contain the same symmetry operations,
        in any order, ignoring their primary and centering translations.

        Args:
            other (SpaceGroup): the group to compare with

        Returns:
            bool: `True` if the operations match one-to-one
        """
        if len(self) != len(other):
            return False
        remaining = list(other.symmetry_operations)
        for symop in self._symmetry_operations:
            for i, candidate in enumerate(remaining):
                if symop == candidate:
                    del remaining[i]
                    break
            else:
                return False
        return True

    def is_equal(self, other) -> bool:
        """
        Check whether both groups have the same primary translations,
        the same centering translations (in the same order) and the
        same symmetry operations (in any order).

        Args:
            other (SpaceGroup): the group to compare with

        Returns:
            bool: `True` if the groups are equal
        """
        for mine, theirs in (
            (self.primary_translations, other.primary_translations),
            (self.centering_translations, other.centering_translations),
        ):
            if len(mine) != len(theirs):
                return False
            if len(mine) > 0 and not np.allclose(mine, theirs, rtol=0.0, atol=TOLERANCE):
                return False
        return self.is_equal_ignore_translations(other)

    @classmethod
    def _from_generators(cls, generators, centering_translations, expand):
        symops = [
            SymmetryOperation.from_rotation_and_translation(w, t) for w, t in generators
        ]
        sg = cls(symops, centering_translations)
        if expand:
            sg = sg.generate_group()
        return sg

    @classmethod
    def from_hall_symbol(cls, symbol: str, expand=True):
        """
        Construct a space group from its Hall symbol e.g. '-P 2ac 2n'.

        Args:
            symbol (str): the Hall symbol, case insensitive
            expand (bool, optional): generate the full group (default True).
                Otherwise the result holds only the generators. Centering
                translations are applied separately by `expand_group`.

        Returns:
            SpaceGroup: the space group

        Raises:
            InvalidArgumentError: if the symbol is malformed
        """
        hall = parse_hall_symbol(symbol)
        return cls._from_generators(
            hall.generators, hall.centering_translations, expand
        )

    @classmethod
    def from_explicit_symbol(cls, symbol: str, expand=True):
        """
        Construct a space group from its explicit symbol e.g. 'PMC$I1A000$P2C000'.

        Args:
            symbol (str): the explicit symbol, case insensitive
            expand (bool, optional): generate the full group (default True).
                Otherwise the result holds only the generators. Centering
                translations are applied separately by `expand_group`.

        Returns:
            SpaceGroup: the space group

        Raises:
            InvalidArgumentError: if the symbol is malformed
        """
        explicit = parse_explicit_symbol(symbol)
        return cls._from_generators(
            explicit.generators, explicit.centering_translations, expand
        )

    def apply_all_symops(self, coordinates: np.ndarray):
        """
        For a given set of coordinates, apply all symmetry
        operations in this space group, yielding a set subject
        to only translational symmetry (i.e. a unit cell).
        Assumes the input coordinates are fractional.

        Args:
            coordinates (np.ndarray): (N, 3) set of fractional coordinates

        Returns:
            Tuple[np.ndarray, np.ndarray]: a (MxN) array of indices of the generating
                symops and an (MxN, 3) array of coordinates where M is the number of
                symmetry operations in this space group.
        """
        nsites = len(coordinates)
        transformed = np.empty((nsites * len(self), 3))
        generator_symop = np.empty(nsites * len(self), dtype=np.int32)
        for i, s in enumerate(self._symmetry_operations):
            transformed[i * nsites : (i + 1) * nsites] = s(coordinates)
            generator_symop[i * nsites : (i + 1) * nsites] = i
        return generator_symop, transformed

    def __len__(self):
        return len(self._symmetry_operations)

    def __iter__(self):
        return iter(self._symmetry_operations)

    def __str__(self):
        return "".join(
            f"({i}) {s}\n" for i, s in enumerate(self._symmetry_operations, start=1)
        )

    def __repr__(self):
        return "<{}: {} symops, order {}>".format(
            self.__class__.__name__, len(self), self._order
        )
