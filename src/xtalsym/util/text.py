from fractions import Fraction
from numbers import Number

# large enough for any denominator appearing in a symmetry operation
MAX_DENOMINATOR = 1000


def fraction_string(x: Number) -> str:
    """
    Render a number as an exact fraction, writing improper fractions
    as mixed numbers.

    >>> fraction_string(0.25)
    '1/4'
    >>> fraction_string(-5 / 3)
    '-1 2/3'
    >>> fraction_string(3.0)
    '3'

    Args:
        x (Number): the value to render

    Returns:
        str: the rendered fraction
    """
    f = Fraction(x).limit_denominator(MAX_DENOMINATOR)
    prefix = "-" if f < 0 else ""
    f = abs(f)
    whole, remainder = divmod(f.numerator, f.denominator)
    if remainder == 0:
        return f"{prefix}{whole}"
    rest = f"{remainder}/{f.denominator}"
    if whole == 0:
        return f"{prefix}{rest}"
    return f"{prefix}{whole} {rest}"
