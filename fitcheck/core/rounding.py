import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up.

    The builtin ``round`` sends ties to the even neighbour (2.5 -> 2), which
    would make scores shift down at exact halves.
    """
    return math.floor(value + 0.5)
