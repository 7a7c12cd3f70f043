"""
Currency rounding helpers.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round a price the way cashiers do (0.5 always goes up).

    Built-in ``round`` uses banker's rounding, which would quote 2 for 2.5.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)
