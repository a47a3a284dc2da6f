"""Grand total derivation from nullable quote components."""

import math
from typing import Any

Number = int | float


def _is_amount(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def calculate_total_quote(
    guestroom_total: Any, meeting_room_total: Any, food_beverage_total: Any
) -> Number | None:
    """
    Sum the components that carry an amount.

    Missing components (None, non-numeric, NaN) contribute nothing. When no
    component carries an amount the total is None, not 0.
    """
    amounts = [
        value
        for value in (guestroom_total, meeting_room_total, food_beverage_total)
        if _is_amount(value)
    ]
    if not amounts:
        return None
    return sum(amounts)
