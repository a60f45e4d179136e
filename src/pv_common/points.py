"""Integer arithmetic for points.

All balances, stakes and rewards are int. No float, no Decimal.
"""


def proportional_share(part: int, total: int, pool: int) -> int:
    """floor(part / total * pool), computed exactly as (part * pool) // total.

    Returns 0 when total is 0.
    """
    if total <= 0:
        return 0
    return (part * pool) // total


def calc_withdraw_fee(amount: int, fee_percent: int) -> int:
    """Ceiling division fee: ceil(amount * fee_percent / 100)."""
    if amount == 0 or fee_percent == 0:
        return 0
    return (amount * fee_percent + 99) // 100


def coerce_points(raw: object) -> int:
    """Parse a stored balance; anything non-numeric or negative becomes 0."""
    if isinstance(raw, bool):
        return 0
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0
    return max(value, 0)
