from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
MONEY = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value, places: int = 0) -> Decimal:
    exp = Decimal(1).scaleb(-places) if places else Decimal(1)
    return to_decimal(value).quantize(exp, rounding=ROUND_HALF_UP)


def money(value) -> Decimal:
    return to_decimal(value).quantize(MONEY, rounding=ROUND_HALF_UP)


def average(values, places: int = 1) -> Decimal:
    """Half-up rounded mean; an empty input averages to 0."""
    items = [to_decimal(v) for v in values]
    if not items:
        return round_half_up(ZERO, places)
    return round_half_up(sum(items, ZERO) / len(items), places)


def percent(part, whole, places: int = 0) -> Decimal:
    """``part / whole * 100`` rounded half-up; 0 when ``whole`` is 0."""
    whole = to_decimal(whole)
    if whole == ZERO:
        return round_half_up(ZERO, places)
    return round_half_up(to_decimal(part) / whole * 100, places)
