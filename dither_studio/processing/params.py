from __future__ import annotations

import math
from typing import Any, Mapping

from ..errors import OutOfRangeParameter


def bounded(name: str, value: Any, low: float, high: float) -> float:
    """Coerce ``value`` to a float clamped into ``[low, high]``.

    Finite out-of-range numbers are clamped; values that cannot be read as a
    finite number raise :class:`OutOfRangeParameter`.
    """

    if isinstance(value, bool):
        raise OutOfRangeParameter(name, value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise OutOfRangeParameter(name, value) from None
    if not math.isfinite(number):
        raise OutOfRangeParameter(name, value)
    return min(high, max(low, number))


def bounded_int(name: str, value: Any, low: int, high: int) -> int:
    return int(round(bounded(name, value, low, high)))


def read(payload: Mapping[str, Any], key: str, default: Any) -> Any:
    value = payload.get(key)
    return default if value is None else value
