from __future__ import annotations

import math
from typing import Any


def parse_price(value: Any) -> float:
    """
    Aceita:
      - int/float
      - str com vírgula ou ponto ("12,50", "R$ 12.5")
    Valor ilegível, infinito ou negativo vira 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, (int, float)):
            v = float(value)
        else:
            t = str(value).replace("R$", "").replace(" ", "").replace(",", ".")
            if not t:
                return 0.0
            v = float(t)
    except (ValueError, OverflowError):
        return 0.0
    if not math.isfinite(v):
        return 0.0
    return max(0.0, v)
