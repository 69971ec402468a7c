"""
Conversión tolerante de valores crudos del CRM/MLS.

Los datos llegan como strings, Decimals o JSON; un valor que no se
puede interpretar se trata como ausente en vez de fallar.
"""

import json
import math
from typing import Any, Optional


def to_optional_float(value: Any) -> Optional[float]:
    """Convierte a float o devuelve None si no se puede."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except (ValueError, TypeError):
        return None
    # "nan" e "inf" parsean pero no son montos ni cantidades
    return number if math.isfinite(number) else None


def to_optional_int(value: Any) -> Optional[int]:
    number = to_optional_float(value)
    return int(number) if number is not None else None


def to_string_list(value: Any) -> list[str]:
    """
    Acepta lista, string JSON o string separado por comas.
    """
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    return []
