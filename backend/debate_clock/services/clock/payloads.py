"""Input shape checks shared by the HTTP and Socket.IO handlers.

The core never rejects a call, but it does expect numbers. Payloads that
do not carry numbers are refused here, before they reach the session.
"""

import math
from typing import Any, Dict, Mapping, Optional

from .settings import normalize_keys


class PayloadError(ValueError):
    pass


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def parse_player_index(data: Optional[Mapping[str, Any]]) -> int:
    data = data or {}
    value = data.get('player_index', data.get('playerIndex'))
    if value is None:
        raise PayloadError('player_index is required')
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        value = int(value)
    if not _is_number(value) or int(value) != value:
        raise PayloadError('player_index must be an integer')
    return int(value)


def parse_delta(data: Optional[Mapping[str, Any]], default: float) -> float:
    value = (data or {}).get('delta', default)
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            raise PayloadError('delta must be a number')
    if not _is_number(value):
        raise PayloadError('delta must be a number')
    return float(value)


def parse_settings(data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if data is not None and not isinstance(data, Mapping):
        raise PayloadError('settings must be an object')
    fields = normalize_keys(data)
    for name, value in fields.items():
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                raise PayloadError(f'{name} must be a number')
            fields[name] = value
        if not _is_number(value):
            raise PayloadError(f'{name} must be a number')
    return fields
