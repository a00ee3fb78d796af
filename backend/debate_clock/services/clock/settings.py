import threading
from typing import Any, Dict, Mapping, Optional

from debate_clock.models import (
    Settings,
    MIN_PLAYERS,
    MAX_PLAYERS,
    MIN_MAX_TIME,
    MIN_INVULNERABILITY_PERIOD,
    MIN_JUMP_IN_AMOUNT,
)


# Client-facing names accepted alongside the attribute names
_ALIASES = {
    'playerCount': 'player_count',
    'invulnerabilityPeriod': 'invulnerability_period',
    'jumpInAmount': 'jump_in_amount',
    'maxTime': 'max_time',
}

SETTING_FIELDS = ('invulnerability_period', 'jump_in_amount', 'max_time', 'player_count')


def _seconds(value) -> float:
    # Keep whole numbers as ints so snapshots read back the way they were entered
    as_float = float(value)
    return int(as_float) if as_float.is_integer() else as_float


def _clamp(field: str, value):
    if field == 'player_count':
        return max(MIN_PLAYERS, min(MAX_PLAYERS, int(value)))
    if field == 'jump_in_amount':
        return max(MIN_JUMP_IN_AMOUNT, int(value))
    if field == 'invulnerability_period':
        return max(MIN_INVULNERABILITY_PERIOD, _seconds(value))
    if field == 'max_time':
        return max(MIN_MAX_TIME, _seconds(value))
    raise KeyError(field)


def normalize_keys(partial: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Map a partial settings payload onto Settings field names.

    Unknown keys and None values are dropped.
    """
    fields: Dict[str, Any] = {}
    for key, value in (partial or {}).items():
        name = _ALIASES.get(key, key)
        if name in SETTING_FIELDS and value is not None:
            fields[name] = value
    return fields


class SettingsStore:
    """Holds the active Settings snapshot.

    update() never rejects input: every provided field is clamped into
    range and merged over the current snapshot. The store has no link to
    any running session; a session reads snapshot() when it starts.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._lock = threading.Lock()
        self._settings = Settings()
        if initial:
            self.update(initial)

    def snapshot(self) -> Settings:
        with self._lock:
            return self._settings

    def update(self, partial: Optional[Mapping[str, Any]]) -> Settings:
        changes = {name: _clamp(name, value) for name, value in normalize_keys(partial).items()}
        with self._lock:
            if changes:
                self._settings = self._settings.merged(**changes)
            return self._settings
