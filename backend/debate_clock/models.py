from dataclasses import dataclass, replace
from enum import Enum


class Phase(str, Enum):
    MENU = 'menu'
    PLAYING = 'playing'
    PAUSED = 'paused'
    ENDED = 'ended'


MIN_PLAYERS = 2
MAX_PLAYERS = 8
MIN_MAX_TIME = 10
MIN_INVULNERABILITY_PERIOD = 1
MIN_JUMP_IN_AMOUNT = 1


@dataclass(frozen=True)
class Settings:
    """Configuration snapshot a session is started from.

    Durations are seconds. Instances are immutable; the settings store
    swaps in a new snapshot on every update.
    """
    invulnerability_period: float = 3
    jump_in_amount: int = 3
    max_time: float = 60
    player_count: int = 2

    def merged(self, **changes):
        return replace(self, **changes)

    def to_dict(self):
        return {
            'invulnerability_period': self.invulnerability_period,
            'jump_in_amount': self.jump_in_amount,
            'max_time': self.max_time,
            'player_count': self.player_count,
        }
