"""Debate clock domain services: settings, session state machine, ticks.

This package contains the core game logic that HTTP routes and socket
handlers call into, keeping transport concerns separated from the
turn and timer rules.
"""

from .host import ClockExtension, ClockRuntime, get_clock
from .session import GameSession
from .settings import SettingsStore
from .ticker import TickDriver
from .views import can_jump_in, format_time, player_views
