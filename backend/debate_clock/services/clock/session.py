"""Turn and timer state machine for one debate game.

The session owns game progression, chess-clock time accounting and
jump-in eligibility. Every operation is total: it either performs its
effect and returns True, or leaves state untouched and returns False.
Player input racing with a phase change (a click landing just after a
pause, a tick arriving just after the game ended) is therefore harmless.

All reads and writes of the session fields happen under a single lock.
Observers registered with subscribe() are notified after each successful
mutation, outside the lock, with the operation name and the snapshot
captured under the lock by that mutation. Snapshots carry a version
number that increases with every mutation.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from debate_clock.models import Phase
from .settings import SettingsStore


# Float drift from repeated 0.1s ticks stays below this
_EPSILON = 1e-9

Listener = Callable[[str, Dict[str, Any]], None]


class GameSession:

    def __init__(self, settings: SettingsStore, logger: Optional[logging.Logger] = None) -> None:
        self._settings_store = settings
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        # Snapshot taken by start(); drives rotation and grace length for this game
        self._active_settings = settings.snapshot()
        self.phase: Phase = Phase.MENU
        self.current_speaker: int = 0
        self.player_times: List[float] = []
        self.jump_in_counts: List[int] = []
        self.grace_period_active: bool = False
        self.grace_period_remaining: float = 0
        # Bumped on every successful mutation so observers can drop stale updates
        self.version: int = 0

    # ---- Observers ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str, state: Dict[str, Any]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, state)
            except Exception:
                self._logger.exception(f"[listener-error] event={event}")

    # ---- Read surface ----

    @property
    def settings(self):
        """Settings of the running game, or the store's current snapshot in the menu."""
        with self._lock:
            if self.phase == Phase.MENU:
                return self._settings_store.snapshot()
            return self._active_settings

    @property
    def player_count(self) -> int:
        with self._lock:
            return len(self.player_times)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'phase': self.phase.value,
                'current_speaker': self.current_speaker,
                'player_times': list(self.player_times),
                'jump_in_counts': list(self.jump_in_counts),
                'grace_period_active': self.grace_period_active,
                'grace_period_remaining': self.grace_period_remaining,
                'version': self.version,
                'settings': self.settings.to_dict(),
            }

    # ---- Internal transitions (lock held) ----

    def _commit(self) -> Dict[str, Any]:
        """Record a successful mutation and capture the state it produced."""
        self.version += 1
        return self.snapshot()

    def _activate_grace(self) -> None:
        self.grace_period_active = True
        self.grace_period_remaining = self._active_settings.invulnerability_period

    def _clear_grace(self) -> None:
        self.grace_period_active = False
        self.grace_period_remaining = 0

    def _advance_speaker(self) -> int:
        """Hand the floor counter-clockwise and start a fresh grace period."""
        count = len(self.player_times)
        self.current_speaker = (self.current_speaker - 1 + count) % count
        self._activate_grace()
        return self.current_speaker

    # ---- Lifecycle ----

    def start(self) -> bool:
        """Start (or restart) a game from the settings as they are right now."""
        with self._lock:
            settings = self._settings_store.snapshot()
            self._active_settings = settings
            self.player_times = [settings.max_time] * settings.player_count
            self.jump_in_counts = [settings.jump_in_amount] * settings.player_count
            self.current_speaker = 0
            self._activate_grace()
            self.phase = Phase.PLAYING
            self._logger.info(
                f"[start] players={settings.player_count} max_time={settings.max_time}s "
                f"grace={settings.invulnerability_period}s jump_ins={settings.jump_in_amount}"
            )
            state = self._commit()
        self._notify('start', state)
        return True

    def toggle_pause(self) -> bool:
        with self._lock:
            if self.phase == Phase.PLAYING:
                self.phase = Phase.PAUSED
                self._logger.info(f"[pause] speaker={self.current_speaker}")
            elif self.phase == Phase.PAUSED:
                self.phase = Phase.PLAYING
                self._logger.info(f"[resume] speaker={self.current_speaker}")
            else:
                self._logger.debug(f"[pause-reject] phase={self.phase.value}")
                return False
            state = self._commit()
        self._notify('toggle_pause', state)
        return True

    def reset(self) -> bool:
        self._reset('reset')
        return True

    def exit(self) -> bool:
        """Leave the game. Same effect as reset(); observers see 'exit'."""
        self._reset('exit')
        return True

    def _reset(self, event: str) -> None:
        with self._lock:
            previous = self.phase
            self.phase = Phase.MENU
            self.current_speaker = 0
            self.player_times = []
            self.jump_in_counts = []
            self._clear_grace()
            self._logger.info(f"[{event}] from={previous.value}")
            state = self._commit()
        self._notify(event, state)

    # ---- Player input ----

    def finish_speaking(self) -> bool:
        """The current speaker yields the floor.

        While the speaker's own grace period is running this only ends the
        grace period early; the floor passes on a second call.
        """
        with self._lock:
            event = self._finish_speaking()
            state = self._commit() if event else None
        return self._done(event, state)

    def jump_in(self, player_index: int) -> bool:
        """Let a non-speaking player take the floor.

        Fails without saying why: callers get False for any unmet rule.
        """
        with self._lock:
            event = self._jump_in(player_index)
            state = self._commit() if event else None
        return self._done(event, state)

    def end_grace_period_early(self) -> bool:
        with self._lock:
            event = self._end_grace_period()
            state = self._commit() if event else None
        return self._done(event, state)

    def select_region(self, player_index: int) -> bool:
        """Route a click on a player's region to the matching operation."""
        with self._lock:
            if self.phase == Phase.PLAYING and player_index == self.current_speaker:
                event = self._finish_speaking()
            else:
                event = self._jump_in(player_index)
            state = self._commit() if event else None
        return self._done(event, state)

    def _done(self, event: Optional[str], state: Optional[Dict[str, Any]]) -> bool:
        if event is None:
            return False
        self._notify(event, state)
        return True

    def _finish_speaking(self) -> Optional[str]:
        if self.phase != Phase.PLAYING:
            self._logger.debug(f"[finish-reject] phase={self.phase.value}")
            return None
        if self.grace_period_active:
            return self._end_grace_period()
        previous = self.current_speaker
        speaker = self._advance_speaker()
        self._logger.info(f"[finish] speaker={previous} next={speaker}")
        return 'finish_speaking'

    def _jump_in(self, player_index: int) -> Optional[str]:
        if not self._may_jump_in(player_index):
            self._logger.debug(f"[jump-in-reject] player={player_index} phase={self.phase.value}")
            return None
        previous = self.current_speaker
        self.current_speaker = player_index
        self._activate_grace()
        self.jump_in_counts[player_index] -= 1
        self._logger.info(
            f"[jump-in] player={player_index} interrupted={previous} "
            f"remaining_jump_ins={self.jump_in_counts[player_index]}"
        )
        return 'jump_in'

    def _may_jump_in(self, player_index: int) -> bool:
        if self.phase != Phase.PLAYING:
            return False
        if not 0 <= player_index < len(self.player_times):
            return False
        if player_index == self.current_speaker:
            return False
        if self.grace_period_active:
            return False
        if self.jump_in_counts[player_index] <= 0:
            return False
        return self.player_times[player_index] > 0

    def _end_grace_period(self) -> Optional[str]:
        if self.phase != Phase.PLAYING or not self.grace_period_active:
            self._logger.debug(f"[grace-end-reject] phase={self.phase.value} active={self.grace_period_active}")
            return None
        self._clear_grace()
        self._logger.info(f"[grace-end] speaker={self.current_speaker}")
        return 'end_grace_period'

    # ---- Clock ----

    def advance_time(self, delta: float) -> bool:
        """Run the clock forward by delta seconds.

        Grace expiry is settled first. The speaker's clock runs whether or
        not their grace period is active. A speaker who runs out hands the
        floor counter-clockwise (at most one hand-off per call), and the
        game ends once every clock reads zero.
        """
        with self._lock:
            if self.phase != Phase.PLAYING or delta <= 0:
                return False

            if self.grace_period_active:
                remaining = self.grace_period_remaining - delta
                if remaining <= _EPSILON:
                    self._clear_grace()
                else:
                    self.grace_period_remaining = remaining

            speaker = self.current_speaker
            left = self.player_times[speaker] - delta
            if left <= _EPSILON:
                self.player_times[speaker] = 0
                successor = self._advance_speaker()
                self._logger.info(f"[timeout] speaker={speaker} next={successor}")
            else:
                self.player_times[speaker] = left

            if all(t <= 0 for t in self.player_times):
                self.phase = Phase.ENDED
                self._logger.info("[ended] all clocks at zero")
            state = self._commit()
        self._notify('tick', state)
        return True
