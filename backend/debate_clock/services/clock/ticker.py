import threading
from typing import Callable, Optional

from debate_clock.models import Phase
from .session import GameSession


class TickDriver:
    """Advances a session's clock on a fixed cadence while it is playing.

    - No-ops in TESTING mode unless ENABLE_TICKER_IN_TESTS is set
    - Keeps a single worker per session; resuming from pause reuses it if
      it has not exited yet
    - The worker re-checks the phase before every tick and exits as soon as
      the session leaves 'playing'
    """

    def __init__(self, app, session: GameSession, sleep: Optional[Callable[[float], None]] = None,
                 spawn: Optional[Callable] = None) -> None:
        self.app = app
        self.session = session
        self._sleep = sleep
        self._spawn = spawn
        self._lock = threading.Lock()
        self._active = False

    @property
    def interval(self) -> float:
        return float(self.app.config.get('TICK_INTERVAL_SEC', 0.1))

    @property
    def delta(self) -> float:
        return float(self.app.config.get('TICK_DELTA_SEC', 0.1))

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    def ensure_running(self) -> bool:
        """Start the worker if the session is playing and none is running."""
        if self.app.config.get('TESTING') and not self.app.config.get('ENABLE_TICKER_IN_TESTS'):
            return False
        if self.session.phase != Phase.PLAYING:
            return False
        with self._lock:
            if self._active:
                self.app.logger.debug("[tick-skip] driver already running")
                return False
            self._active = True
        self.app.logger.info(f"[tick-start] interval={self.interval}s delta={self.delta}s")
        spawn = self._spawn or _socketio_spawn
        spawn(self.run)
        return True

    def run(self) -> int:
        """Worker loop. Returns the number of ticks applied."""
        sleep = self._sleep or _socketio_sleep
        try:
            hb = int(self.app.config.get('TICK_HEARTBEAT_SEC', 0))
        except (TypeError, ValueError):
            hb = 0
        ticks = 0
        since_beat = 0.0
        try:
            while True:
                sleep(self.interval)
                with self._lock:
                    if self.session.phase != Phase.PLAYING:
                        self._active = False
                        break
                self.session.advance_time(self.delta)
                ticks += 1
                since_beat += self.interval
                if hb > 0 and since_beat >= hb:
                    since_beat = 0.0
                    self._heartbeat()
        except Exception:
            with self._lock:
                self._active = False
            self.app.logger.exception("[tick-error] driver stopped")
            raise
        self.app.logger.info(f"[tick-stop] ticks={ticks} phase={self.session.phase.value}")
        return ticks

    def _heartbeat(self) -> None:
        state = self.session.snapshot()
        times = state['player_times']
        speaker = state['current_speaker']
        remaining = times[speaker] if 0 <= speaker < len(times) else 0
        self.app.logger.info(f"[tick-heartbeat] speaker={speaker} remaining={remaining}s phase={state['phase']}")


def _socketio_sleep(seconds: float) -> None:
    from debate_clock import socketio
    socketio.sleep(seconds)


def _socketio_spawn(target) -> None:
    from debate_clock import socketio
    socketio.start_background_task(target)
