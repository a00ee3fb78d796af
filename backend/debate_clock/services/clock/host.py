from typing import Any, Dict, Mapping, Optional

from flask import current_app

from debate_clock.models import Phase
from .session import GameSession
from .settings import SettingsStore
from .ticker import TickDriver
from .views import player_views


EXTENSION_KEY = 'debate_clock'


class ClockRuntime:
    """Per-application bundle of settings store, session and tick driver.

    Transport handlers call these methods rather than the session directly
    so that the tick driver is (re)started whenever play (re)starts.
    """

    def __init__(self, app) -> None:
        self.settings = SettingsStore({
            'player_count': app.config.get('DEFAULT_PLAYER_COUNT', 2),
            'invulnerability_period': app.config.get('DEFAULT_INVULNERABILITY_PERIOD', 3),
            'jump_in_amount': app.config.get('DEFAULT_JUMP_IN_AMOUNT', 3),
            'max_time': app.config.get('DEFAULT_MAX_TIME', 60),
        })
        self.session = GameSession(self.settings, logger=app.logger)
        self.driver = TickDriver(app, self.session)
        self.logger = app.logger

    def state(self) -> Dict[str, Any]:
        payload = self.session.snapshot()
        payload['players'] = player_views(payload)
        return payload

    def update_settings(self, partial: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        settings = self.settings.update(partial)
        self.logger.info(f"[settings] {settings.to_dict()}")
        return settings.to_dict()

    def start(self) -> bool:
        ok = self.session.start()
        self.driver.ensure_running()
        return ok

    def toggle_pause(self) -> bool:
        ok = self.session.toggle_pause()
        if ok and self.session.phase == Phase.PLAYING:
            self.driver.ensure_running()
        return ok

    def reset(self) -> bool:
        return self.session.reset()

    def exit(self) -> bool:
        return self.session.exit()

    def finish_speaking(self) -> bool:
        return self.session.finish_speaking()

    def jump_in(self, player_index: int) -> bool:
        return self.session.jump_in(player_index)

    def end_grace_period(self) -> bool:
        return self.session.end_grace_period_early()

    def select_region(self, player_index: int) -> bool:
        return self.session.select_region(player_index)

    def advance_time(self, delta: float) -> bool:
        return self.session.advance_time(delta)


class ClockExtension:
    """Flask extension owning the debate clock for an application."""

    def __init__(self, app=None) -> None:
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> ClockRuntime:
        runtime = ClockRuntime(app)
        app.extensions[EXTENSION_KEY] = runtime
        runtime.session.subscribe(_broadcast_state)
        return runtime


def get_clock(app=None) -> ClockRuntime:
    app = app or current_app
    return app.extensions[EXTENSION_KEY]


def _broadcast_state(event: str, state: Dict[str, Any]) -> None:
    from debate_clock import socketio
    payload = dict(state)
    payload['players'] = player_views(state)
    socketio.emit('state_update', {'event': event, 'state': payload}, namespace='/ws')
