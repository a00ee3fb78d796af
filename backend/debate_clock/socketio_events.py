from flask_socketio import emit
from flask import current_app
from debate_clock.services.clock import get_clock
from debate_clock.services.clock.payloads import PayloadError, parse_player_index, parse_settings


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    emit('state_update', {'event': 'connect', 'state': get_clock().state()})


def handle_disconnect(*args):
    current_app.logger.debug("[ws-disconnect]")


def handle_get_state(data=None):
    emit('state_update', {'event': 'get_state', 'state': get_clock().state()})


def _ack(event: str, ok: bool) -> None:
    emit('ack', {'event': event, 'ok': ok})


def _with_player_index(event: str, operation):
    def _handler(data=None):
        try:
            player_index = parse_player_index(data)
        except PayloadError as exc:
            emit('error', {'message': str(exc)})
            return
        _ack(event, operation(get_clock(), player_index))
    return _handler


def _without_payload(event: str, operation):
    def _handler(data=None):
        _ack(event, operation(get_clock()))
    return _handler


def handle_update_settings(data=None):
    try:
        fields = parse_settings(data)
    except PayloadError as exc:
        emit('error', {'message': str(exc)})
        return
    settings = get_clock().update_settings(fields)
    emit('settings', settings)
    _ack('update_settings', True)


_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'get_state': handle_get_state,
    'update_settings': handle_update_settings,
    'select_region': _with_player_index('select_region', lambda c, i: c.select_region(i)),
    'jump_in': _with_player_index('jump_in', lambda c, i: c.jump_in(i)),
    'finish_speaking': _without_payload('finish_speaking', lambda c: c.finish_speaking()),
    'toggle_pause': _without_payload('toggle_pause', lambda c: c.toggle_pause()),
    'start': _without_payload('start', lambda c: c.start()),
    'reset': _without_payload('reset', lambda c: c.reset()),
    'exit': _without_payload('exit', lambda c: c.exit()),
    'end_grace_period': _without_payload('end_grace_period', lambda c: c.end_grace_period()),
}


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from debate_clock import socketio

    for name, handler in _HANDLERS.items():
        socketio.on_event(name, handler, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        for name, handler in _HANDLERS.items():
            socketio.on_event(name, handler, namespace='/')
