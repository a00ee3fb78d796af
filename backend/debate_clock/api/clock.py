from flask import Blueprint, jsonify, request, current_app
from debate_clock.services.clock import get_clock
from debate_clock.services.clock.payloads import PayloadError, parse_delta, parse_player_index, parse_settings


clock_api = Blueprint('clock', __name__)


def _result(ok: bool):
    # A rejected operation is not an error: report it and return the state as is
    payload = get_clock().state()
    payload['ok'] = ok
    return jsonify(payload)


@clock_api.errorhandler(PayloadError)
def handle_payload_error(exc):
    return jsonify({'error': str(exc)}), 400


@clock_api.route('/state', methods=['GET'])
def get_state():
    return jsonify(get_clock().state())


@clock_api.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(get_clock().settings.snapshot().to_dict())


@clock_api.route('/settings', methods=['POST', 'PATCH'])
def update_settings():
    data = request.get_json(silent=True)
    fields = parse_settings(data)
    return jsonify(get_clock().update_settings(fields))


@clock_api.route('/start', methods=['POST'])
def start():
    return _result(get_clock().start())


@clock_api.route('/pause', methods=['POST'])
def toggle_pause():
    return _result(get_clock().toggle_pause())


@clock_api.route('/reset', methods=['POST'])
def reset():
    return _result(get_clock().reset())


@clock_api.route('/exit', methods=['POST'])
def exit_game():
    return _result(get_clock().exit())


@clock_api.route('/finish', methods=['POST'])
def finish_speaking():
    return _result(get_clock().finish_speaking())


@clock_api.route('/jump-in', methods=['POST'])
def jump_in():
    player_index = parse_player_index(request.get_json(silent=True))
    return _result(get_clock().jump_in(player_index))


@clock_api.route('/grace/end', methods=['POST'])
def end_grace_period():
    return _result(get_clock().end_grace_period())


@clock_api.route('/select', methods=['POST'])
def select_region():
    player_index = parse_player_index(request.get_json(silent=True))
    return _result(get_clock().select_region(player_index))


@clock_api.route('/tick', methods=['POST'])
def tick():
    """Advance the clock from an external tick source."""
    default = float(current_app.config.get('TICK_DELTA_SEC', 0.1))
    delta = parse_delta(request.get_json(silent=True), default)
    return _result(get_clock().advance_time(delta))
