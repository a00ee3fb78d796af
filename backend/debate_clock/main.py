from flask import Blueprint, jsonify

from debate_clock.services.clock import get_clock

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the debate clock server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'phase': get_clock().session.phase.value})
