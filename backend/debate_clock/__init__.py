from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import json
import click
from config import Config

socketio = SocketIO(async_mode=None)

from debate_clock.services.clock import ClockExtension, GameSession, SettingsStore  # noqa: E402

clock = ClockExtension()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    clock.init_app(flask_app)

    # Import and register blueprints here
    from debate_clock.main import main
    flask_app.register_blueprint(main)

    from debate_clock.api.clock import clock_api
    flask_app.register_blueprint(clock_api, url_prefix='/api/clock')

    # Register Socket.IO event handlers
    from debate_clock.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('clock-simulate')
    @click.option('--players', default=2, show_default=True, help='Number of players (2-8).')
    @click.option('--max-time', default=60.0, show_default=True, help='Seconds per player.')
    @click.option('--grace', default=3.0, show_default=True, help='Invulnerability period in seconds.')
    @click.option('--jump-ins', default=3, show_default=True, help='Jump-ins per player.')
    @click.option('--seconds', default=10.0, show_default=True, help='Seconds of play to simulate.')
    @click.option('--delta', default=0.1, show_default=True, help='Seconds per tick.')
    def clock_simulate_command(players, max_time, grace, jump_ins, seconds, delta):
        """Runs a headless session and prints the final state."""
        if delta <= 0:
            raise click.BadParameter('must be positive', param_hint='--delta')
        settings = SettingsStore({
            'player_count': players,
            'max_time': max_time,
            'invulnerability_period': grace,
            'jump_in_amount': jump_ins,
        })
        session = GameSession(settings, logger=flask_app.logger)
        session.start()
        ticks = int(round(seconds / delta))
        for _ in range(ticks):
            if not session.advance_time(delta):
                break
        click.echo(json.dumps(session.snapshot(), indent=2))

    flask_app.cli.add_command(clock_simulate_command)

    return flask_app
