import os

_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174"

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', _DEFAULT_ORIGINS).split(',') if o.strip()]
    # Tick driver cadence and per-tick time delta (seconds)
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '0.1'))
    TICK_DELTA_SEC = float(os.environ.get('TICK_DELTA_SEC', '0.1'))
    # Optional: heartbeat interval for tick driver logs (sec). 0 disables.
    TICK_HEARTBEAT_SEC = int(os.environ.get('TICK_HEARTBEAT_SEC', '0'))
    # Settings shown on the menu before anyone edits them
    DEFAULT_PLAYER_COUNT = int(os.environ.get('DEFAULT_PLAYER_COUNT', '2'))
    DEFAULT_INVULNERABILITY_PERIOD = int(os.environ.get('DEFAULT_INVULNERABILITY_PERIOD', '3'))
    DEFAULT_JUMP_IN_AMOUNT = int(os.environ.get('DEFAULT_JUMP_IN_AMOUNT', '3'))
    DEFAULT_MAX_TIME = int(os.environ.get('DEFAULT_MAX_TIME', '60'))
