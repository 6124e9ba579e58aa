import os
from decimal import Decimal


def _origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Round cadence (ms); the clock is the only thing that ends a round
    ROUND_INTERVAL_MS = int(os.environ.get('ROUND_INTERVAL_MS', '7000'))
    # Balance every new player is seeded with
    STARTING_BALANCE = Decimal(os.environ.get('STARTING_BALANCE', '10'))
    HISTORY_LIMIT = int(os.environ.get('HISTORY_LIMIT', '10'))
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', '10'))
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://localhost:3000'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
