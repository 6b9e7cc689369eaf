import os


def _flag(name, default):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///tilematch.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Settle delays before a revealed pair is judged (ms). Misses stay visible longer.
    MATCH_DELAY_MS = int(os.environ.get('MATCH_DELAY_MS', '500'))
    MISMATCH_DELAY_MS = int(os.environ.get('MISMATCH_DELAY_MS', '1500'))
    # Interval between elapsed-time notifications (sec). 0 disables ticks.
    TIMER_TICK_SEC = float(os.environ.get('TIMER_TICK_SEC', '1'))
    # 'sql' keeps stats in the database, 'memory' for the process lifetime only
    STATS_BACKEND = os.environ.get('STATS_BACKEND', 'sql')
    STATS_HISTORY_LIMIT = int(os.environ.get('STATS_HISTORY_LIMIT', '100'))
    # Pick a random subset of a category's symbols instead of the first N
    RANDOM_SYMBOL_SELECTION = _flag('RANDOM_SYMBOL_SELECTION', '1')
    DEFAULT_DIFFICULTY = os.environ.get('DEFAULT_DIFFICULTY', 'easy')
    DEFAULT_CATEGORY = os.environ.get('DEFAULT_CATEGORY', 'food')
    SESSION_CODE_LENGTH = int(os.environ.get('SESSION_CODE_LENGTH', '4'))
    # Sessions with no player action for this long are ended (sec). 0 disables.
    SESSION_IDLE_TIMEOUT_SEC = float(os.environ.get('SESSION_IDLE_TIMEOUT_SEC', '1800'))
    SESSION_SWEEP_INTERVAL_SEC = float(os.environ.get('SESSION_SWEEP_INTERVAL_SEC', '60'))
    # Grace period before a session whose owner socket dropped is ended (sec)
    OWNER_GRACE_SEC = float(os.environ.get('OWNER_GRACE_SEC', '2'))
    CORS_ORIGINS = os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000',
    ).split(',')
