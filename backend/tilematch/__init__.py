from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from tilematch.services.games.persistence import make_stats_store
    from tilematch.services.games.registry import SessionRegistry
    from tilematch.services.games.scheduler import BackgroundScheduler, ManualScheduler

    cfg = flask_app.config
    # Tests drive delays and ticks by hand through the manual scheduler
    scheduler = ManualScheduler() if cfg.get('TESTING') else BackgroundScheduler(socketio)
    flask_app.extensions['tilematch'] = SessionRegistry(
        scheduler,
        store=make_stats_store(flask_app),
        code_length=int(cfg.get('SESSION_CODE_LENGTH', 4)),
        match_delay=int(cfg.get('MATCH_DELAY_MS', 500)) / 1000.0,
        mismatch_delay=int(cfg.get('MISMATCH_DELAY_MS', 1500)) / 1000.0,
        tick_interval=float(cfg.get('TIMER_TICK_SEC', 1)),
        sample_symbols=bool(cfg.get('RANDOM_SYMBOL_SELECTION', True)),
        history_limit=int(cfg.get('STATS_HISTORY_LIMIT', 100)),
        idle_timeout=float(cfg.get('SESSION_IDLE_TIMEOUT_SEC', 1800)),
        sweep_interval=float(cfg.get('SESSION_SWEEP_INTERVAL_SEC', 60)),
    )

    from tilematch.main import main
    flask_app.register_blueprint(main)

    from tilematch.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from tilematch.api.stats import stats
    flask_app.register_blueprint(stats, url_prefix='/api/stats')

    from tilematch.socketio_events import notify_session_ended, register_socketio_handlers
    flask_app.extensions['tilematch'].on_expire = notify_session_ended
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('stats-reset')
    def stats_reset_command():
        """Drops and recreates the statistics tables."""
        import tilematch.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            flask_app.extensions['tilematch'].store.clear()
            print('Statistics have been reset!')

    flask_app.cli.add_command(stats_reset_command)

    return flask_app


def get_registry(app=None):
    return (app or current_app).extensions['tilematch']
