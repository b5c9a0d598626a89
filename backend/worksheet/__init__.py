import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from worksheet.config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = list(flask_app.config['ALLOWED_ORIGINS'])
    CORS(
        flask_app,
        supports_credentials=True,
        origins=allowed_origins,
        methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['Content-Type', 'Accept', 'Origin', 'X-Requested-With', 'Authorization'],
    )
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Snapshot writes run in the background; inline under test for determinism
    spawn = None if flask_app.config.get('TESTING') else socketio.start_background_task

    from worksheet.state import EXTENSION_KEY, build_state, get_state
    flask_app.extensions[EXTENSION_KEY] = build_state(flask_app, spawn=spawn)

    from worksheet.errors import register_error_handlers
    register_error_handlers(flask_app)

    from worksheet.admission import register_admission
    register_admission(flask_app)

    from worksheet.main import main
    flask_app.register_blueprint(main)

    from worksheet.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api')

    from worksheet.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('scores-reset')
    def scores_reset_command():
        """Clears the leaderboard and its snapshot."""
        get_state(flask_app).leaderboard.clear()
        click.echo('Leaderboard has been reset!')

    @click.command('quota-reset')
    def quota_reset_command():
        """Sets today's request count back to zero."""
        get_state(flask_app).quota.reset()
        click.echo('Daily request count has been reset!')

    @click.command('quota-status')
    def quota_status_command():
        """Prints today's request count."""
        status = get_state(flask_app).quota.status()
        click.echo(f"{status.count}/{status.limit} requests on {status.reset} ({status.remaining} remaining)")

    flask_app.cli.add_command(scores_reset_command)
    flask_app.cli.add_command(quota_reset_command)
    flask_app.cli.add_command(quota_status_command)

    flask_app.logger.info(
        f"[startup] {len(get_state(flask_app).leaderboard)} scores loaded, "
        f"{get_state(flask_app).quota.status().count} requests today"
    )
    return flask_app
