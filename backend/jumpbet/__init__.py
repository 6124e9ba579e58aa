from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, start_clock=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or []
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # One game for every connection; handlers and views reach it through
    # the app, never through a module global
    from jumpbet.broadcast import SocketIOBroadcaster
    from jumpbet.services.game import GameSession
    session = GameSession.from_config(
        flask_app.config,
        broadcaster=SocketIOBroadcaster(socketio, namespace=namespace, logger=flask_app.logger),
        spawn=socketio.start_background_task,
        sleep=socketio.sleep,
        logger=flask_app.logger,
    )
    flask_app.extensions['jumpbet'] = session

    if start_clock is None:
        testing = flask_app.config.get('TESTING', False)
        start_clock = not testing or bool(flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS'))
    session.start(run_clock=start_clock)

    # Import and register blueprints here
    from jumpbet.main import main
    flask_app.register_blueprint(main)

    from jumpbet.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    # Register Socket.IO event handlers
    from jumpbet.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app


def get_session(app=None):
    """The GameSession bound to ``app`` (or the current app)."""
    if app is None:
        from flask import current_app
        app = current_app
    return app.extensions['jumpbet']
