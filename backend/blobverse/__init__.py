from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _split(value):
    if isinstance(value, (list, tuple)):
        return list(value)
    items = [v.strip() for v in str(value).split(',') if v.strip()]
    return '*' if items == ['*'] else items


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _split(flask_app.config.get('CORS_ORIGINS', '*'))
    allowed_methods = _split(flask_app.config.get('CORS_METHODS', 'GET,POST,PUT,DELETE,OPTIONS'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins, methods=allowed_methods)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One battle server per app; handlers look it up through current_app
    from blobverse.services.battles import BattleServer, Housekeeping
    server = BattleServer(socketio, flask_app.logger)
    housekeeping = Housekeeping(flask_app, socketio, server)
    flask_app.extensions['battle_server'] = server
    flask_app.extensions['battle_housekeeping'] = housekeeping

    from blobverse.main import main
    flask_app.register_blueprint(main)

    from blobverse.api.records import records
    flask_app.register_blueprint(records, url_prefix='/api')

    from blobverse.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    # Ensure models are imported so tables are known to SQLAlchemy
    import blobverse.models  # noqa: F401

    if flask_app.config.get('DB_AUTO_CREATE'):
        with flask_app.app_context():
            db.create_all()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the profile and battle tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    housekeeping.start()

    return flask_app
