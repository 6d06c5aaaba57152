from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config
from monster_mayhem.services.games.action_queue import ActionSerializer
from monster_mayhem.sessions import SessionRegistry
from monster_mayhem.stats import StatsStore

registry = SessionRegistry()
stats = StatsStore()
serializer = ActionSerializer()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode='threading')

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    origins = allowed_origins + list(flask_app.config.get('CORS_ORIGINS') or [])

    stats.init_app(flask_app)
    registry.init_app(flask_app)
    serializer.init_app(flask_app)
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from monster_mayhem.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from monster_mayhem.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('stats-reset')
    def stats_reset_command():
        """Zeroes the win/loss record and rewrites the stats file."""
        stats.reset()
        if stats.save():
            print(f'Stats have been reset ({stats.path})')
        else:
            raise click.ClickException(f'Could not write {stats.path}')

    flask_app.cli.add_command(stats_reset_command)

    return flask_app
