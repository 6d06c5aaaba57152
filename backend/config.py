import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Aggregate win/loss record, rewritten after every finished game
    STATS_FILE = os.environ.get('STATS_FILE') or os.path.join(BASE_DIR, 'stats.json')
    # Monsters a player may lose before they are out
    ELIMINATION_LIMIT = int(os.environ.get('ELIMINATION_LIMIT', '10'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Extra origins (comma separated) on top of the local dev servers
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '').split(',') if o.strip()]
