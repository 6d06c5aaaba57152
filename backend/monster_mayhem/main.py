from flask import Blueprint, jsonify

from monster_mayhem import registry, serializer, stats

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Monster Mayhem game server!'})

@main.route('/monster-mayhem')
def stats_page():
    return (
        "<h1>Monster Mayhem</h1>"
        f"<p>Games Played: <span id=total-games>{int(stats.total_games)}</span></p>"
    )

@main.route('/api/stats')
def get_stats():
    return jsonify(stats.to_dict())

@main.route('/api/games/<string:session_id>')
def get_game(session_id):
    """
    Returns a snapshot of a live game session.
    """
    with serializer.exclusive():
        session = registry.get(session_id)
        if session is None:
            return jsonify({'error': 'Game not found'}), 404
        return jsonify(session.to_dict()), 200
