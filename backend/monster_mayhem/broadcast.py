from flask import current_app

from monster_mayhem import socketio


def room_for(session_id: str) -> str:
    return f"game:{session_id}"


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/')


def broadcast_game_state(session, stats) -> None:
    """Push the post-action board and the stats table to everyone in the session."""
    room = room_for(session.session_id)
    socketio.emit('updateGameState', {'gameState': session.game_state(), 'players': session.players()},
                  to=room, namespace=_namespace())
    socketio.emit('updateStats', stats.payload(), to=room, namespace=_namespace())


def broadcast_game_ended(session, stats, winner) -> None:
    room = room_for(session.session_id)
    socketio.emit('updateStats', stats.payload(), to=room, namespace=_namespace())
    socketio.emit('gameEnded', {'winner': winner}, to=room, namespace=_namespace())


def send_error(sid: str, message: str) -> None:
    socketio.emit('error', message, to=sid, namespace=_namespace())


def close_session_room(session_id: str) -> None:
    socketio.close_room(room_for(session_id), namespace=_namespace())
