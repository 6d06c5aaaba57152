from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from monster_mayhem import registry, serializer, socketio, stats
from monster_mayhem.broadcast import (
    broadcast_game_ended,
    broadcast_game_state,
    close_session_room,
    room_for,
    send_error,
)
from monster_mayhem.errors import GameError, NotInGame, NotYourTurn, UnknownAction
from monster_mayhem.models import Position
from monster_mayhem.services.games.scoring import check_game_end
from monster_mayhem.services.games.turns import update_turn_order
from monster_mayhem.sessions import normalize_session_id


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    with serializer.exclusive():
        for session in registry.sessions_for(sid):
            _drop_participant(session, sid)


def handle_join_game(data):
    sid = _get_sid()
    with serializer.exclusive():
        try:
            session = registry.join(data, sid)
        except GameError as exc:
            emit('error', exc.message)
            return
        stats.ensure_player(sid)
        update_turn_order(session)
        join_room(room_for(session.session_id))
        current_app.logger.info(
            f"[join] game={session.session_id} sid={sid} players={len(session.participants)} turn={session.current_turn}"
        )
        emit('gameJoined', {
            'gameId': session.session_id,
            'gameState': session.game_state(),
            'players': session.players(),
        })
        emit('updateStats', {'stats': stats.for_player(sid), 'totalGames': stats.total_games})
        broadcast_game_state(session, stats)


def handle_leave_game(data):
    sid = _get_sid()
    session_id = normalize_session_id(data)
    with serializer.exclusive():
        session = registry.get(session_id) if session_id else None
        if session is None or not session.has_participant(sid):
            emit('error', NotInGame.message)
            return
        _drop_participant(session, sid)
    leave_room(room_for(session_id))
    emit('left', {'gameId': session_id})


def handle_player_action(data):
    data = data if isinstance(data, dict) else {}
    session_id = normalize_session_id(data)
    serializer.submit(process_player_action, session_id, _get_sid(), data.get('action'))


def _drop_participant(session, sid: str) -> None:
    """Remove ``sid`` and its monsters; tear the session down once it is empty."""
    removed = session.remove_participant(sid)
    current_app.logger.info(
        f"[leave] game={session.session_id} sid={sid} monsters_removed={len(removed)} remaining={len(session.participants)}"
    )
    if session.is_empty:
        registry.remove(session.session_id)
        return
    update_turn_order(session)
    broadcast_game_state(session, stats)


# ---- queued action processing ----

def apply_action(session, sid: str, action) -> None:
    if not isinstance(action, dict):
        raise UnknownAction()
    kind = action.get('type')
    if kind == 'placeMonster':
        position = Position.from_dict(action.get('position'))
        monster = session.place_monster(sid, action.get('monsterType'), position)
        current_app.logger.info(
            f"[place] game={session.session_id} sid={sid} monster={monster.id} type={monster.type} at=({position.row},{position.col})"
        )
    elif kind == 'moveMonster':
        position = Position.from_dict(action.get('position'))
        session.move_monster(sid, action.get('monsterId'), position)
        current_app.logger.info(
            f"[move] game={session.session_id} sid={sid} monster={action.get('monsterId')} to=({position.row},{position.col})"
        )
    elif kind == 'endTurn':
        update_turn_order(session)
        current_app.logger.info(f"[end-turn] game={session.session_id} next={session.current_turn}")
    else:
        raise UnknownAction()


def process_player_action(session_id, sid: str, action) -> None:
    """Run one queued action; executed by the action serializer only."""
    session = registry.get(session_id) if session_id else None
    # state may have changed since the action was queued
    if session is None or session.current_turn != sid:
        send_error(sid, NotYourTurn.message)
        return
    lost_before = sum(session.eliminations.values())
    try:
        apply_action(session, sid, action)
    except GameError as exc:
        current_app.logger.info(f"[action-rejected] game={session_id} sid={sid} reason={exc.message}")
        send_error(sid, exc.message)
        return
    lost = sum(session.eliminations.values()) - lost_before
    if lost:
        current_app.logger.info(f"[resolve] game={session_id} removed={lost} eliminations={session.eliminations}")
    finish_action(session)


def finish_action(session) -> None:
    ended, winner = check_game_end(session, stats)
    if not ended:
        broadcast_game_state(session, stats)
        return
    registry.remove(session.session_id)
    current_app.logger.info(f"[game-end] game={session.session_id} winner={winner} total_games={stats.total_games}")
    stats.save_in_background()
    broadcast_game_ended(session, stats, winner)
    close_session_room(session.session_id)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('leaveGame', handle_leave_game, namespace=namespace)
    socketio.on_event('playerAction', handle_player_action, namespace=namespace)
