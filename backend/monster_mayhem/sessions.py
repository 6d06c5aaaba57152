from typing import Dict, List, Optional

from monster_mayhem.errors import AlreadyJoined, SessionFull, SessionNotFound
from monster_mayhem.models import DEFAULT_ELIMINATION_LIMIT, GameSession


def normalize_session_id(raw) -> Optional[str]:
    """Accept ``"g1"`` or ``{"gameId": "g1"}`` / ``{"sessionId": "g1"}``."""
    if isinstance(raw, dict):
        raw = raw.get('sessionId') or raw.get('gameId')
    if not isinstance(raw, str):
        return None
    raw = raw.strip()
    return raw or None


class SessionRegistry:
    """Owns every live game session, keyed by session id.

    Sessions are created on the first successful join and dropped when the
    last participant leaves or the game ends. Callers must hold the action
    serializer's lock while using it.
    """

    def __init__(self, app=None):
        self.elimination_limit = DEFAULT_ELIMINATION_LIMIT
        self._sessions: Dict[str, GameSession] = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.elimination_limit = int(app.config.get('ELIMINATION_LIMIT', DEFAULT_ELIMINATION_LIMIT))
        app.extensions['monster_mayhem.registry'] = self
        self._sessions.clear()

    def __contains__(self, session_id) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    def join(self, raw_session_id, participant_id: str) -> GameSession:
        """Seat ``participant_id`` in a session, creating it if needed.

        Nothing is created when the id is missing or the seat is refused.
        """
        session_id = normalize_session_id(raw_session_id)
        if session_id is None:
            raise SessionNotFound()
        session = self._sessions.get(session_id)
        if session is None:
            session = GameSession(session_id=session_id, elimination_limit=self.elimination_limit)
            session.add_participant(participant_id)
            self._sessions[session_id] = session
            return session
        if session.has_participant(participant_id):
            raise AlreadyJoined()
        if session.is_full:
            raise SessionFull()
        session.add_participant(participant_id)
        return session

    def sessions_for(self, participant_id: str) -> List[GameSession]:
        return [s for s in self._sessions.values() if s.has_participant(participant_id)]

    def remove(self, session_id) -> Optional[GameSession]:
        return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        self._sessions.clear()
