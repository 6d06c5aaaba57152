from dataclasses import dataclass, field
from typing import Dict, List, Optional
import time

from monster_mayhem.errors import (
    AlreadyJoined,
    InvalidEdge,
    InvalidMonster,
    InvalidMonsterType,
    InvalidMove,
    InvalidPosition,
    NotYourTurn,
    SessionFull,
)
from monster_mayhem.services.games.resolver import resolve_interactions

BOARD_SIZE = 10
MAX_PARTICIPANTS = 2
DEFAULT_ELIMINATION_LIMIT = 10
MONSTER_TYPES = ('vampire', 'werewolf', 'ghost')


def _now_ms() -> int:
    return int(time.time() * 1000)


def on_board(value: int) -> bool:
    return 0 <= value < BOARD_SIZE


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_dict(cls, data) -> 'Position':
        """Parse a ``{row, col}`` payload coming off the wire."""
        if not isinstance(data, dict):
            raise InvalidPosition()
        row, col = data.get('row'), data.get('col')
        # bool is an int subclass; reject it explicitly
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (row, col)):
            raise InvalidPosition()
        return cls(row=row, col=col)

    def to_dict(self):
        return {'row': self.row, 'col': self.col}


@dataclass
class Participant:
    id: str
    active: bool = False

    def to_dict(self):
        return {'id': self.id, 'active': self.active}


@dataclass
class Monster:
    id: str
    type: str
    position: Position
    player_id: str

    def to_dict(self):
        return {
            'type': self.type,
            'position': self.position.to_dict(),
            'playerId': self.player_id,
        }


def is_legal_move(src: Position, dst: Position) -> bool:
    """Straight lines of any length, or a diagonal step of up to two cells per axis."""
    dr = abs(dst.row - src.row)
    dc = abs(dst.col - src.col)
    if (dr == 0 and dc > 0) or (dc == 0 and dr > 0):
        return True
    return 0 < dr <= 2 and 0 < dc <= 2


@dataclass
class GameSession:
    """Authoritative state of one game.

    Participants keep their join order: index 0 places on row 0, index 1
    on the last row. ``eliminations`` counts monsters each participant has
    lost to conflicts.
    """
    session_id: str
    elimination_limit: int = DEFAULT_ELIMINATION_LIMIT
    participants: List[Participant] = field(default_factory=list)
    monsters: Dict[str, Monster] = field(default_factory=dict)
    current_turn: Optional[str] = None
    eliminations: Dict[str, int] = field(default_factory=dict)

    # ---- participants ----

    def participant(self, participant_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def has_participant(self, participant_id: str) -> bool:
        return self.participant(participant_id) is not None

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= MAX_PARTICIPANTS

    @property
    def is_empty(self) -> bool:
        return not self.participants

    def add_participant(self, participant_id: str) -> Participant:
        if self.has_participant(participant_id):
            raise AlreadyJoined()
        if self.is_full:
            raise SessionFull()
        participant = Participant(id=participant_id)
        self.participants.append(participant)
        self.eliminations[participant_id] = 0
        return participant

    def remove_participant(self, participant_id: str) -> List[Monster]:
        """Drop a participant together with every monster they own."""
        participant = self.participant(participant_id)
        if participant is None:
            return []
        self.participants.remove(participant)
        self.eliminations.pop(participant_id, None)
        removed = [m for m in self.monsters.values() if m.player_id == participant_id]
        for monster in removed:
            del self.monsters[monster.id]
        if self.current_turn == participant_id:
            self.current_turn = None
        return removed

    def edge_for(self, participant_id: str) -> int:
        index = next(i for i, p in enumerate(self.participants) if p.id == participant_id)
        return 0 if index == 0 else BOARD_SIZE - 1

    def monster_count(self, participant_id: str) -> int:
        return sum(1 for m in self.monsters.values() if m.player_id == participant_id)

    def eligible_participants(self) -> List[Participant]:
        return [p for p in self.participants if self.eliminations.get(p.id, 0) < self.elimination_limit]

    # ---- actions ----

    def _require_turn(self, participant_id: str) -> None:
        if not self.has_participant(participant_id) or self.current_turn != participant_id:
            raise NotYourTurn()

    def _new_monster_id(self, participant_id: str) -> str:
        stamp = _now_ms()
        monster_id = f"{participant_id}_{stamp}"
        while monster_id in self.monsters:
            stamp += 1
            monster_id = f"{participant_id}_{stamp}"
        return monster_id

    def place_monster(self, participant_id: str, monster_type: str, position: Position) -> Monster:
        self._require_turn(participant_id)
        if monster_type not in MONSTER_TYPES:
            raise InvalidMonsterType()
        if position.row != self.edge_for(participant_id):
            raise InvalidEdge()
        if not on_board(position.col):
            raise InvalidPosition()
        monster = Monster(
            id=self._new_monster_id(participant_id),
            type=monster_type,
            position=position,
            player_id=participant_id,
        )
        self.monsters[monster.id] = monster
        resolve_interactions(self.monsters, self.eliminations)
        return monster

    def move_monster(self, participant_id: str, monster_id: str, position: Position) -> Monster:
        self._require_turn(participant_id)
        monster = self.monsters.get(monster_id) if isinstance(monster_id, str) else None
        if monster is None or monster.player_id != participant_id:
            raise InvalidMonster()
        if not (on_board(position.row) and on_board(position.col)):
            raise InvalidMove()
        if not is_legal_move(monster.position, position):
            raise InvalidMove()
        monster.position = position
        resolve_interactions(self.monsters, self.eliminations)
        return monster

    # ---- serialization ----

    def game_state(self):
        return {
            'monsters': {mid: m.to_dict() for mid, m in self.monsters.items()},
            'currentTurn': self.current_turn,
        }

    def players(self):
        return [p.to_dict() for p in self.participants]

    def to_dict(self):
        return {
            'gameId': self.session_id,
            'gameState': self.game_state(),
            'players': self.players(),
            'eliminations': dict(self.eliminations),
        }
