import copy
import json
import os
import threading
from typing import Dict, Iterable, Optional


def _empty_record():
    return {'totalGames': 0, 'playerStats': {}}


def _parse_record(data) -> dict:
    """Validate a loaded stats document, raising ValueError when it is malformed."""
    if not isinstance(data, dict):
        raise ValueError('stats record must be an object')
    total = data.get('totalGames', 0)
    players = data.get('playerStats', {})
    if not isinstance(total, int) or not isinstance(players, dict):
        raise ValueError('stats record has wrong field types')
    parsed = {}
    for player_id, record in players.items():
        if not isinstance(record, dict):
            raise ValueError(f'bad record for player {player_id}')
        parsed[player_id] = {
            'wins': int(record.get('wins', 0)),
            'losses': int(record.get('losses', 0)),
        }
    return {'totalGames': total, 'playerStats': parsed}


class StatsStore:
    """Process-wide win/loss counters backed by a JSON file.

    Loaded once in ``init_app``; a missing or unreadable file means an empty
    record. Saving never raises: failures are logged and the in-memory
    counters stay as they are.
    """

    def __init__(self, app=None):
        self.app = None
        self.path: Optional[str] = None
        self.total_games = 0
        self.player_stats: Dict[str, Dict[str, int]] = {}
        self._write_lock = threading.Lock()
        self._version = 0
        self._written_version = 0
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self.path = app.config.get('STATS_FILE')
        app.extensions['monster_mayhem.stats'] = self
        self.load()

    def load(self) -> None:
        record = _empty_record()
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                record = _parse_record(json.load(fh))
        except FileNotFoundError:
            self.app.logger.info(f"[stats-load] no stats file at {self.path}, starting fresh")
        except (OSError, ValueError) as exc:
            self.app.logger.warning(f"[stats-load] unreadable stats file {self.path}: {exc}; starting fresh")
        self.total_games = record['totalGames']
        self.player_stats = record['playerStats']

    def reset(self) -> None:
        self.total_games = 0
        self.player_stats = {}

    def ensure_player(self, player_id: str) -> Dict[str, int]:
        return self.player_stats.setdefault(player_id, {'wins': 0, 'losses': 0})

    def for_player(self, player_id: str) -> Dict[str, int]:
        return dict(self.ensure_player(player_id))

    def record_game(self, participant_ids: Iterable[str], winner_id: Optional[str]) -> None:
        self.total_games += 1
        for player_id in participant_ids:
            record = self.ensure_player(player_id)
            if winner_id is not None and player_id == winner_id:
                record['wins'] += 1
            else:
                record['losses'] += 1

    def to_dict(self) -> dict:
        return {
            'totalGames': self.total_games,
            'playerStats': copy.deepcopy(self.player_stats),
        }

    def payload(self) -> dict:
        """Shape used by the ``updateStats`` event."""
        return {'stats': copy.deepcopy(self.player_stats), 'totalGames': self.total_games}

    # ---- persistence ----

    def save(self) -> bool:
        self._version += 1
        return self._write(self.to_dict(), self._version)

    def save_in_background(self) -> None:
        """Persist a snapshot without holding up gameplay."""
        self._version += 1
        snapshot, version = self.to_dict(), self._version
        if self.app.config.get('TESTING'):
            self._write(snapshot, version)
            return
        from monster_mayhem import socketio
        socketio.start_background_task(self._write, snapshot, version)

    def _write(self, snapshot: dict, version: int) -> bool:
        with self._write_lock:
            # an older snapshot must never overwrite a newer one
            if version < self._written_version:
                return False
            try:
                directory = os.path.dirname(self.path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                with open(self.path, 'w', encoding='utf-8') as fh:
                    json.dump(snapshot, fh, indent=2)
            except OSError as exc:
                self.app.logger.error(f"[stats-save] failed to save stats to {self.path}: {exc}")
                return False
            self._written_version = version
        self.app.logger.info(f"[stats-save] total_games={snapshot['totalGames']} path={self.path}")
        return True
