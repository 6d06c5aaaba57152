"""User-facing game errors.

Every error carries the message sent back to the originating connection.
None of them are fatal; the state is left untouched when one is raised.
"""


class GameError(Exception):
    message = 'Game error'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class SessionNotFound(GameError):
    message = 'Game ID required'


class SessionFull(GameError):
    message = 'Game is full'


class AlreadyJoined(GameError):
    message = 'You are already in this game'


class NotYourTurn(GameError):
    message = 'Not your turn or invalid game'


class InvalidEdge(GameError):
    message = 'Monsters must be placed on your edge (top/bottom row)'


class InvalidMonster(GameError):
    message = 'Invalid monster'


class InvalidMonsterType(GameError):
    message = 'Invalid monster type'


class InvalidMove(GameError):
    message = 'Invalid move'


class InvalidPosition(GameError):
    message = 'Invalid position'


class UnknownAction(GameError):
    message = 'Unknown action'


class NotInGame(GameError):
    message = 'You are not in this game'
