from typing import Optional, Tuple


def check_game_end(session, stats) -> Tuple[bool, Optional[str]]:
    """Record the result if the game in ``session`` is over.

    The game ends once at most one participant is still under the
    elimination limit. The survivor, if any, gets a win and every
    other participant a loss; ``stats.total_games`` goes up by one.
    Returns ``(ended, winner_id)``.
    """
    eligible = session.eligible_participants()
    if len(eligible) > 1:
        return False, None
    winner = eligible[0].id if len(eligible) == 1 else None
    stats.record_game([p.id for p in session.participants], winner)
    return True, winner
