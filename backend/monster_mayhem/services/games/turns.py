import random
from typing import Optional


def update_turn_order(session, rng: Optional[random.Random] = None) -> Optional[str]:
    """Hand the turn to the eligible participant with the fewest monsters.

    Participants who reached the elimination limit are skipped; ties are
    broken at random. Returns the new current-turn id, or None (leaving the
    session untouched) when nobody is eligible.
    """
    rng = rng or random
    eligible = session.eligible_participants()
    if not eligible:
        return None
    counts = {p.id: session.monster_count(p.id) for p in eligible}
    fewest = min(counts.values())
    candidates = [p for p in eligible if counts[p.id] == fewest]
    chosen = rng.choice(candidates)
    session.current_turn = chosen.id
    for p in session.participants:
        p.active = p.id == chosen.id
    return chosen.id
