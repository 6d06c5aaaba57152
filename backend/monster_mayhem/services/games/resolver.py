from collections import defaultdict
from typing import Dict, List

# attacker -> the type it defeats
BEATS = {
    'vampire': 'werewolf',
    'werewolf': 'ghost',
    'ghost': 'vampire',
}


def duel_loser(first, second):
    """Return the losing monster of a two-monster fight, or None when neither wins."""
    if BEATS.get(first.type) == second.type:
        return second
    if BEATS.get(second.type) == first.type:
        return first
    return None


def resolve_interactions(monsters: Dict[str, object], eliminations: Dict[str, int]) -> List[object]:
    """Settle every shared cell on the board.

    Monsters are grouped by exact position. A pair of the same type destroy
    each other, a mixed pair leaves only the dominant monster, and three or
    more occupants are all destroyed. Each loss bumps the owner's entry in
    ``eliminations``. Both mappings are mutated in place; the removed
    monsters are returned.
    """
    cells = defaultdict(list)
    for monster in monsters.values():
        cells[(monster.position.row, monster.position.col)].append(monster)

    removed = []
    for occupants in cells.values():
        if len(occupants) < 2:
            continue
        if len(occupants) == 2:
            first, second = occupants
            if first.type == second.type:
                losers = [first, second]
            else:
                loser = duel_loser(first, second)
                losers = [loser] if loser is not None else []
        else:
            losers = list(occupants)
        for monster in losers:
            del monsters[monster.id]
            eliminations[monster.player_id] = eliminations.get(monster.player_id, 0) + 1
            removed.append(monster)
    return removed
