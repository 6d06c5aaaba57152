import pytest

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
from monster_mayhem.models import GameSession, Monster, Position, is_legal_move
from monster_mayhem import models


def two_player_session(turn='a'):
    session = GameSession(session_id='g1')
    session.add_participant('a')
    session.add_participant('b')
    session.current_turn = turn
    return session


def test_third_participant_is_refused():
    session = two_player_session()
    with pytest.raises(SessionFull):
        session.add_participant('c')
    with pytest.raises(AlreadyJoined):
        session.add_participant('a')
    assert [p.id for p in session.participants] == ['a', 'b']


def test_placement_rows_follow_join_order():
    session = two_player_session()
    first = session.place_monster('a', 'vampire', Position(0, 3))
    session.current_turn = 'b'
    second = session.place_monster('b', 'ghost', Position(9, 3))
    assert first.position.row == 0
    assert second.position.row == 9
    assert session.edge_for('a') == 0
    assert session.edge_for('b') == 9


def test_placement_off_edge_is_rejected_without_mutation():
    session = two_player_session()
    with pytest.raises(InvalidEdge):
        session.place_monster('a', 'vampire', Position(9, 3))
    with pytest.raises(InvalidEdge):
        session.place_monster('a', 'vampire', Position(4, 3))
    assert session.monsters == {}


def test_placement_requires_turn_and_known_type():
    session = two_player_session(turn='a')
    with pytest.raises(NotYourTurn):
        session.place_monster('b', 'ghost', Position(9, 0))
    with pytest.raises(InvalidMonsterType):
        session.place_monster('a', 'zombie', Position(0, 0))
    with pytest.raises(InvalidPosition):
        session.place_monster('a', 'ghost', Position(0, 10))
    assert session.monsters == {}


def test_monster_ids_stay_unique_within_same_millisecond(monkeypatch):
    monkeypatch.setattr(models, '_now_ms', lambda: 1700000000000)
    session = two_player_session()
    first = session.place_monster('a', 'vampire', Position(0, 1))
    second = session.place_monster('a', 'vampire', Position(0, 2))
    assert first.id == 'a_1700000000000'
    assert second.id == 'a_1700000000001'
    assert len(session.monsters) == 2


@pytest.mark.parametrize('dst', [(0, 9), (9, 0), (2, 2), (1, 2), (2, 1), (1, 1)])
def test_legal_moves(dst):
    assert is_legal_move(Position(0, 0), Position(*dst))


@pytest.mark.parametrize('dst', [(0, 0), (3, 3), (3, 1), (1, 3)])
def test_illegal_moves(dst):
    assert not is_legal_move(Position(0, 0), Position(*dst))


def test_move_updates_position_in_place():
    session = two_player_session()
    monster = session.place_monster('a', 'vampire', Position(0, 5))
    moved = session.move_monster('a', monster.id, Position(8, 5))
    assert moved is monster
    assert session.monsters[monster.id].position == Position(8, 5)


def test_move_validation():
    session = two_player_session()
    mine = session.place_monster('a', 'vampire', Position(0, 5))
    session.monsters['b_1'] = Monster(id='b_1', type='ghost', position=Position(9, 9), player_id='b')
    with pytest.raises(InvalidMonster):
        session.move_monster('a', 'b_1', Position(8, 9))
    with pytest.raises(InvalidMonster):
        session.move_monster('a', 'missing', Position(1, 5))
    with pytest.raises(InvalidMove):
        session.move_monster('a', mine.id, Position(3, 8))
    with pytest.raises(InvalidMove):
        session.move_monster('a', mine.id, Position(0, 10))
    with pytest.raises(NotYourTurn):
        session.move_monster('b', 'b_1', Position(8, 9))
    assert mine.position == Position(0, 5)


def test_same_type_collision_after_move_removes_both():
    session = two_player_session()
    session.monsters['a_1'] = Monster(id='a_1', type='werewolf', position=Position(5, 3), player_id='a')
    session.monsters['b_1'] = Monster(id='b_1', type='werewolf', position=Position(5, 5), player_id='b')
    session.move_monster('a', 'a_1', Position(5, 5))
    assert 'a_1' not in session.monsters
    assert 'b_1' not in session.monsters
    assert session.eliminations == {'a': 1, 'b': 1}
    assert session.game_state()['monsters'] == {}


def test_remove_participant_takes_their_monsters():
    session = two_player_session(turn='b')
    session.monsters['a_1'] = Monster(id='a_1', type='ghost', position=Position(0, 1), player_id='a')
    session.monsters['b_1'] = Monster(id='b_1', type='ghost', position=Position(9, 1), player_id='b')
    removed = session.remove_participant('b')
    assert [m.id for m in removed] == ['b_1']
    assert list(session.monsters) == ['a_1']
    assert 'b' not in session.eliminations
    assert session.current_turn is None


def test_position_from_dict_rejects_garbage():
    assert Position.from_dict({'row': 0, 'col': 4}) == Position(0, 4)
    for bad in (None, [], {'row': '0', 'col': 1}, {'row': True, 'col': 1}, {'row': 1}):
        with pytest.raises(InvalidPosition):
            Position.from_dict(bad)


def test_move_with_unhashable_monster_id_is_invalid_monster():
    session = two_player_session()
    session.place_monster('a', 'vampire', Position(0, 5))
    for bad_id in (['x'], {'id': 'x'}, None, 7):
        with pytest.raises(InvalidMonster):
            session.move_monster('a', bad_id, Position(1, 5))
