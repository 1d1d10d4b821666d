from concurrent.futures import ThreadPoolExecutor
import random

import pytest

from ladder.errors import InvalidArgument, NotFound
from ladder.keys import LEADERBOARD, username_key
from ladder.services.leaderboard import match_points
from ladder.services.simulation import simulate_matches


@pytest.fixture()
def players(directory):
    return [directory.register(name, 'pw') for name in ('xena', 'yuri', 'zoe')]


@pytest.mark.parametrize('score1,score2,expected', [
    (3, 1, (3, 0)),
    (0, 2, (0, 3)),
    (2, 2, (1, 1)),
    (0, 0, (1, 1)),
])
def test_match_points(score1, score2, expected):
    assert match_points(score1, score2) == expected


def test_settlement_accumulates(board, players):
    x, y, _ = players
    board.settle_match(x.id, y.id, 3, 1)
    assert board.score_of(x.id) == 3
    assert board.score_of(y.id) == 0
    board.settle_match(x.id, y.id, 2, 2)
    assert board.score_of(x.id) == 4
    assert board.score_of(y.id) == 1
    # repeating adds linearly, it never overwrites
    board.settle_match(x.id, y.id, 3, 1)
    board.settle_match(x.id, y.id, 2, 2)
    assert board.score_of(x.id) == 8
    assert board.score_of(y.id) == 2


def test_settlement_validates_players(board, players):
    x = players[0]
    with pytest.raises(NotFound):
        board.settle_match(x.id, 999, 1, 0)
    with pytest.raises(InvalidArgument):
        board.settle_match(x.id, x.id, 1, 0)
    with pytest.raises(InvalidArgument):
        board.settle_match(x.id, 'abc', 1, 0)
    assert board.score_of(x.id) is None


@pytest.mark.parametrize('score1,score2,field', [
    (2.9, 2.1, 'score1'),
    (3, 0.5, 'score2'),
    (True, 0, 'score1'),
    ('3', 1, 'score1'),
    (1, None, 'score2'),
])
def test_settlement_rejects_non_integral_scores(board, players, score1, score2, field):
    x, y, _ = players
    with pytest.raises(InvalidArgument) as excinfo:
        board.settle_match(x.id, y.id, score1, score2)
    assert excinfo.value.message == f'Invalid {field}'
    assert board.score_of(x.id) is None
    assert board.score_of(y.id) is None


def test_settlement_accepts_whole_float_scores(board, players):
    x, y, _ = players
    assert board.settle_match(x.id, y.id, 3.0, 1.0) == (3, 0)


@pytest.mark.parametrize('user_id1,user_id2,field', [(True, 2, 'userid1'), (1, False, 'userid2'), (1.5, 2, 'userid1')])
def test_settlement_rejects_non_id_players(board, players, user_id1, user_id2, field):
    with pytest.raises(InvalidArgument) as excinfo:
        board.settle_match(user_id1, user_id2, 1, 0)
    assert excinfo.value.message == f'Invalid {field}'
    assert board.score_of(players[0].id) is None


def test_add_score_creates_entry_and_accepts_fractions(board, players):
    x = players[0]
    assert board.add_score(x.id, 2.5) == 2.5
    assert board.add_score(x.id, 1) == 3.5


def test_page_ranks_by_descending_score(board, players):
    x, y, z = players
    board.add_score(x.id, 5)
    board.add_score(y.id, 9)
    board.add_score(z.id, 1)
    entries = board.page(1, 10)
    assert [(e.username, e.rank, e.score) for e in entries] == [('yuri', 1, 9), ('xena', 2, 5), ('zoe', 3, 1)]
    second_page = board.page(2, 2)
    assert [(e.username, e.rank) for e in second_page] == [('zoe', 3)]


@pytest.mark.parametrize('page,count', [(0, 5), (-2, 5), ('x', 5), (None, None)])
def test_page_falls_back_to_defaults(board, directory, page, count):
    accounts = [directory.register(f'p{i}', 'pw') for i in range(12)]
    for score, account in enumerate(accounts):
        board.add_score(account.id, score)
    entries = board.page(page, count)
    expected = 5 if count == 5 else 10
    assert len(entries) == expected
    assert entries[0].rank == 1
    assert entries[0].username == 'p11'


def test_page_reports_unknown_accounts(board, players, redis_client):
    board.add_score(players[0].id, 1)
    redis_client.zadd(LEADERBOARD, {'555': 10})
    entries = board.page(1, 10)
    assert entries[0].account_id == 555
    assert entries[0].username is None
    assert entries[1].username == 'xena'


def test_concurrent_increments_are_not_lost(board, players):
    x = players[0]
    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda _: board.add_score(x.id, 1), range(50)))
    assert board.score_of(x.id) == 50


def test_simulation_settles_round_robin(directory, board):
    existing = directory.register('player_2', 'pw', name='Kept')
    outcome = simulate_matches(directory, board, 4, rng=random.Random(7))
    matches = outcome['matches']
    # 4 players -> 6 matches, 3 or 2 points awarded per match
    assert len(matches) == 6
    assert outcome['skipped'] == []
    total = sum(e.score for e in board.page(1, 10))
    expected = sum(2 if m['score1'] == m['score2'] else 3 for m in matches)
    assert total == expected
    # existing accounts are reused, not overwritten
    assert directory.get(existing.id).name == 'Kept'
    assert directory.find_id('player_4')


def test_simulation_skips_players_with_dangling_index(directory, board, redis_client):
    redis_client.set(username_key('player_1'), 99)
    outcome = simulate_matches(directory, board, 3, rng=random.Random(7))
    assert outcome['skipped'] == ['player_1']
    # player_2 and player_3 still play each other
    assert len(outcome['matches']) == 1
    assert redis_client.get(username_key('player_1')) == '99'
    assert board.score_of(99) is None
