import random
from typing import List, Tuple

from ladder.errors import NotFound
from ladder.models import Account

FIRST_NAMES = ['Ada', 'Bora', 'Cem', 'Deniz', 'Ece', 'Mert']
LAST_NAMES = ['Kaya', 'Demir', 'Sahin', 'Yildiz']
MAX_GOALS = 4
DEFAULT_PASSWORD = 'password'


def generate_username(account_index: int) -> str:
    return f"player_{account_index}"


def generate_random_name(rng=random):
    return rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)


def ensure_players(directory, player_count: int, rng=random) -> Tuple[List[Account], List[str]]:
    """Return accounts player_1..player_N, registering the ones that don't exist yet.

    A username whose index entry points at a missing record can be neither
    loaded nor registered again; it is returned in the skipped list instead.
    """
    players, skipped = [], []
    for index in range(1, player_count + 1):
        username = generate_username(index)
        try:
            account_id = directory.find_id(username)
        except NotFound:
            name, surname = generate_random_name(rng)
            players.append(directory.register(username, DEFAULT_PASSWORD, name=name, surname=surname))
            continue
        try:
            players.append(directory.get(account_id))
        except NotFound:
            directory.logger.warning(f"[simulation] skipping '{username}': index points to missing account={account_id}")
            skipped.append(username)
    return players, skipped


def simulate_matches(directory, leaderboard, player_count: int, rng=random) -> dict:
    """Play a round robin between N simulated players and settle every match."""
    players, skipped = ensure_players(directory, player_count, rng)
    matches = []
    for i, first in enumerate(players):
        for second in players[i + 1:]:
            score1 = rng.randint(0, MAX_GOALS)
            score2 = rng.randint(0, MAX_GOALS)
            leaderboard.settle_match(first.id, second.id, score1, score2)
            matches.append({
                'userid1': first.id,
                'userid2': second.id,
                'score1': score1,
                'score2': score2,
            })
    return {'matches': matches, 'skipped': skipped}
