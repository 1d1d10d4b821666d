"""Global leaderboard and match settlement.

Scores live in one sorted set, member = account id. Ranks are computed at
read time from descending score. Accounts with equal scores are ordered by
redis (reverse lexicographic member order for ZREVRANGE), not by when they
reached the score; callers must not rely on any order within a tie.
"""

import logging
from typing import List, Optional, Tuple

from ladder.errors import Internal, InvalidArgument, NotFound, translate_store_errors
from ladder.keys import LEADERBOARD
from ladder.models import LeaderboardEntry
from ladder.services.pagination import lenient_page, page_bounds, parse_account_id, parse_score

WIN_POINTS = 3
DRAW_POINTS = 1
LOSS_POINTS = 0


def match_points(score1: int, score2: int) -> Tuple[int, int]:
    """Points awarded to each side of a match: 3/0 for a win, 1/1 for a draw."""
    if score1 > score2:
        return WIN_POINTS, LOSS_POINTS
    if score1 < score2:
        return LOSS_POINTS, WIN_POINTS
    return DRAW_POINTS, DRAW_POINTS


class Leaderboard:
    def __init__(self, client, directory, default_page: int = 1, default_count: int = 10, logger=None):
        self.client = client
        self.directory = directory
        self.default_page = default_page
        self.default_count = default_count
        self.logger = logger or logging.getLogger('ladder')

    @translate_store_errors
    def add_score(self, account_id: int, delta: float) -> float:
        """Atomically add ``delta`` to the account's score (ZINCRBY), creating it if absent."""
        return self.client.zincrby(LEADERBOARD, delta, str(account_id))

    @translate_store_errors
    def score_of(self, account_id: int) -> Optional[float]:
        return self.client.zscore(LEADERBOARD, str(account_id))

    @translate_store_errors
    def page(self, page=None, count=None) -> List[LeaderboardEntry]:
        page, count = lenient_page(page, count, self.default_page, self.default_count)
        start, end = page_bounds(page, count)
        rows = self.client.zrevrange(LEADERBOARD, start, end, withscores=True)
        entries = []
        for index, (member, score) in enumerate(rows):
            account_id = int(member)
            entries.append(LeaderboardEntry(
                account_id=account_id,
                username=self._username(account_id),
                rank=start + index + 1,
                score=score,
            ))
        return entries

    def settle_match(self, user_id1, user_id2, score1, score2) -> Tuple[int, int]:
        """Apply the result of one match to both players.

        The two increments are separate store calls, not one transaction.
        """
        user_id1 = parse_account_id(user_id1, 'userid1')
        user_id2 = parse_account_id(user_id2, 'userid2')
        score1 = parse_score(score1, 'score1')
        score2 = parse_score(score2, 'score2')
        if user_id1 == user_id2:
            raise InvalidArgument('A match needs two different players')
        for account_id in (user_id1, user_id2):
            if not self.directory.exists(account_id):
                raise NotFound('User not found!')

        points1, points2 = match_points(score1, score2)
        self.add_score(user_id1, points1)
        self.add_score(user_id2, points2)
        self.logger.info(f"[match] {user_id1}:{score1} vs {user_id2}:{score2} -> +{points1}/+{points2}")
        return points1, points2

    def _username(self, account_id: int) -> Optional[str]:
        try:
            return self.directory.get(account_id).username
        except (NotFound, Internal) as exc:
            self.logger.warning(f"[leaderboard] account={account_id} unresolved: {exc}")
            return None
