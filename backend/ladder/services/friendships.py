"""Friend requests and the friendship graph.

Pending requests live in a sorted set per target account, scored by send
time; friendships live in a sorted set per account, scored by acceptance
time. Both sides of a friendship are written in one MULTI/EXEC together
with the removal of the pending request.
"""

import logging
import time
from typing import List

from redis.exceptions import WatchError

from ladder.errors import Conflict, Internal, InvalidArgument, NotFound, translate_store_errors
from ladder.keys import account_key, friend_requests_key, friends_key
from ladder.models import Friend, FriendRequest
from ladder.services.pagination import page_bounds, parse_account_id, strict_page

ACCEPT = 'accept'
REJECT = 'reject'
DECISIONS = (ACCEPT, REJECT)


class FriendshipGraph:
    def __init__(self, client, directory, logger=None):
        self.client = client
        self.directory = directory
        self.logger = logger or logging.getLogger('ladder')

    @staticmethod
    def link(pipe, account_id: int, other_id: int, accepted_at: float) -> None:
        """Queue both directions of a friendship on ``pipe``.

        NX keeps an existing entry (and its original timestamp) untouched,
        so re-applying an acceptance never moves or duplicates anything.
        """
        pipe.zadd(friends_key(account_id), {str(other_id): accepted_at}, nx=True)
        pipe.zadd(friends_key(other_id), {str(account_id): accepted_at}, nx=True)

    @translate_store_errors
    def are_friends(self, account_id: int, other_id: int) -> bool:
        return self.client.zscore(friends_key(account_id), str(other_id)) is not None

    @translate_store_errors
    def list(self, account_id: int, page, count) -> List[Friend]:
        page, count = strict_page(page, count)
        start, end = page_bounds(page, count)
        friends = []
        for member in self.client.zrange(friends_key(account_id), start, end):
            try:
                account = self.directory.get(int(member))
            except (NotFound, Internal, ValueError) as exc:
                self.logger.warning(f"[friend-list] account={account_id} skipping friend {member}: {exc}")
                continue
            friends.append(Friend(friend_id=account.id, username=account.username))
        return friends


class FriendRequestLedger:
    """Pending friend requests: absent -> pending -> (accepted | rejected) -> absent."""

    def __init__(self, client, directory, graph: FriendshipGraph, clock=time.time, logger=None):
        self.client = client
        self.directory = directory
        self.graph = graph
        self.clock = clock
        self.logger = logger or logging.getLogger('ladder')

    @translate_store_errors
    def send(self, requester_id: int, target_id) -> None:
        target_id = parse_account_id(target_id, 'userid')
        if requester_id == target_id:
            raise InvalidArgument('Cannot send friend request to oneself.')
        if not self.client.exists(account_key(target_id)):
            raise NotFound('Target user does not exist.')
        # re-sending only refreshes the timestamp
        self.client.zadd(friend_requests_key(target_id), {str(requester_id): self.clock()})
        self.logger.info(f"[friend-request] {requester_id} -> {target_id}")

    @translate_store_errors
    def is_pending(self, target_id: int, requester_id: int) -> bool:
        return self.client.zscore(friend_requests_key(target_id), str(requester_id)) is not None

    @translate_store_errors
    def list(self, target_id: int, page, count) -> List[FriendRequest]:
        """List pending requests, oldest first.

        Every requester must resolve to an account record; one that does not
        fails the whole page with Internal.
        """
        page, count = strict_page(page, count)
        start, end = page_bounds(page, count)
        rows = self.client.zrange(friend_requests_key(target_id), start, end, withscores=True)
        requests = []
        for member, sent_at in rows:
            try:
                account = self.directory.get(int(member))
            except (NotFound, Internal, ValueError) as exc:
                self.logger.error(f"[friend-request-list] account={target_id} cannot resolve requester {member}: {exc}")
                raise Internal('Error retrieving user data') from exc
            requests.append(FriendRequest(requester_id=account.id, username=account.username, sent_at=sent_at))
        return requests

    @translate_store_errors
    def respond(self, target_id: int, requester_id, decision: str) -> None:
        """Accept or reject a pending request.

        The pending set is WATCHed, so of two concurrent responses only one
        commits; the other sees the request gone and fails with NotFound.
        """
        if decision not in DECISIONS:
            raise InvalidArgument('Invalid status')
        requester_id = parse_account_id(requester_id, 'requester_id')
        key = friend_requests_key(target_id)
        member = str(requester_id)

        with self.client.pipeline() as pipe:
            try:
                pipe.watch(key)
                if pipe.zscore(key, member) is None:
                    raise NotFound('Friend request not found')
                pipe.multi()
                if decision == ACCEPT:
                    self.graph.link(pipe, target_id, requester_id, self.clock())
                pipe.zrem(key, member)
                pipe.execute()
            except WatchError:
                if not self.is_pending(target_id, requester_id):
                    raise NotFound('Friend request not found') from None
                raise Conflict('Friend request changed while responding, try again') from None

        self.logger.info(f"[friend-request] {requester_id} -> {target_id} {decision}ed")
