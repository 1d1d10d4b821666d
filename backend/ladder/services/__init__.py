"""Identity, social graph and ranking services.

Each service wraps the shared redis client; route handlers and CLI commands
build them through the factories below so configuration and the logger come
from the current app.
"""

from flask import current_app

from ladder import store
from ladder.services.accounts import AccountDirectory
from ladder.services.friendships import FriendRequestLedger, FriendshipGraph
from ladder.services.leaderboard import Leaderboard
from ladder.services.tokens import TokenStore


def token_store() -> TokenStore:
    return TokenStore(
        store.client,
        ttl_seconds=current_app.config.get('TOKEN_TTL_SEC', 86400),
        logger=current_app.logger,
    )


def account_directory() -> AccountDirectory:
    return AccountDirectory(store.client, logger=current_app.logger)


def friendship_graph() -> FriendshipGraph:
    return FriendshipGraph(store.client, account_directory(), logger=current_app.logger)


def friend_request_ledger() -> FriendRequestLedger:
    directory = account_directory()
    return FriendRequestLedger(
        store.client,
        directory,
        FriendshipGraph(store.client, directory, logger=current_app.logger),
        logger=current_app.logger,
    )


def leaderboard() -> Leaderboard:
    cfg = current_app.config
    return Leaderboard(
        store.client,
        account_directory(),
        default_page=int(cfg.get('LEADERBOARD_DEFAULT_PAGE', 1)),
        default_count=int(cfg.get('LEADERBOARD_DEFAULT_COUNT', 10)),
        logger=current_app.logger,
    )
