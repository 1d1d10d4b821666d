"""Key layout in the redis store.

String keys hold account records, username index entries and tokens; sorted
sets hold pending friend requests, friendships and the global leaderboard.
"""

ACCOUNT_PREFIX = 'user:'
USERNAME_PREFIX = 'username:'
NEXT_ACCOUNT_ID = 'next_user_id'
TOKEN_PREFIX = 'token:'
FRIEND_REQUEST_PREFIX = 'friendrequest:'
FRIENDS_PREFIX = 'friends:'
LEADERBOARD = 'leaderboard'


def account_key(account_id) -> str:
    return f"{ACCOUNT_PREFIX}{account_id}"


def username_key(username: str) -> str:
    return f"{USERNAME_PREFIX}{username}"


def token_key(token: str) -> str:
    return f"{TOKEN_PREFIX}{token}"


def friend_requests_key(account_id) -> str:
    return f"{FRIEND_REQUEST_PREFIX}{account_id}"


def friends_key(account_id) -> str:
    return f"{FRIENDS_PREFIX}{account_id}"
