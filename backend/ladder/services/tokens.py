import json
import logging
import secrets
import time

from ladder.errors import Unauthenticated, translate_store_errors
from ladder.keys import token_key

BEARER_PREFIX = 'bearer '
TOKEN_TTL_SEC = 24 * 60 * 60


def strip_bearer(header_value) -> str:
    """Accept either 'Bearer <token>' or the raw token."""
    if not header_value:
        return ''
    value = header_value.strip()
    if value[:len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        value = value[len(BEARER_PREFIX):].strip()
    return value


class TokenStore:
    """Issues and resolves opaque bearer tokens.

    Each token is a string key carrying the owner id and an absolute expiry.
    The key also gets a native TTL, so expired tokens disappear from the store;
    the stored expiry is checked against ``clock`` as well, which lets callers
    inject time. There is no revocation: an account may hold any number of
    live tokens, and a missing, malformed or expired token all fail the same way.
    """

    def __init__(self, client, ttl_seconds: int = TOKEN_TTL_SEC, clock=time.time, logger=None):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = logger or logging.getLogger('ladder')

    @translate_store_errors
    def issue(self, account_id: int) -> str:
        token = secrets.token_urlsafe(32)
        record = {'account_id': int(account_id), 'expires_at': self.clock() + self.ttl_seconds}
        self.client.set(token_key(token), json.dumps(record), ex=self.ttl_seconds)
        return token

    @translate_store_errors
    def resolve(self, token_value) -> int:
        token = strip_bearer(token_value)
        if not token or any(ch.isspace() for ch in token):
            raise Unauthenticated()
        raw = self.client.get(token_key(token))
        if raw is None:
            raise Unauthenticated()
        try:
            record = json.loads(raw)
            account_id = int(record['account_id'])
            expires_at = float(record['expires_at'])
        except (TypeError, ValueError, KeyError) as exc:
            self.logger.warning(f"[token] malformed token record: {exc}")
            raise Unauthenticated() from exc
        if self.clock() >= expires_at:
            raise Unauthenticated()
        return account_id
