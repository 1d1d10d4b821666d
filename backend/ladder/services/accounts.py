import logging
from typing import Dict, List, Optional

from redis.exceptions import RedisError

from ladder.errors import (
    Conflict,
    Forbidden,
    Internal,
    InvalidArgument,
    InvalidCredentials,
    NotFound,
    translate_store_errors,
)
from ladder.keys import ACCOUNT_PREFIX, NEXT_ACCOUNT_ID, account_key, username_key
from ladder.models import Account


def _require_text(value, field: str) -> str:
    if value is not None and not isinstance(value, str):
        raise InvalidArgument(f'{field} must be a string')
    if not value:
        raise InvalidArgument(f'{field} is required')
    return value


def _optional_text(value, field: str) -> str:
    if value is None or value == '':
        return ''
    if not isinstance(value, str):
        raise InvalidArgument(f'{field} must be a string')
    return value


class AccountDirectory:
    """Account records keyed by id, plus a username -> id index.

    The two keys are written one after the other; the store only guarantees
    atomicity per key. When the second write fails the account record is left
    orphaned and logged, and ``reconcile`` can restore the missing index.
    """

    def __init__(self, client, logger=None):
        self.client = client
        self.logger = logger or logging.getLogger('ladder')

    @translate_store_errors
    def register(self, username: str, password: str, name: str = '', surname: str = '') -> Account:
        username = _require_text(username, 'username')
        password = _require_text(password, 'password')
        name = _optional_text(name, 'name')
        surname = _optional_text(surname, 'surname')
        if self.client.exists(username_key(username)):
            raise Conflict('Username already exists!')

        account = Account(id=0, username=username, name=name, surname=surname)
        account.set_password(password)
        account.id = int(self.client.incr(NEXT_ACCOUNT_ID))
        self.client.set(account_key(account.id), account.to_json())

        try:
            claimed = self.client.set(username_key(username), account.id, nx=True)
        except RedisError:
            self.logger.error(f"[reconcile] account={account.id} written without username index for '{username}'")
            raise
        if not claimed:
            # a concurrent registration took the username between check and claim
            self.client.delete(account_key(account.id))
            raise Conflict('Username already exists!')

        self.logger.info(f"[register] account={account.id} username={username}")
        return account

    @translate_store_errors
    def authenticate(self, username: str, password: str) -> Account:
        username = _optional_text(username, 'username')
        password = _optional_text(password, 'password')
        account_id = self._lookup_username(username)
        if account_id is None:
            raise NotFound('User not found!')
        raw = self.client.get(account_key(account_id))
        if raw is None:
            self.logger.error(f"[reconcile] username '{username}' points to missing account={account_id}")
            raise NotFound('User not found!')
        account = Account.from_json(raw)
        if not account.check_password(password):
            raise InvalidCredentials()
        return account

    @translate_store_errors
    def get(self, account_id) -> Account:
        raw = self.client.get(account_key(account_id))
        if raw is None:
            raise NotFound('User not found!')
        return Account.from_json(raw)

    @translate_store_errors
    def exists(self, account_id) -> bool:
        return bool(self.client.exists(account_key(account_id)))

    @translate_store_errors
    def find_id(self, username: str) -> int:
        if not username:
            raise InvalidArgument('Username is required')
        account_id = self._lookup_username(username)
        if account_id is None:
            raise NotFound('User not found')
        return account_id

    @translate_store_errors
    def update(self, account_id: int, patch: dict) -> Account:
        """Apply a profile patch on behalf of the authenticated ``account_id``.

        ``username``, ``name`` and ``surname`` are always overwritten, so
        leaving one out of the patch clears it. The username index only moves
        when the new username is non-empty and different; an account whose
        username is cleared keeps its old index entry and still logs in with
        it. ``password`` is re-hashed only when non-empty.
        """
        try:
            patch_id = int(patch.get('id'))
        except (TypeError, ValueError):
            patch_id = None
        if patch_id != account_id:
            raise Forbidden("Cannot change another user's information")

        username = _optional_text(patch.get('username'), 'username')
        name = _optional_text(patch.get('name'), 'name')
        surname = _optional_text(patch.get('surname'), 'surname')
        password = _optional_text(patch.get('password'), 'password')

        account = self.get(account_id)

        if username and username != account.username:
            self._move_username(account, username)
        account.username = username
        account.name = name
        account.surname = surname

        if password:
            account.set_password(password)

        self.client.set(account_key(account.id), account.to_json())
        self.logger.info(f"[update] account={account.id}")
        return account

    @translate_store_errors
    def reconcile(self) -> Dict[str, List]:
        """Restore username index entries missing for stored account records.

        Usernames now owned by a different account are reported, not reassigned.
        """
        report = {'repaired': [], 'conflicts': [], 'malformed': []}
        for key in self.client.scan_iter(match=f'{ACCOUNT_PREFIX}*'):
            raw = self.client.get(key)
            if raw is None:
                continue
            try:
                account = Account.from_json(raw)
            except Internal:
                report['malformed'].append(key)
                continue
            if not account.username:
                # cleared by an update; nothing to index
                continue
            owner = self._lookup_username(account.username)
            if owner == account.id:
                continue
            if owner is None and self.client.set(username_key(account.username), account.id, nx=True):
                self.logger.warning(f"[reconcile] restored username index '{account.username}' -> {account.id}")
                report['repaired'].append(account.id)
            else:
                report['conflicts'].append(account.id)
        return report

    def _lookup_username(self, username: str) -> Optional[int]:
        raw = self.client.get(username_key(username))
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError as exc:
            raise Internal(f"Malformed username index for '{username}'") from exc

    def _move_username(self, account: Account, new_username: str) -> None:
        if not self.client.set(username_key(new_username), account.id, nx=True):
            owner = self._lookup_username(new_username)
            if owner != account.id:
                raise Conflict('Username already exists!')
        if self._lookup_username(account.username) == account.id:
            self.client.delete(username_key(account.username))
