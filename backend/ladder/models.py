from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import json

from flask_login import UserMixin

from ladder import bcrypt
from ladder.errors import Internal


@dataclass
class Account:
    id: int
    username: str
    name: str = ''
    surname: str = ''
    password_hash: str = ''

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash or not password:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'surname': self.surname,
            'username': self.username,
        }

    def to_json(self) -> str:
        return json.dumps({
            'id': self.id,
            'name': self.name,
            'surname': self.surname,
            'username': self.username,
            'password_hash': self.password_hash,
        })

    @classmethod
    def from_json(cls, raw) -> 'Account':
        """Parse a stored account record.

        Raises Internal when the record is not valid JSON or lacks the id or
        username fields, since such a record cannot be repaired by the caller.
        """
        try:
            data = json.loads(raw)
            return cls(
                id=int(data['id']),
                username=str(data['username']),
                name=data.get('name') or '',
                surname=data.get('surname') or '',
                password_hash=data.get('password_hash') or '',
            )
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise Internal(f'Malformed account record: {exc}') from exc


@dataclass
class Principal(UserMixin):
    """The authenticated caller, as resolved from a bearer token."""

    id: int


@dataclass
class FriendRequest:
    requester_id: int
    username: str
    sent_at: float

    def to_dict(self):
        return {
            'user_id': self.requester_id,
            'username': self.username,
            'date': datetime.fromtimestamp(self.sent_at, tz=timezone.utc).isoformat(),
        }


@dataclass
class Friend:
    friend_id: int
    username: str

    def to_dict(self):
        return {'user_id': self.friend_id, 'username': self.username}


@dataclass
class LeaderboardEntry:
    account_id: int
    username: Optional[str]
    rank: int
    score: float

    def to_dict(self):
        return {
            'id': self.account_id,
            'username': self.username,
            'rank': self.rank,
            'score': self.score,
        }
