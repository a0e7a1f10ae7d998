"""
Session data models.

Contains data classes for credentials, the live session snapshot and
its persisted form.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import json


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


@dataclass
class Credentials:
    """
    Login credentials.

    The password is held only until the token exchange succeeds.
    """
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def clear(self) -> None:
        """Forget the password."""
        self.password = None

    def __repr__(self) -> str:
        masked = '***' if self.password else None
        return f"Credentials(username={self.username!r}, password={masked!r})"


@dataclass(frozen=True)
class Session:
    """
    Authenticated identity.

    Instances are immutable snapshots; SessionManager publishes a new one
    on every successful authenticate() or load().

    Attributes:
        username: Login name
        token: Bearer access token
        account: Account number
        expires: Absolute, timezone-aware expiry
    """
    username: str
    token: str
    account: str
    expires: datetime

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """True if the token is present and has not expired."""
        now = now or utcnow()
        return bool(self.token) and self.expires is not None and now < self.expires

    def __repr__(self) -> str:
        return (
            f"Session(username={self.username!r}, account={self.account!r}, "
            f"expires={self.expires.isoformat() if self.expires else None!r})"
        )


@dataclass
class SessionRecord:
    """
    Durable form of a Session.

    Serialized as ``{username, password, token, account, expires}`` with
    ``expires`` in ISO-8601. ``password`` is only populated when the
    manager is configured to persist it.
    """
    username: str
    token: str
    account: str
    expires: datetime
    password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_session(cls, session: Session, password: Optional[str] = None) -> 'SessionRecord':
        return cls(
            username=session.username,
            token=session.token,
            account=session.account,
            expires=session.expires,
            password=password,
        )

    def to_session(self) -> Session:
        return Session(
            username=self.username,
            token=self.token,
            account=self.account,
            expires=self.expires,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True unless expires lies strictly in the future."""
        return not (now or utcnow()) < self.expires

    def to_dict(self) -> dict:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            'username': self.username,
            'password': self.password,
            'token': self.token,
            'account': self.account,
            'expires': self.expires.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SessionRecord':
        """
        Create from dictionary.

        Naive timestamps are read as UTC.

        Raises:
            KeyError: If a required field is missing
            ValueError: If expires is not ISO-8601
        """
        expires = datetime.fromisoformat(data['expires'])
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return cls(
            username=data['username'],
            token=data['token'],
            account=data['account'],
            expires=expires,
            password=data.get('password'),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'SessionRecord':
        return cls.from_dict(json.loads(json_str))
