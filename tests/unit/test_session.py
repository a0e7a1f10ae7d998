"""
Unit tests for session models and storage.

Tests Session, SessionRecord, Credentials, JSONSession and MemorySession.
"""
import json
import os
import stat
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from robinpy.core.exceptions import FileSystemError
from robinpy.core.session import (
    Credentials,
    JSONSession,
    MemorySession,
    Session,
    SessionRecord,
    SessionStorage,
)


@pytest.fixture
def record(now):
    return SessionRecord(
        username='user@example.com',
        token='token-abc123',
        account='5RY12345',
        expires=now + timedelta(hours=24, microseconds=123456),
    )


class TestSession:
    """Tests for the Session snapshot."""

    def test_valid(self, now):
        session = Session('u', 'tok', 'acct', now + timedelta(seconds=1))
        assert session.is_valid(now) is True

    def test_expired(self, now):
        session = Session('u', 'tok', 'acct', now)
        assert session.is_valid(now) is False

    def test_empty_token(self, now):
        session = Session('u', '', 'acct', now + timedelta(days=1))
        assert session.is_valid(now) is False

    def test_immutable(self, now):
        session = Session('u', 'tok', 'acct', now)
        with pytest.raises(AttributeError):
            session.token = 'other'

    def test_repr_hides_token(self, now):
        assert 'tok-secret' not in repr(Session('u', 'tok-secret', 'acct', now))


class TestCredentials:
    """Tests for Credentials."""

    def test_clear(self):
        credentials = Credentials('u', 'pw')
        credentials.clear()
        assert credentials.password is None
        assert credentials.username == 'u'

    def test_repr_masks_password(self):
        assert 'hunter2' not in repr(Credentials('u', 'hunter2'))


class TestSessionRecord:
    """Tests for SessionRecord."""

    def test_to_dict_keys(self, record):
        assert set(record.to_dict()) == {'username', 'password', 'token', 'account', 'expires'}

    def test_expires_is_iso8601(self, record):
        data = record.to_dict()
        assert datetime.fromisoformat(data['expires']) == record.expires

    def test_json_round_trip_is_exact(self, record):
        restored = SessionRecord.from_json(record.to_json())

        assert restored.expires == record.expires
        assert restored.expires.microsecond == 123456
        assert restored == record

    def test_naive_timestamp_read_as_utc(self):
        restored = SessionRecord.from_dict({
            'username': 'u', 'token': 't', 'account': 'a',
            'expires': '2024-01-01T12:00:00',
        })
        assert restored.expires == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
        assert restored.password is None

    def test_is_expired(self, record, now):
        assert record.is_expired(now) is False
        assert record.is_expired(record.expires) is True

    def test_session_conversion(self, record):
        session = record.to_session()
        back = SessionRecord.from_session(session, password='pw')

        assert session.token == record.token
        assert back.password == 'pw'
        assert back.expires == record.expires


class TestMemorySession:
    """Tests for MemorySession storage."""

    def test_implements_protocol(self):
        assert isinstance(MemorySession(), SessionStorage)

    def test_save_and_load(self, record):
        storage = MemorySession()
        storage.save(record)

        assert storage.load() == record
        assert storage.exists() is True

    def test_load_empty(self):
        assert MemorySession().load() is None

    def test_stored_copy_is_isolated(self, record):
        storage = MemorySession()
        storage.save(record)
        record.token = 'changed'

        assert storage.load().token == 'token-abc123'

    def test_delete(self, record):
        storage = MemorySession()
        storage.save(record)
        storage.delete()

        assert storage.exists() is False


class TestJSONSession:
    """Tests for JSONSession storage."""

    def test_implements_protocol(self, tmp_path):
        assert isinstance(JSONSession(tmp_path / 's.json'), SessionStorage)

    def test_path_from_name(self, tmp_path):
        assert JSONSession('me', base_path=tmp_path).path == tmp_path / 'me.json'
        assert JSONSession('me').path.name == 'me.json'

    def test_missing_file(self, tmp_path):
        storage = JSONSession(tmp_path / 'missing.json')

        assert storage.load() is None
        assert storage.exists() is False

    def test_save_and_load(self, tmp_path, record):
        storage = JSONSession(tmp_path / 'nested' / 'session.json')
        storage.save(record)

        assert storage.load() == record

    def test_file_format(self, tmp_path, record):
        path = tmp_path / 'session.json'
        JSONSession(path).save(record)

        data = json.loads(path.read_text())
        assert data['token'] == 'token-abc123'
        assert data['account'] == '5RY12345'
        assert data['password'] is None

    @pytest.mark.skipif(os.name != 'posix', reason='POSIX permissions')
    def test_file_is_private(self, tmp_path, record):
        path = tmp_path / 'session.json'
        JSONSession(path).save(record)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_save_replaces_previous(self, tmp_path, record):
        storage = JSONSession(tmp_path / 'session.json')
        storage.save(record)
        record.token = 'second'
        storage.save(record)

        assert storage.load().token == 'second'
        assert [p.name for p in tmp_path.iterdir()] == ['session.json']

    def test_failed_write_keeps_previous(self, tmp_path, record):
        path = tmp_path / 'session.json'
        storage = JSONSession(path)
        storage.save(record)
        before = path.read_text()

        record.token = 'never-written'
        with patch('robinpy.core.session.json_session.os.replace', side_effect=OSError("disk full")):
            with pytest.raises(FileSystemError):
                storage.save(record)

        assert path.read_text() == before
        assert [p.name for p in tmp_path.iterdir()] == ['session.json']

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / 'session.json'
        path.write_text('{not json')

        with pytest.raises(FileSystemError):
            JSONSession(path).load()

    def test_file_not_utf8(self, tmp_path):
        path = tmp_path / 'session.json'
        path.write_bytes(b'\xff\xfe{garbage')

        with pytest.raises(FileSystemError, match='Corrupt'):
            JSONSession(path).load()

    def test_delete_is_idempotent(self, tmp_path, record):
        storage = JSONSession(tmp_path / 'session.json')
        storage.save(record)

        storage.delete()
        storage.delete()

        assert storage.exists() is False
