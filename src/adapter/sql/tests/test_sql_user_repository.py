"""Integration tests for SqlUserRepository against in-memory SQLite."""

import unittest
import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.fake.clock import FakeClock
from adapter.security.password_hasher import BcryptPasswordHasher
from adapter.sql.connection import get_engine
from adapter.sql.schema import create_schema, messages, users
from adapter.sql.user_repository import SqlUserRepository
from adapter.system.clock import SystemClock
from domain.model.errors import DuplicateError, NotFoundError
from services import auth_service, user_service

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class SqlRepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.engine = get_engine('sqlite://')
        create_schema(self.engine)
        self.repo = SqlUserRepository(self.engine)
        self.clock = FakeClock(start=START)
        self.hasher = BcryptPasswordHasher(rounds=4)

    def tearDown(self):
        self.engine.dispose()

    def _register(self, username, first, last, phone, password='pw-123'):
        return auth_service.register(
            self.repo, username, password, first, last, phone,
            hasher=self.hasher, clock=self.clock,
        )

    def _send(self, from_username, to_username, body):
        with self.engine.begin() as conn:
            result = conn.execute(messages.insert().values(
                from_username=from_username,
                to_username=to_username,
                body=body,
                sent_at=self.clock.now(),
            ))
        return result.inserted_primary_key[0]


class TestSqlUsers(SqlRepositoryTestCase):

    def test_register_and_get(self):
        user = self._register('alice', 'Alice', 'Liddell', '111')
        profile = user_service.get_user(self.repo, 'alice')

        self.assertEqual(profile.first_name, 'Alice')
        self.assertEqual(profile.last_name, 'Liddell')
        self.assertEqual(profile.phone, '111')
        self.assertEqual(profile.join_at, START)
        self.assertEqual(profile.last_login_at, START)
        self.assertNotEqual(user.password, 'pw-123')

    def test_duplicate_username(self):
        self._register('alice', 'Alice', 'Liddell', '111')
        with self.assertRaises(DuplicateError):
            self._register('alice', 'Other', 'Person', '999')

    def test_authenticate(self):
        self._register('alice', 'Alice', 'Liddell', '111')

        self.assertTrue(auth_service.authenticate(self.repo, 'alice', 'pw-123', hasher=self.hasher))
        self.assertFalse(auth_service.authenticate(self.repo, 'alice', 'nope', hasher=self.hasher))
        self.assertFalse(auth_service.authenticate(self.repo, 'ghost', 'pw-123', hasher=self.hasher))

    def test_update_login_timestamp(self):
        self._register('alice', 'Alice', 'Liddell', '111')
        before = user_service.get_user(self.repo, 'alice').last_login_at

        auth_service.update_login_timestamp(self.repo, 'alice', clock=self.clock)

        after = user_service.get_user(self.repo, 'alice').last_login_at
        self.assertGreater(after, before)

    def test_update_login_timestamp_unknown(self):
        with self.assertRaises(NotFoundError):
            auth_service.update_login_timestamp(self.repo, 'ghost', clock=self.clock)

    def test_list_users(self):
        self.assertEqual(user_service.list_users(self.repo), [])

        self._register('alice', 'Alice', 'Liddell', '111')
        self._register('bob', 'Bob', 'Builder', '222')

        usernames = sorted(u.username for u in user_service.list_users(self.repo))
        self.assertEqual(usernames, ['alice', 'bob'])

    def test_get_unknown(self):
        with self.assertRaises(NotFoundError):
            user_service.get_user(self.repo, 'ghost')


class TestSqlTimestamps(SqlRepositoryTestCase):
    """SQLite stores no timezone; values must still come back as aware UTC."""

    def test_register_with_system_clock_round_trips(self):
        user = auth_service.register(
            self.repo, 'alice', 'pw-123', 'Alice', 'Liddell', '111',
            hasher=self.hasher, clock=SystemClock(),
        )
        profile = user_service.get_user(self.repo, 'alice')

        self.assertEqual(profile.join_at.tzinfo, timezone.utc)
        self.assertEqual(user.join_at, profile.join_at)
        self.assertEqual(user.last_login_at, profile.last_login_at)

    def test_login_update_with_system_clock_is_comparable(self):
        self._register('alice', 'Alice', 'Liddell', '111')
        before = user_service.get_user(self.repo, 'alice').last_login_at

        auth_service.update_login_timestamp(self.repo, 'alice', clock=SystemClock())

        after = user_service.get_user(self.repo, 'alice').last_login_at
        self.assertGreater(after, before)

    def test_other_offsets_are_normalised_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        self.repo.create('bob', 'hash', 'Bob', 'Builder', '222', datetime(2026, 3, 1, 14, 0, tzinfo=plus_two))

        profile = user_service.get_user(self.repo, 'bob')
        self.assertEqual(profile.join_at, datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))
        self.assertEqual(profile.join_at.utcoffset(), timedelta(0))

    def test_naive_values_are_read_as_utc(self):
        self.repo.create('carol', 'hash', 'Carol', 'Danvers', '333', datetime(2026, 3, 1, 9, 0))

        with self.engine.connect() as conn:
            stored = conn.execute(users.select().where(users.c.username == 'carol')).one()
        self.assertEqual(stored.join_at, datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))

    def test_message_timestamps_are_aware(self):
        self._register('alice', 'Alice', 'Liddell', '111')
        self._register('bob', 'Bob', 'Builder', '222')
        self._send('alice', 'bob', 'hi')

        sent = user_service.messages_from(self.repo, 'alice')[0]
        self.assertEqual(sent.sent_at.tzinfo, timezone.utc)


class TestSqlMessageJoins(SqlRepositoryTestCase):

    def setUp(self):
        super().setUp()
        self._register('alice', 'Alice', 'Liddell', '111')
        self._register('bob', 'Bob', 'Builder', '222')
        self._register('carol', 'Carol', 'Danvers', '333')
        self.message_id = self._send('alice', 'bob', 'hello bob')

    def test_messages_from_and_to_match(self):
        sent = user_service.messages_from(self.repo, 'alice')
        received = user_service.messages_to(self.repo, 'bob')

        self.assertEqual(len(sent), 1)
        self.assertEqual(len(received), 1)
        self.assertEqual(sent[0].to_user.username, 'bob')
        self.assertEqual(sent[0].to_user.phone, '222')
        self.assertEqual(received[0].from_user.username, 'alice')
        self.assertEqual(received[0].from_user.first_name, 'Alice')

        self.assertEqual(sent[0].id, self.message_id)
        self.assertEqual(sent[0].id, received[0].id)
        self.assertEqual(sent[0].body, received[0].body)
        self.assertEqual(sent[0].sent_at, received[0].sent_at)
        self.assertIsNone(sent[0].read_at)

    def test_messages_are_in_insertion_order(self):
        second = self._send('alice', 'carol', 'hello carol')
        ids = [m.id for m in user_service.messages_from(self.repo, 'alice')]
        self.assertEqual(ids, [self.message_id, second])

    def test_empty_relation_policies(self):
        self.assertEqual(user_service.messages_from(self.repo, 'carol', empty_as_not_found=False), [])
        with self.assertRaises(NotFoundError):
            user_service.messages_from(self.repo, 'carol', empty_as_not_found=True)
        with self.assertRaises(NotFoundError):
            user_service.messages_to(self.repo, 'ghost', empty_as_not_found=False)


if __name__ == '__main__':
    unittest.main()
