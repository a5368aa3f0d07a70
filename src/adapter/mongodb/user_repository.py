"""MongoDB implementation of UserRepository.

Users are keyed by username (`_id`), so the unique `_id` index enforces
username uniqueness. Message relations are assembled with `$lookup`.
"""

from datetime import datetime
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import MESSAGES_COLLECTION_NAME, USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError
from domain.model.message import MessageParty, ReceivedMessage, SentMessage
from domain.model.user import User, UserProfile, UserSummary

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]
        self.messages = db[MESSAGES_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for the messages collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            created = [
                create_index_safe(self.messages, [('from_username', 1), ('sent_at', 1)], 'idx_messages_from'),
                create_index_safe(self.messages, [('to_username', 1), ('sent_at', 1)], 'idx_messages_to'),
            ]
            return all(created)
        except PyMongoError as e:
            logger.error("Failed to create messages indexes", extra={"error": str(e)})
            return False

    def _to_profile(self, doc: dict) -> UserProfile:
        return UserProfile(
            username=doc['_id'],
            first_name=doc['first_name'],
            last_name=doc['last_name'],
            phone=doc['phone'],
            join_at=doc['join_at'],
            last_login_at=doc.get('last_login_at'),
        )

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        username: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        phone: str,
        joined_at: datetime,
    ) -> User:
        user_doc = {
            '_id': username,
            'password': password_hash,
            'first_name': first_name,
            'last_name': last_name,
            'phone': phone,
            'join_at': joined_at,
            'last_login_at': joined_at,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: username already exists", extra={"username": username})
            raise DuplicateError(username) from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"username": username, "error": str(e)})
            raise

        logger.info("User created", extra={"username": username})
        return User(
            username=username,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            join_at=joined_at,
            last_login_at=joined_at,
        )

    def update_last_login(self, username: str, at: datetime) -> bool:
        try:
            result = self.collection.update_one(
                {'_id': username},
                {'$set': {'last_login_at': at}}
            )
        except PyMongoError as e:
            logger.error("Failed to update last_login_at", extra={"username": username, "error": str(e)})
            raise

        # matched, not modified: an identical timestamp still counts as found
        if result.matched_count > 0:
            logger.debug("Updated last_login_at", extra={"username": username})
            return True
        return False

    # ── read operations ──────────────────────────────────────

    def get_password_hash(self, username: str) -> str | None:
        doc = self.collection.find_one({'_id': username}, {'password': 1})
        return doc['password'] if doc else None

    def list_summaries(self) -> list[UserSummary]:
        cursor = self.collection.find({}, {'first_name': 1, 'last_name': 1})
        return [
            UserSummary(username=doc['_id'], first_name=doc['first_name'], last_name=doc['last_name'])
            for doc in cursor
        ]

    def get_profile(self, username: str) -> UserProfile | None:
        doc = self.collection.find_one({'_id': username}, {'password': 0})
        return self._to_profile(doc) if doc else None

    def exists(self, username: str) -> bool:
        return self.collection.count_documents({'_id': username}, limit=1) > 0

    def _joined(self, match_field: str, other_field: str, username: str) -> list[dict]:
        """Messages where match_field == username, joined on other_field.

        `$unwind` drops messages whose counterpart has no user document,
        giving inner-join semantics.
        """
        pipeline = [
            {'$match': {match_field: username}},
            {'$sort': {'sent_at': 1, '_id': 1}},
            {'$lookup': {
                'from': USERS_COLLECTION_NAME,
                'localField': other_field,
                'foreignField': '_id',
                'as': 'other',
            }},
            {'$unwind': '$other'},
            {'$project': {
                'body': 1,
                'sent_at': 1,
                'read_at': 1,
                'other._id': 1,
                'other.first_name': 1,
                'other.last_name': 1,
                'other.phone': 1,
            }},
        ]
        return list(self.messages.aggregate(pipeline))

    @staticmethod
    def _party(doc: dict) -> MessageParty:
        other = doc['other']
        return MessageParty(
            username=other['_id'],
            first_name=other['first_name'],
            last_name=other['last_name'],
            phone=other['phone'],
        )

    def list_sent(self, username: str) -> list[SentMessage]:
        return [
            SentMessage(
                id=str(doc['_id']),
                to_user=self._party(doc),
                body=doc['body'],
                sent_at=doc['sent_at'],
                read_at=doc.get('read_at'),
            )
            for doc in self._joined('from_username', 'to_username', username)
        ]

    def list_received(self, username: str) -> list[ReceivedMessage]:
        return [
            ReceivedMessage(
                id=str(doc['_id']),
                from_user=self._party(doc),
                body=doc['body'],
                sent_at=doc['sent_at'],
                read_at=doc.get('read_at'),
            )
            for doc in self._joined('to_username', 'from_username', username)
        ]
