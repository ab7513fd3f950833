import logging
from typing import Any

import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    PyMongoError,
    ServerSelectionTimeoutError,
)

logger = logging.getLogger(__name__)


class DatastoreError(Exception):
    """Base class for failures raised by the datastore client."""


class DatastoreConnectionError(DatastoreError, ConnectionError):
    """The datastore could not be reached."""


class DatastoreWriteError(DatastoreError):
    """The datastore rejected a write."""


class DuplicateDocumentError(DatastoreWriteError):
    """A unique index rejected the document."""


class DatastoreTimeoutError(DatastoreError):
    """The request deadline expired before the datastore answered."""


class DocumentNotFound(DatastoreError):
    """No document matches the requested identifier."""


def translate_error(exc: PyMongoError) -> DatastoreError:
    # NetworkTimeout is an AutoReconnect, so check timeouts before connection failures.
    if isinstance(exc, ServerSelectionTimeoutError):
        return DatastoreConnectionError(str(exc))
    if isinstance(exc, DuplicateKeyError):
        return DuplicateDocumentError(str(exc))
    if getattr(exc, 'timeout', False):
        return DatastoreTimeoutError(str(exc))
    if isinstance(exc, ConnectionFailure):
        return DatastoreConnectionError(str(exc))
    return DatastoreWriteError(str(exc))


def parse_object_id(value: str) -> ObjectId | None:
    # ObjectId(None) would mint a fresh id.
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class DatastoreClient:
    """Shared handle on one collection of a MongoDB database.

    Built once at startup and handed to request handlers; pymongo keeps its own
    connection pool, so instances are safe to use from concurrent workers.
    """

    def __init__(self, client: MongoClient, database_name: str, collection_name: str) -> None:
        self.client = client
        self.database_name = database_name
        self.collection_name = collection_name
        self.collection: Collection = client[database_name][collection_name]

    @classmethod
    def connect(
        cls,
        uri: str,
        database_name: str,
        collection_name: str,
        timeout: float,
    ) -> 'DatastoreClient':
        timeout_ms = int(timeout * 1000)
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            retryWrites=False,
        )
        try:
            client.admin.command('ping')
        except PyMongoError as exc:
            client.close()
            raise DatastoreConnectionError(f'Could not reach datastore: {exc}') from exc

        logger.info('Connected to datastore database=%s collection=%s', database_name, collection_name)
        return cls(client, database_name, collection_name)

    def ensure_indexes(self) -> None:
        try:
            self.collection.create_index([('email', ASCENDING)], unique=True, name='uniq_email')
        except PyMongoError as exc:
            raise translate_error(exc) from exc

    def ping(self, timeout: float | None = None) -> bool:
        try:
            with pymongo.timeout(timeout):
                self.client.admin.command('ping')
        except PyMongoError:
            logger.warning('Datastore ping failed', exc_info=True)
            return False
        return True

    def insert_one(self, document: dict[str, Any], timeout: float | None = None) -> ObjectId:
        # pymongo writes the generated _id back into the dict it is given.
        payload = dict(document)
        payload.pop('_id', None)
        try:
            with pymongo.timeout(timeout):
                result = self.collection.insert_one(payload)
        except PyMongoError as exc:
            raise translate_error(exc) from exc
        return result.inserted_id

    def find_by_id(self, document_id: str | ObjectId, timeout: float | None = None) -> dict[str, Any]:
        object_id = document_id if isinstance(document_id, ObjectId) else parse_object_id(document_id)
        if object_id is None:
            raise DocumentNotFound(f'{document_id!r} is not a valid identifier')

        try:
            with pymongo.timeout(timeout):
                document = self.collection.find_one({'_id': object_id})
        except PyMongoError as exc:
            raise translate_error(exc) from exc

        if document is None:
            raise DocumentNotFound(f'No document with id {object_id}')
        return document

    def close(self) -> None:
        self.client.close()
