import mongomock
import pytest

from appointy.database import DatastoreClient


@pytest.fixture
def datastore():
    client = mongomock.MongoClient()
    store = DatastoreClient(client, 'appointy_test', 'users')
    store.ensure_indexes()
    try:
        yield store
    finally:
        client.drop_database('appointy_test')


@pytest.fixture
def unindexed_datastore():
    # mongomock scans unique indexes without locking, so concurrent tests skip them.
    client = mongomock.MongoClient()
    try:
        yield DatastoreClient(client, 'appointy_concurrency_test', 'users')
    finally:
        client.drop_database('appointy_concurrency_test')
