import mongomock
import pytest
from fastapi.testclient import TestClient

from appointy import main
from appointy.database import DatastoreClient, DatastoreConnectionError, DuplicateDocumentError


@pytest.fixture(autouse=True)
def reset_datastore():
    main.app.state.datastore = None
    yield
    main.app.state.datastore = None


def test_initialize_datastore_stores_connected_client(monkeypatch: pytest.MonkeyPatch) -> None:
    connected = DatastoreClient(mongomock.MongoClient(), 'appointy_test', 'users')
    monkeypatch.setattr(main.DatastoreClient, 'connect', lambda *args, **kwargs: connected)

    main.initialize_datastore()

    assert main.app.state.datastore is connected
    assert 'uniq_email' in connected.collection.index_information()


def test_initialize_datastore_keeps_serving_when_connection_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_connect(*args, **kwargs):
        raise DatastoreConnectionError('Could not reach datastore')

    monkeypatch.setattr(main.DatastoreClient, 'connect', fail_connect)

    main.initialize_datastore()
    response = TestClient(main.app).post(
        '/users',
        json={'name': 'Camboda Sun', 'email': 'sun@gmail.com', 'password': '456'},
    )

    assert main.app.state.datastore is None
    assert response.status_code == 503


def test_close_datastore_closes_client() -> None:
    mongo_client = mongomock.MongoClient()
    main.app.state.datastore = DatastoreClient(mongo_client, 'appointy_test', 'users')

    main.close_datastore()

    assert main.app.state.datastore is None


def test_root_reports_datastore_status(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(main.app)

    assert client.get('/').json() == {'status': 'Appointy Users API Running', 'datastore': 'down'}

    datastore = DatastoreClient(mongomock.MongoClient(), 'appointy_test', 'users')
    monkeypatch.setattr(datastore, 'ping', lambda timeout=None: True)
    main.app.state.datastore = datastore

    assert client.get('/').json() == {'status': 'Appointy Users API Running', 'datastore': 'up'}


def test_initialize_datastore_closes_client_when_index_setup_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    connected = DatastoreClient(mongomock.MongoClient(), 'appointy_test', 'users')
    closed = []

    def fail_indexes():
        raise DuplicateDocumentError('E11000 duplicate key')

    monkeypatch.setattr(connected, 'ensure_indexes', fail_indexes)
    monkeypatch.setattr(connected, 'close', lambda: closed.append(True))
    monkeypatch.setattr(main.DatastoreClient, 'connect', lambda *args, **kwargs: connected)

    main.initialize_datastore()

    assert main.app.state.datastore is None
    assert closed == [True]
