"""
Tests for the Cloud Datastore store client against a mocked client.
"""

from unittest.mock import MagicMock

import pytest

datastore = pytest.importorskip("google.cloud.datastore")

from entitystore.accessor import KIND_GAME, CollectionAccessor  # noqa: E402
from entitystore.models.exceptions import NotFoundError, StoreWriteError  # noqa: E402
from entitystore.models.query import MoreResults, Query  # noqa: E402
from entitystore.models.record import Property  # noqa: E402
from entitystore.stores.datastore_store import DatastoreStore  # noqa: E402

PROJECT = "test-project"


def make_key(*path):
    return datastore.Key(*path, project=PROJECT)


def make_entity(kind, id, **fields):
    entity = datastore.Entity(key=make_key(kind, id))
    entity.update(fields)
    return entity


@pytest.fixture
def client():
    """Provide a mocked datastore.Client building real keys."""
    mock = MagicMock()
    mock.key.side_effect = make_key
    return mock


@pytest.fixture
def ds_store(client):
    return DatastoreStore(client)


def fetch_result(entities, next_page_token):
    iterator = MagicMock()
    iterator.pages = iter([entities])
    iterator.next_page_token = next_page_token
    query = MagicMock()
    query.fetch.return_value = iterator
    return query


class TestDatastoreStore:
    """Tests for DatastoreStore."""

    def test_key(self, ds_store):
        """Test complete and partial key construction."""
        assert ds_store.key("Game", 5).id == 5
        assert ds_store.key("Game").is_partial

    async def test_get(self, ds_store, client):
        """Test get passes through the client's entity."""
        entity = make_entity("Game", 3, name="Go")
        client.get.return_value = entity

        record = await ds_store.get(make_key("Game", 3))

        assert record is entity
        client.get.assert_called_once_with(make_key("Game", 3))

    async def test_get_missing(self, ds_store, client):
        """Test get returns None when the client finds nothing."""
        client.get.return_value = None

        assert await ds_store.get(make_key("Game", 3)) is None

    async def test_put_builds_entity(self, ds_store, client):
        """Test put sends an entity with fields and index exclusions."""
        key = await ds_store.put(
            make_key("Game", 8),
            [Property("name", "Go", False), Property("rules", "long", True)],
        )

        sent = client.put.call_args.args[0]
        assert isinstance(sent, datastore.Entity)
        assert dict(sent) == {"name": "Go", "rules": "long"}
        assert sent.exclude_from_indexes == {"rules"}
        assert key.id == 8

    async def test_put_returns_completed_key(self, ds_store, client):
        """Test the key completed by the client is returned."""

        def complete(entity):
            entity.key = entity.key.completed_key(1234)

        client.put.side_effect = complete

        key = await ds_store.put(make_key("Game"), [Property("name", "Go")])

        assert key.id == 1234

    async def test_delete(self, ds_store, client):
        """Test delete forwards the key."""
        await ds_store.delete(make_key("Game", 2))

        client.delete.assert_called_once_with(make_key("Game", 2))

    async def test_run_query_with_more_results(self, ds_store, client):
        """Test a page token maps to a continuation and str cursor."""
        entities = [make_entity("Game", 1, name="a"), make_entity("Game", 2, name="b")]
        client.query.return_value = fetch_result(entities, b"Q1VSU09S")

        result = await ds_store.run_query(
            Query(kind="Game", order="name", limit=2, start_cursor="START")
        )

        client.query.assert_called_once_with(kind="Game", order=["name"])
        client.query.return_value.fetch.assert_called_once_with(limit=2, start_cursor="START")
        assert result.records == entities
        assert result.more_results == MoreResults.MORE_RESULTS_AFTER_LIMIT
        assert result.end_cursor == "Q1VSU09S"

    async def test_run_query_exhausted(self, ds_store, client):
        """Test a missing page token maps to NO_MORE_RESULTS."""
        client.query.return_value = fetch_result([], None)

        result = await ds_store.run_query(Query(kind="Game", order="name", limit=2))

        assert result.records == []
        assert result.more_results == MoreResults.NO_MORE_RESULTS
        assert result.end_cursor is None


class TestAccessorOverDatastore:
    """Tests for the accessor wired to DatastoreStore."""

    async def test_read_decodes_entity(self, ds_store, client):
        """Test read injects the Datastore key id."""
        client.get.return_value = make_entity("Game", 77, name="Go")

        entity = await CollectionAccessor(ds_store).read(KIND_GAME, "77")

        assert entity == {"name": "Go", "id": 77}

    async def test_read_not_found(self, ds_store, client):
        """Test a None lookup becomes NotFoundError."""
        client.get.return_value = None

        with pytest.raises(NotFoundError):
            await CollectionAccessor(ds_store).read(KIND_GAME, "77")

    async def test_list_pages(self, ds_store, client):
        """Test list maps the page token to next_cursor."""
        client.query.return_value = fetch_result([make_entity("Game", 1, name="a")], b"TOKEN")

        entities, cursor = await CollectionAccessor(ds_store).list_games(1)

        assert entities == [{"name": "a", "id": 1}]
        assert cursor == "TOKEN"

    async def test_write_error(self, ds_store, client):
        """Test client failures surface as StoreWriteError with the cause."""
        failure = RuntimeError("deadline exceeded")
        client.put.side_effect = failure

        with pytest.raises(StoreWriteError) as exc_info:
            await CollectionAccessor(ds_store).create(KIND_GAME, {"name": "Go"})

        assert exc_info.value.cause is failure
