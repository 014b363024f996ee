"""
Unit tests for the command based index managers.
"""

from unittest.mock import AsyncMock

import pytest
from pymongo.errors import OperationFailure

from mdb_indexes.exceptions import EmptyKeyError, UnsupportedIndexTypeError
from mdb_indexes.indexes import (
    IndexBackend,
    IndexKeyType,
    IndexSpec,
    ModernCollectionIndexManager,
    ModernIndexManager,
    NamespacedIndex,
    encode_index,
)


def fail_listing(database, collection_name, code):
    """Make listIndexes on the given collection fail with an error code."""
    database[collection_name].list_indexes.return_value.to_list = AsyncMock(
        side_effect=OperationFailure("listIndexes failed", code=code)
    )


class TestModernCollectionIndexManager:
    """Test the collection level command based manager."""

    def test_backend_and_namespace(self, mock_database):
        manager = ModernCollectionIndexManager(mock_database, "users")

        assert manager.backend is IndexBackend.MODERN
        assert manager.namespace == "test_db.users"

    @pytest.mark.asyncio
    async def test_list_decodes_indexes(self, mock_database, id_index_doc):
        mock_database.set_indexes(
            "users",
            [id_index_doc, {"v": 2, "key": {"email": 1}, "name": "email_1", "unique": True}],
        )
        manager = ModernCollectionIndexManager(mock_database, "users")

        indexes = await manager.list()

        assert [index.name for index in indexes] == ["_id_", "email_1"]
        assert indexes[1].unique is True
        assert indexes[0].key == (("_id", IndexKeyType.ASCENDING),)

    @pytest.mark.asyncio
    async def test_list_missing_namespace_is_empty(self, mock_database):
        fail_listing(mock_database, "ghost", 26)
        manager = ModernCollectionIndexManager(mock_database, "ghost")

        assert await manager.list() == []

    @pytest.mark.asyncio
    async def test_list_other_failures_propagate(self, mock_database):
        fail_listing(mock_database, "users", 13)
        manager = ModernCollectionIndexManager(mock_database, "users")

        with pytest.raises(OperationFailure) as exc_info:
            await manager.list()

        assert exc_info.value.code == 13

    @pytest.mark.asyncio
    async def test_list_malformed_document(self, mock_database):
        mock_database.set_indexes("users", [{"key": {"a": "btree"}, "name": "a_btree"}])
        manager = ModernCollectionIndexManager(mock_database, "users")

        with pytest.raises(UnsupportedIndexTypeError):
            await manager.list()

    @pytest.mark.asyncio
    async def test_ensure_existing_key_under_other_name(self, mock_database, id_index_doc):
        """Test an index with the same key but another name counts as existing."""
        mock_database.set_indexes(
            "users", [id_index_doc, {"v": 2, "key": {"email": 1}, "name": "by_email"}]
        )
        manager = ModernCollectionIndexManager(mock_database, "users")

        created = await manager.ensure(IndexSpec(key=[("email", 1)], unique=True))

        assert created is False
        mock_database.command.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ensure_new_index(self, mock_database, id_index_doc, compound_index):
        mock_database.set_indexes("users", [id_index_doc])
        manager = ModernCollectionIndexManager(mock_database, "users")

        created = await manager.ensure(compound_index)

        assert created is True
        mock_database.command.assert_awaited_once_with(
            "createIndexes", "users", indexes=[encode_index(compound_index)]
        )

    @pytest.mark.asyncio
    async def test_ensure_key_order_matters(self, mock_database):
        mock_database.set_indexes("users", [{"key": {"b": -1, "a": 1}, "name": "b_-1_a_1"}])
        manager = ModernCollectionIndexManager(mock_database, "users")

        created = await manager.ensure(IndexSpec(key=[("a", 1), ("b", -1)]))

        assert created is True
        assert mock_database.command.await_count == 1

    @pytest.mark.asyncio
    async def test_ensure_on_missing_collection(self, mock_database, compound_index):
        fail_listing(mock_database, "fresh", 26)
        manager = ModernCollectionIndexManager(mock_database, "fresh")

        assert await manager.ensure(compound_index) is True
        assert mock_database.command.await_args.args == ("createIndexes", "fresh")

    @pytest.mark.asyncio
    async def test_create_sends_document_without_namespace(self, mock_database):
        reply = {"createdCollectionAutomatically": False, "numIndexesBefore": 1, "ok": 1.0}
        mock_database.command.return_value = reply
        manager = ModernCollectionIndexManager(mock_database, "places")
        index = IndexSpec(key=[("loc", "2dsphere")], sparse=True)

        result = await manager.create(index)

        assert result == reply
        sent = mock_database.command.await_args.kwargs["indexes"]
        assert len(sent) == 1
        assert "ns" not in sent[0]
        assert sent[0]["name"] == "loc_2dsphere"
        assert sent[0]["sparse"] is True

    @pytest.mark.asyncio
    async def test_create_empty_key(self, mock_database):
        manager = ModernCollectionIndexManager(mock_database, "users")

        with pytest.raises(EmptyKeyError):
            await manager.create(IndexSpec(key=[]))

        mock_database.command.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_rejected_by_server(self, mock_database, compound_index):
        mock_database.command.side_effect = OperationFailure("Index with name exists", code=86)
        manager = ModernCollectionIndexManager(mock_database, "users")

        with pytest.raises(OperationFailure):
            await manager.create(compound_index)

    @pytest.mark.asyncio
    async def test_drop_returns_reported_count(self, mock_database):
        mock_database.command.return_value = {"nIndexesWas": 4, "ok": 1.0}
        manager = ModernCollectionIndexManager(mock_database, "users")

        assert await manager.drop("email_1") == 4
        mock_database.command.assert_awaited_once_with("dropIndexes", "users", index="email_1")

    @pytest.mark.asyncio
    async def test_drop_all(self, mock_database):
        mock_database.command.return_value = {"nIndexesWas": 3, "ok": 1.0}
        manager = ModernCollectionIndexManager(mock_database, "users")

        assert await manager.drop_all() == 3
        mock_database.command.assert_awaited_once_with("dropIndexes", "users", index="*")

    @pytest.mark.asyncio
    async def test_drop_by_index(self, mock_database, users_email_index):
        manager = ModernCollectionIndexManager(mock_database, "users")

        await manager.drop(users_email_index.index)
        await manager.drop(users_email_index)

        assert [call.kwargs["index"] for call in mock_database.command.await_args_list] == [
            "email_1",
            "email_1",
        ]

    @pytest.mark.asyncio
    async def test_drop_index_of_other_collection(self, mock_database, users_email_index):
        manager = ModernCollectionIndexManager(mock_database, "orders")

        with pytest.raises(ValueError):
            await manager.drop(users_email_index)

        mock_database.command.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_forwards_to_drop(self, mock_database, compound_index):
        mock_database.command.return_value = {"nIndexesWas": 3, "ok": 1.0}
        manager = ModernCollectionIndexManager(mock_database, "users")

        with pytest.warns(DeprecationWarning):
            dropped = await manager.delete(compound_index)

        assert dropped == 3
        mock_database.command.assert_awaited_once_with("dropIndexes", "users", index="a_1_b_-1")

    @pytest.mark.asyncio
    async def test_drop_unknown_index(self, mock_database):
        mock_database.command.side_effect = OperationFailure("index not found", code=27)
        manager = ModernCollectionIndexManager(mock_database, "users")

        with pytest.raises(OperationFailure):
            await manager.drop("nope_1")


class TestModernIndexManager:
    """Test the database level command based manager."""

    @pytest.mark.asyncio
    async def test_list_walks_collections_in_order(self, mock_database, id_index_doc):
        mock_database.list_collection_names.return_value = ["orders", "users"]
        mock_database.set_indexes("orders", [id_index_doc])
        mock_database.set_indexes(
            "users", [id_index_doc, {"key": {"email": 1}, "name": "email_1"}]
        )
        manager = ModernIndexManager(mock_database)

        indexes = await manager.list()

        assert [(ns_index.namespace, ns_index.index.name) for ns_index in indexes] == [
            ("test_db.orders", "_id_"),
            ("test_db.users", "_id_"),
            ("test_db.users", "email_1"),
        ]

    @pytest.mark.asyncio
    async def test_list_empty_database(self, mock_database):
        assert await ModernIndexManager(mock_database).list() == []

    @pytest.mark.asyncio
    async def test_list_fails_when_one_collection_fails(self, mock_database, id_index_doc):
        mock_database.list_collection_names.return_value = ["orders", "users"]
        mock_database.set_indexes("orders", [id_index_doc])
        fail_listing(mock_database, "users", 13)
        manager = ModernIndexManager(mock_database)

        with pytest.raises(OperationFailure):
            await manager.list()

    @pytest.mark.asyncio
    async def test_list_skips_collection_dropped_meanwhile(self, mock_database, id_index_doc):
        mock_database.list_collection_names.return_value = ["gone", "users"]
        fail_listing(mock_database, "gone", 26)
        mock_database.set_indexes("users", [id_index_doc])
        manager = ModernIndexManager(mock_database)

        indexes = await manager.list()

        assert [ns_index.namespace for ns_index in indexes] == ["test_db.users"]

    @pytest.mark.asyncio
    async def test_ensure_delegates_to_collection(self, mock_database, users_email_index):
        manager = ModernIndexManager(mock_database)

        assert await manager.ensure(users_email_index) is True
        mock_database.command.assert_awaited_once_with(
            "createIndexes", "users", indexes=[encode_index(users_email_index.index)]
        )

    @pytest.mark.asyncio
    async def test_create_nested_collection(self, mock_database, compound_index):
        manager = ModernIndexManager(mock_database)

        await manager.create(NamespacedIndex("test_db.sub.items", compound_index))

        assert mock_database.command.await_args.args == ("createIndexes", "sub.items")

    @pytest.mark.asyncio
    async def test_drop_and_drop_all(self, mock_database, users_email_index):
        mock_database.command.return_value = {"nIndexesWas": 2, "ok": 1.0}
        manager = ModernIndexManager(mock_database)

        assert await manager.drop("users", "email_1") == 2
        assert await manager.drop(users_email_index) == 2
        assert await manager.drop_all("users") == 2

        assert [call.kwargs["index"] for call in mock_database.command.await_args_list] == [
            "email_1",
            "email_1",
            "*",
        ]

    @pytest.mark.asyncio
    async def test_drop_rejects_name_with_namespaced_index(self, mock_database, users_email_index):
        manager = ModernIndexManager(mock_database)

        with pytest.raises(TypeError):
            await manager.drop(users_email_index, "email_1")

    @pytest.mark.asyncio
    async def test_delete_forwards_to_drop(self, mock_database, users_email_index):
        mock_database.command.return_value = {"nIndexesWas": 2, "ok": 1.0}
        manager = ModernIndexManager(mock_database)

        with pytest.warns(DeprecationWarning):
            by_name = await manager.delete("users", "email_1")
        with pytest.warns(DeprecationWarning):
            by_index = await manager.delete(users_email_index)

        assert by_name == by_index == 2
        first, second = mock_database.command.await_args_list
        assert first == second
        assert first.args == ("dropIndexes", "users")
        assert first.kwargs == {"index": "email_1"}

    def test_on_collection(self, mock_database):
        manager = ModernIndexManager(mock_database).on_collection("users")

        assert isinstance(manager, ModernCollectionIndexManager)
        assert manager.namespace == "test_db.users"
