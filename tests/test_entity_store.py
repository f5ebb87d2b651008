"""
Tests for the entity collection store.

Tests validate:
- most-recent-first insertion and wholesale replacement
- rejection of responses older than the cached entity
- cascade clearing of references on removal
"""

from datetime import datetime, timedelta

from inkflow.client.sync.store import EntityCollectionStore
from inkflow.domains.documents.schemas import CMSConnectionResponse, DocumentResponse

T0 = datetime(2024, 5, 1, 12, 0, 0)


def make_document(doc_id: str, content: str = "", seconds: int = 0, **fields) -> DocumentResponse:
    return DocumentResponse(
        id=doc_id,
        user_id="user-1",
        content=content,
        created_at=T0,
        updated_at=T0 + timedelta(seconds=seconds),
        **fields
    )


def make_connection(conn_id: str) -> CMSConnectionResponse:
    return CMSConnectionResponse(
        id=conn_id, name="Blog", platform="Ghost", user_id="user-1", created_at=T0, updated_at=T0
    )


class TestUpsert:
    """Tests for upsert_one()."""

    def test_new_entities_are_prepended(self):
        store = EntityCollectionStore("documents")
        store.upsert_one(make_document("a"))
        store.upsert_one(make_document("b"))
        assert store.ids() == ["b", "a"]

    def test_existing_entity_replaced_in_place(self):
        store = EntityCollectionStore("documents")
        store.replace_all([make_document("a"), make_document("b")])

        assert store.upsert_one(make_document("b", "new", seconds=1))

        assert store.ids() == ["a", "b"]
        assert store.get("b").content == "new"

    def test_stale_response_is_discarded(self):
        store = EntityCollectionStore("documents")
        store.upsert_one(make_document("a", "second", seconds=2))

        assert not store.upsert_one(make_document("a", "first", seconds=1))
        assert store.get("a").content == "second"

    def test_same_timestamp_is_applied(self):
        store = EntityCollectionStore("documents")
        store.upsert_one(make_document("a", "one", seconds=1))
        assert store.upsert_one(make_document("a", "two", seconds=1))
        assert store.get("a").content == "two"


class TestRemove:
    """Tests for remove_one() and cascading."""

    def test_remove_returns_entity(self):
        store = EntityCollectionStore("documents")
        store.upsert_one(make_document("a"))

        removed = store.remove_one("a")

        assert removed.id == "a"
        assert "a" not in store
        assert store.remove_one("a") is None

    def test_remove_then_upsert_is_fresh_insert(self):
        store = EntityCollectionStore("documents")
        store.replace_all([make_document("a", seconds=5), make_document("b")])
        store.remove_one("a")

        # older timestamp is accepted: there is nothing cached to compare with
        assert store.upsert_one(make_document("a", "again", seconds=0))
        assert store.ids() == ["a", "b"]

    def test_cascade_clears_linked_field(self):
        documents = EntityCollectionStore("documents")
        connections = EntityCollectionStore("cms-connections")
        connections.link(documents, "cms_connection_id")
        connections.upsert_one(make_connection("c1"))
        documents.replace_all([
            make_document("a", cms_connection_id="c1"),
            make_document("b", cms_connection_id="c2"),
        ])

        connections.remove_one("c1")

        assert documents.get("a").cms_connection_id is None
        assert documents.get("b").cms_connection_id == "c2"

    def test_late_response_cannot_restore_removed_link(self):
        documents = EntityCollectionStore("documents")
        connections = EntityCollectionStore("cms-connections")
        connections.link(documents, "cms_connection_id")
        connections.upsert_one(make_connection("c1"))
        documents.upsert_one(make_document("a", "draft", cms_connection_id="c1"))

        connections.remove_one("c1")
        # Autosave issued before the delete answers afterwards with a newer stamp
        assert documents.upsert_one(make_document("a", "draft v2", seconds=3, cms_connection_id="c1"))
        assert documents.get("a").cms_connection_id is None
        documents.replace_all([make_document("a", "listed", seconds=4, cms_connection_id="c1")])

        assert documents.get("a").content == "listed"
        assert documents.get("a").cms_connection_id is None


class TestReplaceAll:
    def test_replace_all_drops_duplicate_ids(self):
        store = EntityCollectionStore("documents")
        store.replace_all([make_document("a", "first"), make_document("a", "dup"), make_document("b")])
        assert store.ids() == ["a", "b"]
        assert store.get("a").content == "first"

    def test_clear(self):
        store = EntityCollectionStore("documents")
        store.replace_all([make_document("a")])
        store.clear()
        assert len(store) == 0
        assert store.get("a") is None
