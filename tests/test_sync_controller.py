"""
Tests for the autosave controller.

Tests validate:
- debounced writes carrying the latest buffer content
- selection switches never writing one entity's text into another
- stale and late write responses
- placeholder title inference
- failure handling without exceptions
"""

import asyncio

import pytest

from inkflow.client.sync import EntityCollectionStore, SyncController, SyncState, SyncStatus

DELAY = 0.05
SETTLE = 0.2


@pytest.fixture
def store():
    return EntityCollectionStore("documents")


@pytest.fixture
def controller(fake_gateway, store):
    return SyncController(fake_gateway, store, delay=DELAY)


async def add_document(gateway, store, **fields):
    document = await gateway.create("documents", fields)
    store.upsert_one(document)
    return document


class TestDebounce:
    """Tests for debounced autosave."""

    @pytest.mark.asyncio
    async def test_many_mutations_produce_one_write(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store)
        controller.select(doc.id)

        for text in ["H", "He", "Hel", "Hell", "Hello"]:
            controller.mutate(text)
            await asyncio.sleep(DELAY / 5)

        await asyncio.sleep(SETTLE)

        assert fake_gateway.updates(doc.id) == [{"content": "Hello", "title": "Hello"}]
        assert controller.state == SyncState.SAVED

    @pytest.mark.asyncio
    async def test_status_pending_immediately_after_mutation(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Notes")
        controller.select(doc.id)
        assert controller.status == SyncStatus.SAVED

        controller.mutate("x")

        assert controller.status == SyncStatus.PENDING
        assert controller.has_pending_timer
        assert fake_gateway.updates() == []

    @pytest.mark.asyncio
    async def test_new_page_scenario(self, fake_gateway, store, controller):
        states = []
        controller.subscribe(states.append)
        doc = await add_document(fake_gateway, store)
        controller.select(doc.id)

        controller.mutate("Hello world\nMore text")
        await asyncio.sleep(SETTLE)

        assert fake_gateway.updates(doc.id) == [
            {"content": "Hello world\nMore text", "title": "Hello world"}
        ]
        assert states == [SyncState.SAVED, SyncState.DIRTY_PENDING, SyncState.WRITING, SyncState.SAVED]
        assert store.get(doc.id).title == "Hello world"
        assert store.get(doc.id).content == "Hello world\nMore text"

    @pytest.mark.asyncio
    async def test_mutation_without_selection_is_ignored(self, fake_gateway, controller):
        controller.mutate("lost")
        await asyncio.sleep(SETTLE)

        assert controller.state == SyncState.IDLE
        assert controller.buffer.read() == ""
        assert fake_gateway.updates() == []


class TestSelection:
    """Tests for switching between entities."""

    @pytest.mark.asyncio
    async def test_pending_edit_is_written_to_previous_entity(self, fake_gateway, store, controller):
        doc_a = await add_document(fake_gateway, store, title="A", content="alpha")
        doc_b = await add_document(fake_gateway, store, title="B", content="beta")
        controller.select(doc_a.id)
        controller.mutate("alpha edited")

        controller.select(doc_b.id)

        assert controller.buffer.read() == "beta"
        assert controller.state == SyncState.SAVED
        await asyncio.sleep(SETTLE)
        await controller.drain()

        assert fake_gateway.updates(doc_a.id) == [{"content": "alpha edited"}]
        assert fake_gateway.updates(doc_b.id) == []
        assert store.get(doc_a.id).content == "alpha edited"
        assert store.get(doc_b.id).content == "beta"

    @pytest.mark.asyncio
    async def test_deselect_resets_buffer(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, content="text")
        controller.select(doc.id)

        controller.select(None)

        assert controller.state == SyncState.IDLE
        assert controller.status == SyncStatus.SAVED
        assert controller.buffer.read() == ""

    @pytest.mark.asyncio
    async def test_reselecting_active_entity_keeps_buffer(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, content="text")
        controller.select(doc.id)
        controller.mutate("text typed")

        controller.select(doc.id)

        assert controller.buffer.read() == "text typed"
        assert controller.state == SyncState.DIRTY_PENDING


class TestOrdering:
    """Tests for out-of-order and late responses."""

    @pytest.mark.asyncio
    async def test_stale_response_does_not_overwrite_newer(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        fake_gateway.update_delays = [0.1, 0.0]

        controller.mutate("first")
        slow_write = asyncio.ensure_future(controller.flush())
        await asyncio.sleep(0)
        controller.mutate("second")
        assert await controller.flush()
        await slow_write

        assert store.get(doc.id).content == "second"
        assert controller.state == SyncState.SAVED

    @pytest.mark.asyncio
    async def test_typing_during_write_keeps_pending(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        fake_gateway.update_delays = [0.01]

        controller.mutate("one")
        write = asyncio.ensure_future(controller.flush())
        await asyncio.sleep(0)
        controller.mutate("one two")
        await write

        assert controller.state == SyncState.DIRTY_PENDING
        await asyncio.sleep(SETTLE)
        assert controller.state == SyncState.SAVED
        assert store.get(doc.id).content == "one two"

    @pytest.mark.asyncio
    async def test_delete_while_write_in_flight(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        fake_gateway.update_delays = [0.05]

        controller.mutate("doomed")
        write = asyncio.ensure_future(controller.flush())
        await asyncio.sleep(0)
        controller.forget(doc.id)
        await fake_gateway.delete("documents", doc.id)
        store.remove_one(doc.id)

        assert await write is False
        assert doc.id not in store
        assert controller.state == SyncState.IDLE

    @pytest.mark.asyncio
    async def test_delete_after_write_settles(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)

        controller.mutate("saved then deleted")
        assert await controller.flush()
        controller.forget(doc.id)
        await fake_gateway.delete("documents", doc.id)
        store.remove_one(doc.id)
        await asyncio.sleep(SETTLE)

        assert doc.id not in store
        assert fake_gateway.updates(doc.id) == [{"content": "saved then deleted"}]

    @pytest.mark.asyncio
    async def test_forget_cancels_timer(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        controller.mutate("never sent")

        controller.forget(doc.id)
        await asyncio.sleep(SETTLE)

        assert fake_gateway.updates() == []


class TestTitleInference:
    """Tests for placeholder title replacement at flush time."""

    @pytest.mark.asyncio
    async def test_title_inferred_once(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store)
        controller.select(doc.id)

        controller.mutate("My heading\nbody")
        await controller.flush()
        controller.mutate("Another first line\nbody")
        await controller.flush()

        assert fake_gateway.updates(doc.id) == [
            {"content": "My heading\nbody", "title": "My heading"},
            {"content": "Another first line\nbody"},
        ]
        assert store.get(doc.id).title == "My heading"

    @pytest.mark.asyncio
    async def test_blank_first_line_keeps_placeholder(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Untitled Draft")
        controller.select(doc.id)

        controller.mutate("   \nbody")
        await controller.flush()

        assert fake_gateway.updates(doc.id) == [{"content": "   \nbody"}]
        assert store.get(doc.id).title == "Untitled Draft"

    @pytest.mark.asyncio
    async def test_inferred_title_is_truncated(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store)
        controller.select(doc.id)

        controller.mutate("A" * 50)
        await controller.flush()

        assert store.get(doc.id).title == "A" * 30


class TestFailures:
    """Tests for gateway failures."""

    @pytest.mark.asyncio
    async def test_failed_write_keeps_buffer_and_pending(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        fake_gateway.fail_updates = True

        controller.mutate("offline text")
        await asyncio.sleep(SETTLE)

        assert controller.state == SyncState.WRITE_FAILED
        assert controller.status == SyncStatus.PENDING
        assert controller.buffer.read() == "offline text"
        assert len(fake_gateway.updates(doc.id)) == 1

    @pytest.mark.asyncio
    async def test_next_keystroke_retries(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        fake_gateway.fail_updates = True
        controller.mutate("offline")
        await asyncio.sleep(SETTLE)

        fake_gateway.fail_updates = False
        controller.mutate("offline, back online")
        await asyncio.sleep(SETTLE)

        assert controller.state == SyncState.SAVED
        assert store.get(doc.id).content == "offline, back online"

    @pytest.mark.asyncio
    async def test_explicit_flush_retries(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        fake_gateway.fail_updates = True
        controller.mutate("retry me")
        assert await controller.flush() is False

        fake_gateway.fail_updates = False
        assert await controller.flush() is True
        assert controller.state == SyncState.SAVED

    @pytest.mark.asyncio
    async def test_reset_returns_to_idle(self, fake_gateway, store, controller):
        doc = await add_document(fake_gateway, store, title="Doc")
        controller.select(doc.id)
        controller.mutate("unsaved")

        controller.reset()
        await asyncio.sleep(SETTLE)

        assert controller.state == SyncState.IDLE
        assert controller.buffer.read() == ""
        assert fake_gateway.updates() == []
