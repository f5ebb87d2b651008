"""
Tests for the edit buffer.

Tests validate:
- load() from an entity and from nothing
- positional edits with clamped bounds
- word counting
"""

from types import SimpleNamespace

from inkflow.client.sync.buffer import EditBuffer


class TestLoad:
    """Tests for loading content into the buffer."""

    def test_load_entity_content(self):
        buffer = EditBuffer("stale")
        buffer.load(SimpleNamespace(content="Hello"))
        assert buffer.read() == "Hello"

    def test_load_none_empties_buffer(self):
        buffer = EditBuffer("something")
        buffer.load(None)
        assert buffer.read() == ""

    def test_load_entity_without_content(self):
        buffer = EditBuffer("x")
        buffer.load(SimpleNamespace(content=None))
        assert buffer.read() == ""


class TestEdits:
    """Tests for mutate/insert/replace."""

    def test_mutate_replaces_content(self):
        buffer = EditBuffer("abc")
        buffer.mutate("xyz")
        assert buffer.read() == "xyz"

    def test_insert_in_middle(self):
        buffer = EditBuffer("Hello world")
        assert buffer.insert(5, ",") == "Hello, world"

    def test_insert_out_of_bounds_is_clamped(self):
        buffer = EditBuffer("abc")
        assert buffer.insert(100, "!") == "abc!"
        assert buffer.insert(-5, ">") == ">abc!"

    def test_replace_range(self):
        buffer = EditBuffer("The quick fox")
        assert buffer.replace(4, 9, "slow") == "The slow fox"

    def test_replace_clamps_reversed_and_overflowing_range(self):
        buffer = EditBuffer("abcdef")
        # end before start collapses to an insertion at start
        assert buffer.replace(3, 1, "X") == "abcXdef"
        assert buffer.replace(5, 999, "") == "abcXd"

    def test_slice_is_clamped(self):
        buffer = EditBuffer("abcdef")
        assert buffer.slice(2, 100) == "cdef"
        assert buffer.slice(-3, 2) == "ab"


class TestStats:
    def test_word_count(self):
        assert EditBuffer("one two\nthree").word_count == 3
        assert EditBuffer("   ").word_count == 0

    def test_len(self):
        assert len(EditBuffer("four")) == 4
