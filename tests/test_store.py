"""Tests for the document stores."""

import json

import pytest

from sfl.exceptions import ConcurrentModificationError
from sfl.schemas import EliminationsFile
from sfl.store import JsonFileStore, MemoryStore


@pytest.fixture(params=['memory', 'json'])
def store(request, tmp_path):
    if request.param == 'memory':
        return MemoryStore()
    return JsonFileStore(tmp_path)


class TestDocumentStore:
    """Behavior shared by every store."""

    def test_missing(self, store):
        assert store.get(('rosters', 'league-1', 'alice')) == (None, None)

    def test_put_and_get(self, store):
        version = store.put(('standings', 'league-1'), {'standings': {'alice': 3}})
        doc, read_version = store.get(('standings', 'league-1'))
        assert doc == {'standings': {'alice': 3}}
        assert read_version == version

    def test_pydantic_documents(self, store):
        store.put(('eliminations', 'league-1', 50), EliminationsFile(season=50, eliminated={'c3': 4}))
        doc, _ = store.get(('eliminations', 'league-1', 50))
        assert doc['eliminated'] == {'c3': 4}

    def test_conditional_put(self, store):
        key = ('rosters', 'league-1', 'alice')
        version = store.put(key, {'n': 1}, expected_version='')
        store.put(key, {'n': 2}, expected_version=version)
        with pytest.raises(ConcurrentModificationError):
            store.put(key, {'n': 3}, expected_version=version)
        assert store.get(key)[0] == {'n': 2}

    def test_create_only(self, store):
        """Test that an empty expected version requires the key to be absent."""
        key = ('rosters', 'league-1', 'alice')
        store.put(key, {'n': 1})
        with pytest.raises(ConcurrentModificationError):
            store.put(key, {'n': 2}, expected_version='')

    def test_list_keys(self, store):
        store.put(('rosters', 'league-1', 'bob'), {})
        store.put(('rosters', 'league-1', 'alice'), {})
        store.put(('rosters', 'league-2', 'cara'), {})
        assert store.list_keys(('rosters', 'league-1')) == [
            ('rosters', 'league-1', 'alice'),
            ('rosters', 'league-1', 'bob'),
        ]
        assert len(store.list_keys(('rosters',))) == 3
        assert store.list_keys(('episodes',)) == []

    def test_delete(self, store):
        store.put(('standings', 'league-1'), {})
        store.delete(('standings', 'league-1'))
        assert store.get(('standings', 'league-1')) == (None, None)

    def test_invalid_key(self, store):
        with pytest.raises(ValueError):
            store.get(('rosters', '..', 'alice'))


class TestJsonFileStore:
    """File layout details."""

    def test_file_layout(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.put(('rosters', 'league-1', 'alice'), {'user_id': 'alice'})
        path = tmp_path / 'rosters' / 'league-1' / 'alice.json'
        assert json.loads(path.read_text()) == {'user_id': 'alice'}

    def test_int_keys_keep_version(self, tmp_path):
        """Test that a version survives the int-to-str key change of a reload."""
        store = JsonFileStore(tmp_path)
        version = store.put(('doc',), {'weeks': {10: 'a', 2: 'b'}})
        assert store.get(('doc',))[1] == version
