"""Document stores for league data.

Documents are plain JSON objects addressed by tuple keys, for example
``('rosters', league_id, user_id)``. Every read returns a version string
(a content hash, like a git blob sha) and writes may be made conditional on
the version the caller read. A mismatch raises ConcurrentModificationError
so the caller can re-read, re-validate and retry.
"""

import copy
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from .exceptions import ConcurrentModificationError
from .utils import content_version, load_json, save_json, to_jsonable

logger = logging.getLogger('sfl.store')

Key = tuple


def _key_parts(key: Key) -> list[str]:
    parts = [str(p) for p in key]
    for part in parts:
        if not part or part in ('.', '..') or '/' in part or '\\' in part:
            raise ValueError(f'Invalid key component: {part!r}')
    return parts


class DocumentStore:
    """
    Interface for a key/value document store.

    Subclasses implement get, put, delete and list_keys.
    """

    def get(self, key: Key) -> tuple[Optional[dict], Optional[str]]:
        """Return (document, version), or (None, None) if absent."""
        raise NotImplementedError

    def put(self, key: Key, document: Any, expected_version: Optional[str] = None) -> str:
        """
        Write a document and return its new version.

        If expected_version is given the write only succeeds when the stored
        version still matches; pass '' to require that the key is absent.
        """
        raise NotImplementedError

    def delete(self, key: Key) -> None:
        raise NotImplementedError

    def list_keys(self, prefix: Key) -> list[Key]:
        """All keys starting with prefix, sorted."""
        raise NotImplementedError

    def _check_version(self, key: Key, expected: Optional[str], actual: Optional[str]) -> None:
        if expected is None:
            return
        if (actual or '') != expected:
            logger.warning(f'Version conflict on {"/".join(str(p) for p in key)}')
            raise ConcurrentModificationError(key, expected, actual)


class MemoryStore(DocumentStore):
    """In-process store, used by tests and single-run scripts."""

    def __init__(self):
        self._docs: dict[Key, dict] = {}
        self._lock = threading.Lock()

    def get(self, key: Key) -> tuple[Optional[dict], Optional[str]]:
        key = tuple(_key_parts(key))
        with self._lock:
            doc = self._docs.get(key)
            if doc is None:
                return None, None
            return copy.deepcopy(doc), content_version(doc)

    def put(self, key: Key, document: Any, expected_version: Optional[str] = None) -> str:
        key = tuple(_key_parts(key))
        data = copy.deepcopy(to_jsonable(document))
        with self._lock:
            current = self._docs.get(key)
            self._check_version(
                key, expected_version, content_version(current) if current is not None else None
            )
            self._docs[key] = data
        return content_version(data)

    def delete(self, key: Key) -> None:
        key = tuple(_key_parts(key))
        with self._lock:
            self._docs.pop(key, None)

    def list_keys(self, prefix: Key) -> list[Key]:
        prefix = tuple(_key_parts(prefix))
        with self._lock:
            keys = [k for k in self._docs if k[: len(prefix)] == prefix]
        return sorted(keys)


class JsonFileStore(DocumentStore):
    """
    Store each document as a JSON file under a root directory.

    ``('rosters', 'league-1', 'u1')`` lives at ``<root>/rosters/league-1/u1.json``.
    Conditional writes are serialized with a process-wide lock; files are
    replaced atomically.
    """

    _lock = threading.Lock()

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _path(self, key: Key) -> Path:
        parts = _key_parts(key)
        return self.root.joinpath(*parts[:-1], f'{parts[-1]}.json')

    def get(self, key: Key) -> tuple[Optional[dict], Optional[str]]:
        path = self._path(key)
        if not path.exists():
            return None, None
        doc = load_json(path)
        return doc, content_version(doc)

    def put(self, key: Key, document: Any, expected_version: Optional[str] = None) -> str:
        path = self._path(key)
        data = to_jsonable(document)
        with self._lock:
            if expected_version is not None:
                current = load_json(path) if path.exists() else None
                self._check_version(
                    key,
                    expected_version,
                    content_version(current) if current is not None else None,
                )
            save_json(path, data)
        return content_version(data)

    def delete(self, key: Key) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def list_keys(self, prefix: Key) -> list[Key]:
        base = self.root.joinpath(*_key_parts(prefix))
        if not base.is_dir():
            return []
        keys = []
        for path in base.rglob('*.json'):
            rel = path.relative_to(self.root).with_suffix('')
            keys.append(tuple(rel.parts))
        return sorted(keys)
