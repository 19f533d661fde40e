import json
import logging
import os
import re
import tempfile
from functools import lru_cache
from threading import Lock, RLock
from typing import Any

from school_records.core import config
from school_records.core.exceptions import StorageIOError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')


class CollectionStore:
    """Persists each collection as one JSON array under ``data_dir``.

    ``<key>.json`` holds the records and ``<key>.meta.json`` holds the highest
    identifier ever handed out for that collection. Nothing is cached between
    calls, so every ``load`` reflects the latest ``save``.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._locks: dict[str, RLock] = {}
        self._locks_guard = Lock()

    def lock(self, key: str) -> RLock:
        _validate_key(key)
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = RLock()
            return self._locks[key]

    def path_for(self, key: str) -> str:
        _validate_key(key)
        return os.path.join(self.data_dir, f'{key}.json')

    def load(self, key: str) -> list[dict[str, Any]]:
        path = self.path_for(key)
        with self.lock(key):
            self._ensure_file(key, path, [])
            records = self._read_json(key, path)

        if not isinstance(records, list):
            logger.error('Collection %s is not a JSON array', key)
            raise StorageIOError(f'Failed to read {key}: stored document is not a list')
        return records

    def save(self, key: str, records: list[dict[str, Any]]) -> None:
        path = self.path_for(key)
        with self.lock(key):
            self._write_json(key, path, records)
        logger.debug('Saved %d record(s) to %s', len(records), key)

    def last_identifier(self, key: str) -> int:
        path = self._meta_path(key)
        with self.lock(key):
            if not os.path.exists(path):
                return 0
            meta = self._read_json(key, path)

        if not isinstance(meta, dict) or not isinstance(meta.get('lastId', 0), int):
            raise StorageIOError(f'Failed to read {key}: identifier counter is corrupt')
        return meta.get('lastId', 0)

    def record_identifier(self, key: str, value: int) -> None:
        with self.lock(key):
            self._write_json(key, self._meta_path(key), {'lastId': value})

    def _meta_path(self, key: str) -> str:
        _validate_key(key)
        return os.path.join(self.data_dir, f'{key}.meta.json')

    def _ensure_file(self, key: str, path: str, initial: Any) -> None:
        if os.path.exists(path):
            return
        logger.info('Initializing empty collection %s at %s', key, path)
        self._write_json(key, path, initial)

    def _read_json(self, key: str, path: str) -> Any:
        try:
            with open(path, encoding='utf-8') as handle:
                return json.load(handle)
        except (OSError, ValueError) as exc:
            logger.exception('Failed to read collection %s', key)
            raise StorageIOError(f'Failed to read {key}: {exc}') from exc

    def _write_json(self, key: str, path: str, document: Any) -> None:
        temp_path = None
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            handle, temp_path = tempfile.mkstemp(prefix=f'.{key}.', suffix='.tmp', dir=self.data_dir)
            with os.fdopen(handle, 'w', encoding='utf-8') as temp_file:
                json.dump(document, temp_file, indent=2)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_path, path)
            temp_path = None
        except (OSError, TypeError, ValueError) as exc:
            logger.exception('Failed to write collection %s', key)
            raise StorageIOError(f'Failed to write {key}: {exc}') from exc
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)


def _validate_key(key: str) -> None:
    if not _KEY_PATTERN.match(key):
        raise ValueError(f'Invalid collection key: {key!r}')


@lru_cache
def get_store() -> CollectionStore:
    return CollectionStore(config.DATA_DIR)
