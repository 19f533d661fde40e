import logging
from typing import Any, Callable, Mapping

from school_records.core.exceptions import NotFound
from school_records.store import CollectionStore

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class Repository:
    """CRUD over one collection.

    Every mutation is a full load -> mutate -> save cycle held under the
    collection's lock, so concurrent writers to the same collection are
    serialized instead of overwriting each other's saves.
    """

    def __init__(self, store: CollectionStore, key: str, *, label: str = 'Record'):
        self.store = store
        self.key = key
        self.label = label

    def create(self, fields: Mapping[str, Any]) -> Record:
        with self.store.lock(self.key):
            records = self.store.load(self.key)
            new_id = self._next_identifier(records)
            record = {'id': new_id, **{name: value for name, value in fields.items() if name != 'id'}}
            records.append(record)
            # A failed save only skips an identifier.
            self.store.record_identifier(self.key, new_id)
            self.store.save(self.key, records)

        logger.info('Created %s %d', self.key, new_id)
        return record

    def update(self, record_id: int, fields: Mapping[str, Any]) -> Record:
        with self.store.lock(self.key):
            records = self.store.load(self.key)
            index = self._index_of(records, record_id)
            record = {'id': record_id, **{name: value for name, value in fields.items() if name != 'id'}}
            records[index] = record
            self.store.save(self.key, records)

        logger.info('Updated %s %d', self.key, record_id)
        return record

    def delete(self, record_id: int) -> Record:
        with self.store.lock(self.key):
            records = self.store.load(self.key)
            index = self._index_of(records, record_id)
            removed = records.pop(index)
            self.store.save(self.key, records)

        logger.info('Deleted %s %d', self.key, record_id)
        return removed

    def find_by_id(self, record_id: int) -> Record:
        records = self.store.load(self.key)
        return records[self._index_of(records, record_id)]

    def find_all(self) -> list[Record]:
        return self.store.load(self.key)

    def find_where(self, predicate: Callable[[Record], bool]) -> list[Record]:
        return [record for record in self.store.load(self.key) if predicate(record)]

    def find_first(self, predicate: Callable[[Record], bool]) -> Record | None:
        return next((record for record in self.store.load(self.key) if predicate(record)), None)

    def upsert_by_key(
        self,
        key_fields: Mapping[str, Any],
        fields: Mapping[str, Any],
        defaults: Mapping[str, Any] | None = None,
    ) -> Record:
        """Overwrite the first record matching ``key_fields`` or append a new one.

        A match gets ``fields`` written over it in place; other stored fields
        are kept. A new record is ``key_fields`` + ``defaults`` + ``fields`` and
        is identified by its key fields alone.
        """
        with self.store.lock(self.key):
            records = self.store.load(self.key)
            existing = next((record for record in records if matches(record, key_fields)), None)
            if existing is not None:
                existing.update(fields)
                result = existing
            else:
                result = {**key_fields, **(defaults or {}), **fields}
                records.append(result)
            self.store.save(self.key, records)

        logger.info('%s %s keyed by %s', 'Updated' if existing is not None else 'Created', self.key, dict(key_fields))
        return result

    def _next_identifier(self, records: list[Record]) -> int:
        # Never below the old length + 1 scheme, never reusing an id that was handed out before.
        highest_present = max((record.get('id', 0) for record in records), default=0)
        return max(self.store.last_identifier(self.key), highest_present, len(records)) + 1

    def _index_of(self, records: list[Record], record_id: int) -> int:
        for index, record in enumerate(records):
            if record.get('id') == record_id:
                return index
        raise NotFound(f'{self.label} not found')


def matches(record: Mapping[str, Any], criteria: Mapping[str, Any]) -> bool:
    return all(record.get(name) == value for name, value in criteria.items())
