"""An in-memory record store organised by named collections."""

from __future__ import annotations

import copy
import itertools
import secrets
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
_ID_LENGTH = 15


class RecordNotFound(LookupError):
    """Raised when no record matches a lookup."""


class CollectionNotFound(LookupError):
    """Raised when a collection name is unknown to the store."""


@dataclass
class Record:
    """A row of a collection; field values live in ``data``."""

    collection: str
    id: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    created: int = 0

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "collectionName": self.collection,
                **copy.deepcopy(self.data)}


class RecordStore:
    """Keeps records per collection; reads and writes go through copies."""

    def __init__(self, collections: Iterable[Any]) -> None:
        self._tables: dict[str, dict[str, Record]] = {
            getattr(item, "name", item): {} for item in collections
        }
        self._sequence = itertools.count(1)

    def _table(self, collection: str) -> dict[str, Record]:
        try:
            return self._tables[collection]
        except KeyError:
            raise CollectionNotFound(f"no collection {collection!r}") from None

    def _new_id(self, table: dict[str, Record]) -> str:
        while True:
            candidate = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))
            if candidate not in table:
                return candidate

    def new_record(self, collection: str) -> Record:
        """Return an unsaved record for ``collection``."""
        self._table(collection)
        return Record(collection)

    def save(self, record: Record) -> None:
        """Store ``record``, giving it an id and creation stamp if it has none."""
        table = self._table(record.collection)
        if not record.id:
            record.id = self._new_id(table)
        if not record.created:
            record.created = next(self._sequence)
        table[record.id] = copy.deepcopy(record)

    def delete(self, record: Record) -> None:
        table = self._table(record.collection)
        if table.pop(record.id, None) is None:
            raise RecordNotFound(f"no record {record.id!r} in {record.collection!r}")

    def get(self, collection: str, record_id: str) -> Record:
        found = self._table(collection).get(record_id)
        if found is None:
            raise RecordNotFound(f"no record {record_id!r} in {collection!r}")
        return copy.deepcopy(found)

    def _matching(self, collection: str, filters: dict[str, Any]) -> Iterator[Record]:
        for record in self._table(collection).values():
            if all(record.get(key) == value for key, value in filters.items()):
                yield record

    def find_first(self, collection: str, **kwargs: Any) -> Record:
        """Return the oldest record whose fields equal every keyword given."""
        for record in self._matching(collection, kwargs):
            return copy.deepcopy(record)
        raise RecordNotFound(f"no matching record in {collection!r}")

    def find_all(self, collection: str, **kwargs: Any) -> list[Record]:
        """Return every matching record, newest first."""
        found = sorted(self._matching(collection, kwargs),
                       key=lambda record: record.created, reverse=True)
        return [copy.deepcopy(record) for record in found]