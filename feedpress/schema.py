"""Collection schemas and an ordered, reversible migration runner."""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable

_RULES = {
    "listRule": "list_rule",
    "viewRule": "view_rule",
    "createRule": "create_rule",
    "updateRule": "update_rule",
    "deleteRule": "delete_rule",
}


class SchemaError(Exception):
    """Raised when a schema change is invalid or refers to something missing."""


@dataclass
class Field:
    """One field of a collection; type-specific settings live in ``options``."""

    id: str
    name: str
    type: str
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Field:
        options = dict(data)
        name = options.pop("name", None)
        kind = options.pop("type", None)
        if not name:
            raise SchemaError("field has no name")
        if not kind:
            raise SchemaError(f"field {name!r} has no type")
        field_id = options.pop("id", "") or ""
        return cls(field_id, name, kind, copy.deepcopy(options))

    @property
    def required(self) -> bool:
        return bool(self.options.get("required", False))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type,
                **copy.deepcopy(self.options)}


def _fields_from(items: Sequence[Field | Mapping[str, Any]] | None) -> list[Field]:
    fields = [item if isinstance(item, Field) else Field.from_dict(item)
              for item in items or ()]
    seen: set[str] = set()
    for item in fields:
        key = item.name.lower()
        if key in seen:
            raise SchemaError(f"duplicate field name {item.name!r}")
        seen.add(key)
    return fields


@dataclass
class CollectionSchema:
    """The definition of one collection: fields, indexes and access rules."""

    id: str
    name: str
    type: str = "base"
    system: bool = False
    fields: list[Field] = field(default_factory=list)
    indexes: list[str] = field(default_factory=list)
    list_rule: str | None = None
    view_rule: str | None = None
    create_rule: str | None = None
    update_rule: str | None = None
    delete_rule: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CollectionSchema:
        if not data.get("id"):
            raise SchemaError("collection has no id")
        if not data.get("name"):
            raise SchemaError("collection has no name")
        collection = cls(id=data["id"], name=data["name"])
        collection.update(data)
        return collection

    def update(self, data: Mapping[str, Any]) -> None:
        """Overwrite the attributes named in ``data``, merging nested settings."""
        for key, value in data.items():
            if key == "fields":
                self.fields = _fields_from(value)
            elif key == "indexes":
                self.indexes = list(value or [])
            elif key in _RULES:
                setattr(self, _RULES[key], value)
            elif key in ("id", "name", "type"):
                if not value:
                    raise SchemaError(f"collection {key} cannot be empty")
                setattr(self, key, str(value))
            elif key == "system":
                self.system = bool(value)
            else:
                current = self.extra.get(key)
                if isinstance(current, dict) and isinstance(value, Mapping):
                    self.extra[key] = {**current, **copy.deepcopy(dict(value))}
                else:
                    self.extra[key] = copy.deepcopy(value)

    def add_field_at(self, index: int, field: Field | Mapping[str, Any]) -> None:
        """Insert a field at ``index``, replacing any field with the same id."""
        new = field if isinstance(field, Field) else Field.from_dict(field)

        def same(existing: Field) -> bool:
            if new.id:
                return existing.id == new.id
            return existing.name == new.name

        remaining = [existing for existing in self.fields if not same(existing)]
        if any(existing.name.lower() == new.name.lower() for existing in remaining):
            raise SchemaError(f"collection {self.name!r} already has a field {new.name!r}")
        position = max(0, min(index, len(remaining)))
        remaining.insert(position, new)
        self.fields = remaining

    def remove_field(self, field_id: str) -> None:
        """Drop the field with ``field_id``; nothing happens if there is none."""
        self.fields = [existing for existing in self.fields if existing.id != field_id]

    def field_names(self) -> list[str]:
        return [existing.name for existing in self.fields]


class Schema:
    """A set of collections plus the names of the migrations applied to it."""

    def __init__(self) -> None:
        self._collections: dict[str, CollectionSchema] = {}
        self.applied: list[str] = []

    def _lookup(self, name_or_id: str) -> CollectionSchema | None:
        found = self._collections.get(name_or_id)
        if found is not None:
            return found
        lowered = name_or_id.lower()
        return next((c for c in self._collections.values() if c.name.lower() == lowered), None)

    def add(self, collection: CollectionSchema) -> None:
        """Save a collection, replacing a stored one with the same id."""
        if not collection.id:
            raise SchemaError("collection has no id")
        for other in self._collections.values():
            if other.id != collection.id and other.name.lower() == collection.name.lower():
                raise SchemaError(f"collection name {collection.name!r} is already taken")
        self._collections[collection.id] = copy.deepcopy(collection)

    def remove(self, name_or_id: str) -> None:
        found = self._lookup(name_or_id)
        if found is None:
            raise SchemaError(f"no collection {name_or_id!r}")
        del self._collections[found.id]

    def find(self, name_or_id: str) -> CollectionSchema:
        """Return a copy of a collection; changes take effect only through ``add``."""
        found = self._lookup(name_or_id)
        if found is None:
            raise SchemaError(f"no collection {name_or_id!r}")
        return copy.deepcopy(found)

    def __contains__(self, name_or_id: object) -> bool:
        return isinstance(name_or_id, str) and self._lookup(name_or_id) is not None

    def __iter__(self) -> Iterator[CollectionSchema]:
        return (copy.deepcopy(c) for c in list(self._collections.values()))

    def __len__(self) -> int:
        return len(self._collections)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        snapshot = copy.deepcopy(self._collections)
        try:
            yield
        except BaseException:
            self._collections = snapshot
            raise


@dataclass(frozen=True)
class Migration:
    """A named schema change with its inverse."""

    name: str
    up: Callable[[Schema], None]
    down: Callable[[Schema], None]


class MigrationRunner:
    """Applies migrations in name order and reverts them newest first."""

    def __init__(self, migrations: Sequence[Migration]) -> None:
        self.migrations = sorted(migrations, key=lambda m: m.name)
        self._by_name = {m.name: m for m in self.migrations}
        if len(self._by_name) != len(self.migrations):
            raise SchemaError("duplicate migration names")

    def upgrade(self, schema: Schema) -> list[str]:
        """Apply every pending migration; return the names applied."""
        done = []
        for migration in self.migrations:
            if migration.name in schema.applied:
                continue
            with schema._transaction():
                migration.up(schema)
            schema.applied.append(migration.name)
            done.append(migration.name)
        return done

    def downgrade(self, schema: Schema, steps: int = 1) -> list[str]:
        """Revert the last ``steps`` applied migrations; return the names reverted."""
        if steps < 0:
            raise ValueError("steps must not be negative")
        reverted = []
        for _ in range(min(steps, len(schema.applied))):
            name = schema.applied[-1]
            migration = self._by_name.get(name)
            if migration is None:
                raise SchemaError(f"unknown migration {name!r}")
            with schema._transaction():
                migration.down(schema)
            schema.applied.pop()
            reverted.append(name)
        return reverted