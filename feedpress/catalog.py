"""The complete migration history and the schema it produces."""

from __future__ import annotations

from . import history_1, history_2, history_3, history_4, history_5
from .history_1 import _autodates, _id_field
from .history_5 import SUPERUSERS_ID, _tokens
from .schema import CollectionSchema, Migration, MigrationRunner, Schema


def all_migrations() -> list[Migration]:
    """Return every migration, oldest first."""
    return [
        *history_1.migrations(),
        *history_2.migrations(),
        *history_3.migrations(),
        *history_4.migrations(),
        *history_5.migrations(),
    ]


def _superusers() -> CollectionSchema:
    data = {
        "id": SUPERUSERS_ID,
        "name": "_superusers",
        "type": "auth",
        "system": True,
        "fields": [_id_field(), *_autodates()],
        "indexes": [],
    }
    data.update(_tokens(86400, 180))
    return CollectionSchema.from_dict(data)


def build_schema() -> Schema:
    """Return a schema with the built-in superusers collection and every migration applied."""
    schema = Schema()
    schema.add(_superusers())
    MigrationRunner(all_migrations()).upgrade(schema)
    return schema