"""First migrations: collections, posts, tags and uploads."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .schema import CollectionSchema, Migration, Schema

COLLECTIONS_ID = "pbc_601157786"
POSTS_ID = "pbc_1125843985"
TAGS_ID = "pbc_1219621782"
FILES_ID = "pbc_3446931122"

_Change = Callable[[CollectionSchema], None]


def _field(field_id: str, name: str, kind: str, **options: Any) -> dict[str, Any]:
    return {"id": field_id, "name": name, "type": kind, "hidden": False,
            "presentable": False, "system": False, **options}


def _id_field() -> dict[str, Any]:
    return _field("text3208210256", "id", "text", autogeneratePattern="[a-z0-9]{15}",
                  max=15, min=15, pattern="^[a-z0-9]+$", primaryKey=True,
                  required=True, system=True)


def _text(field_id: str, name: str, *, required: bool = False) -> dict[str, Any]:
    return _field(field_id, name, "text", autogeneratePattern="", max=0, min=0,
                  pattern="", primaryKey=False, required=required)


def _autodates() -> list[dict[str, Any]]:
    return [
        _field("autodate2990389176", "created", "autodate", onCreate=True, onUpdate=False),
        _field("autodate3332085495", "updated", "autodate", onCreate=True, onUpdate=True),
    ]


def _collection(collection_id: str, name: str, fields: list[dict[str, Any]]) -> dict[str, Any]:
    return {"id": collection_id, "name": name, "type": "base", "system": False,
            "fields": [_id_field(), *fields, *_autodates()], "indexes": [],
            "listRule": None, "viewRule": None, "createRule": None,
            "updateRule": None, "deleteRule": None}


def _create(name: str, data: Mapping[str, Any]) -> Migration:
    def up(schema: Schema) -> None:
        schema.add(CollectionSchema.from_dict(data))

    def down(schema: Schema) -> None:
        schema.remove(data["id"])

    return Migration(name, up, down)


def _edit(collection_id: str, *changes: _Change) -> Callable[[Schema], None]:
    def apply(schema: Schema) -> None:
        collection = schema.find(collection_id)
        for change in changes:
            change(collection)
        schema.add(collection)

    return apply


def _update(data: Mapping[str, Any]) -> _Change:
    return lambda collection: collection.update(data)


def _insert(index: int, data: Mapping[str, Any]) -> _Change:
    return lambda collection: collection.add_field_at(index, data)


def _drop(field_id: str) -> _Change:
    return lambda collection: collection.remove_field(field_id)


_POSTS_SLUG_PERMALINK = (
    "CREATE UNIQUE INDEX `idx_lBuOjNGbrm` ON `posts` (\n  `slug`,\n  `permalink`\n)"
)
_POSTS_TITLE = "CREATE INDEX `idx_RQpao89B94` ON `posts` (`title`)"


def migrations() -> list[Migration]:
    """Return this part of the migration history in order."""
    return [
        _create("1751581763_created_collections", _collection(COLLECTIONS_ID, "collections", [
            _text("text724990059", "title", required=True),
            _text("text2560465762", "slug", required=True),
            _text("text1843675174", "description"),
        ])),
        _create("1751581991_created_posts", _collection(POSTS_ID, "posts", [
            _text("text724990059", "title", required=True),
            _text("text1367709617", "subtitle", required=True),
            _text("text4274335913", "content"),
            _field("select2363381545", "type", "select", maxSelect=1, required=False,
                   values=["Blog", "Youtube", "Gallery"]),
            _field("bool1821142673", "is_visible", "bool", required=False),
            _text("text4068916274", "permalink", required=True),
            _text("text2560465762", "slug", required=True),
        ])),
        _create("1751582040_created_tags", _collection(TAGS_ID, "tags", [
            _text("text724990059", "title"),
            _field("number2985068427", "search_count", "number", max=None, min=None,
                   onlyInt=False, required=False),
        ])),
        _create("1751582130_created_files", _collection(FILES_ID, "files", [
            _field("file4101391790", "url", "file", maxSelect=1, maxSize=0, mimeTypes=[],
                   protected=False, required=False, thumbs=[]),
            _text("text1843675174", "description"),
        ])),
        Migration(
            "1751582204_updated_files",
            _edit(FILES_ID, _update({"name": "uploads"}), _insert(3, _field(
                "select2363381545", "type", "select", maxSelect=1, required=False,
                values=["Markdown", "Image", "Video"]))),
            _edit(FILES_ID, _update({"name": "files"}), _drop("select2363381545")),
        ),
        Migration(
            "1751582318_updated_posts",
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_SLUG_PERMALINK, _POSTS_TITLE]}),
                  _insert(8, _field("relation4036791755", "featured_images", "relation",
                                    cascadeDelete=False, collectionId=FILES_ID,
                                    maxSelect=999, minSelect=0, required=False))),
            _edit(POSTS_ID, _update({"indexes": []}), _drop("relation4036791755")),
        ),
        Migration(
            "1751582328_updated_tags",
            _edit(TAGS_ID, _update({"indexes": [
                "CREATE UNIQUE INDEX `idx_VeDgE3m8s8` ON `tags` (`title`)"]})),
            _edit(TAGS_ID, _update({"indexes": []})),
        ),
        Migration(
            "1751582344_updated_collections",
            _edit(COLLECTIONS_ID, _update({"indexes": [
                "CREATE UNIQUE INDEX `idx_j505Ta7pud` ON `collections` "
                "(\n  `title`,\n  `slug`\n)"]})),
            _edit(COLLECTIONS_ID, _update({"indexes": []})),
        ),
    ]