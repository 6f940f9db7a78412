"""Second part of the migration history.

It adds contexts, collection links, external links, the crosspost job list
and the post relations to tags and contexts.
"""

from __future__ import annotations

from typing import Any

from .history_1 import (
    COLLECTIONS_ID,
    FILES_ID,
    POSTS_ID,
    TAGS_ID,
    _collection,
    _create,
    _drop,
    _edit,
    _field,
    _insert,
    _text,
    _update,
)
from .schema import Migration

CONTEXTS_ID = "pbc_3961493164"
COLLECTION_POSTS_ID = "pbc_3519724588"
LINKS_ID = "pbc_449060851"
CROSSPOST_JOBS_ID = "pbc_2079557661"

_POSTS_SLUG_PERMALINK = (
    "CREATE UNIQUE INDEX `idx_lBuOjNGbrm` ON `posts` (\n  `slug`,\n  `permalink`\n)"
)
_POSTS_TITLE = "CREATE INDEX `idx_RQpao89B94` ON `posts` (`title`)"
_POSTS_TAGS = "CREATE INDEX `idx_FLcgWqytYx` ON `posts` (`tags`)"
_POSTS_CONTEXT = "CREATE INDEX `idx_zZQC4x0xyG` ON `posts` (`context`)"
_POSTS_SLUG = "CREATE UNIQUE INDEX `idx_qnorEI6EBq` ON `posts` (`slug`)"
_POSTS_PERMALINK = "CREATE UNIQUE INDEX `idx_dlm3OzAux5` ON `posts` (`permalink`)"


def _relation(field_id: str, name: str, target: str, *, max_select: int,
              required: bool = False, cascade: bool = False) -> dict[str, Any]:
    return _field(field_id, name, "relation", cascadeDelete=cascade,
                  collectionId=target, maxSelect=max_select, minSelect=0,
                  required=required)


def _number(field_id: str, name: str, *, required: bool = False) -> dict[str, Any]:
    return _field(field_id, name, "number", max=None, min=None, onlyInt=False,
                  required=required)


def _bool(field_id: str, name: str) -> dict[str, Any]:
    return _field(field_id, name, "bool", required=False)


def _explainer_post() -> dict[str, Any]:
    return _relation("relation316374106", "explainer_post", POSTS_ID, max_select=1)


def _collection_link(cascade: bool) -> dict[str, Any]:
    return _relation("relation4232930610", "collection", COLLECTIONS_ID,
                     max_select=1, required=True, cascade=cascade)


def _post_link(cascade: bool) -> dict[str, Any]:
    return _relation("relation1519021197", "post", POSTS_ID,
                     max_select=1, required=True, cascade=cascade)


def migrations() -> list[Migration]:
    """Return this part of the migration history in order."""
    contexts = {
        **_collection(CONTEXTS_ID, "contexts", [
            _text("text724990059", "title", required=True),
            _text("text1843675174", "description"),
            _explainer_post(),
        ]),
        "indexes": ["CREATE UNIQUE INDEX `idx_rUidYxbTwk` ON `contexts` (`title`)"],
    }
    collection_posts = {
        **_collection(COLLECTION_POSTS_ID, "collection_posts", [
            _collection_link(False),
            _post_link(False),
            _number("number4113142680", "order", required=True),
        ]),
        "indexes": [
            "CREATE INDEX `idx_nm5DJNctzE` ON `collection_posts` (`collection`)",
            "CREATE INDEX `idx_O5OVI8VYLH` ON `collection_posts` (`post`)",
        ],
    }
    links = {
        **_collection(LINKS_ID, "links", [
            _text("text724990059", "title", required=True),
            _text("text888727361", "href", required=True),
            _bool("bool3341446040", "is_local"),
            _relation("relation3309110367", "image", FILES_ID, max_select=1),
            _number("number4032570574", "click_count"),
            _bool("bool1821142673", "is_visible"),
            _number("number4113142680", "order"),
        ]),
        "indexes": [
            "CREATE UNIQUE INDEX `idx_rmUxsnboKo` ON `links` (`title`)",
            "CREATE UNIQUE INDEX `idx_yCPSDi3ERO` ON `links` (`href`)",
        ],
    }
    crosspost_jobs = _collection(CROSSPOST_JOBS_ID, "crosspost_jobs", [
        _text("text961728715", "platform"),
        _relation("relation1519021197", "post", POSTS_ID, max_select=1, cascade=True),
    ])

    return [
        _create("1751582453_created_contexts", contexts),
        Migration(
            "1751582475_updated_collections",
            _edit(COLLECTIONS_ID, _insert(4, _explainer_post())),
            _edit(COLLECTIONS_ID, _drop("relation316374106")),
        ),
        Migration(
            "1751582545_updated_posts",
            _edit(POSTS_ID, _insert(9, _relation(
                "relation1874629670", "tags", TAGS_ID, max_select=999))),
            _edit(POSTS_ID, _drop("relation1874629670")),
        ),
        Migration(
            "1751582562_updated_posts",
            _edit(POSTS_ID, _update({"indexes": [
                _POSTS_SLUG_PERMALINK, _POSTS_TITLE, _POSTS_TAGS]})),
            _edit(POSTS_ID, _update({"indexes": [_POSTS_SLUG_PERMALINK, _POSTS_TITLE]})),
        ),
        Migration(
            "1751582601_updated_posts",
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_SLUG_PERMALINK, _POSTS_TITLE,
                                       _POSTS_TAGS, _POSTS_CONTEXT]}),
                  _insert(10, _relation("relation3797779838", "context",
                                        CONTEXTS_ID, max_select=999))),
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_SLUG_PERMALINK, _POSTS_TITLE, _POSTS_TAGS]}),
                  _drop("relation3797779838")),
        ),
        _create("1751582728_created_collection_posts", collection_posts),
        Migration(
            "1751582754_updated_posts",
            _edit(POSTS_ID, _update({"indexes": [
                _POSTS_TITLE, _POSTS_TAGS, _POSTS_CONTEXT, _POSTS_SLUG, _POSTS_PERMALINK]})),
            _edit(POSTS_ID, _update({"indexes": [
                _POSTS_SLUG_PERMALINK, _POSTS_TITLE, _POSTS_TAGS, _POSTS_CONTEXT]})),
        ),
        _create("1751582937_created_links", links),
        _create("1751583110_created_crosspost_jobs", crosspost_jobs),
        Migration(
            "1751583123_updated_collection_posts",
            _edit(COLLECTION_POSTS_ID,
                  _insert(1, _collection_link(True)), _insert(2, _post_link(True))),
            _edit(COLLECTION_POSTS_ID,
                  _insert(1, _collection_link(False)), _insert(2, _post_link(False))),
        ),
    ]