"""Fourth part of the migration history.

It gives posts a URL permalink and an uploads relation and replaces the post
context relation with a context_posts link collection. It also creates the
segments collection, later renamed post_chapters, and opens several
collections to public listing and viewing.
"""

from __future__ import annotations

from typing import Any

from .history_1 import (
    COLLECTIONS_ID,
    FILES_ID,
    POSTS_ID,
    _collection,
    _create,
    _drop,
    _edit,
    _insert,
    _text,
    _update,
)
from .history_2 import (
    _POSTS_CONTEXT,
    _POSTS_SLUG,
    _POSTS_TAGS,
    _POSTS_TITLE,
    COLLECTION_POSTS_ID,
    CONTEXTS_ID,
    _number,
    _relation,
)
from .history_3 import INSTAGRAM_ACCOUNTS_ID, _url
from .schema import Migration

SEGMENTS_ID = "pbc_1719698224"
POST_CHAPTERS_ID = SEGMENTS_ID
CONTEXT_POSTS_ID = "pbc_813624309"

_POSTS_URL_PERMALINK = "CREATE UNIQUE INDEX `idx_FIRBHrXwJR` ON `posts` (`permalink`)"
_CHAPTERS_POST = "CREATE INDEX `idx_SeUwUX3TmJ` ON `post_chapters` (`post`)"
_COLLECTIONS_TITLE_SLUG = (
    "CREATE UNIQUE INDEX `idx_j505Ta7pud` ON `collections` (\n  `title`,\n  `slug`\n)"
)
_COLLECTIONS_TITLE = "CREATE UNIQUE INDEX `idx_RQOq8j64oR` ON `collections` (`title`)"
_COLLECTIONS_SLUG = "CREATE UNIQUE INDEX `idx_Zd2PuMIvHf` ON `collections` (`slug`)"

_OPEN = {"listRule": "", "viewRule": ""}
_CLOSED = {"listRule": None, "viewRule": None}


def _post_relation() -> dict[str, Any]:
    return _relation("relation1519021197", "post", POSTS_ID, max_select=1)


def _posts_context() -> dict[str, Any]:
    return _relation("relation3797779838", "context", CONTEXTS_ID, max_select=999)


def _open_up(name: str, collection_id: str) -> Migration:
    return Migration(name, _edit(collection_id, _update(_OPEN)),
                     _edit(collection_id, _update(_CLOSED)))


def migrations() -> list[Migration]:
    """Return this part of the migration history in order."""
    segments = _collection(SEGMENTS_ID, "segments", [
        _text("text724990059", "title", required=True),
        _text("text2560465762", "slug", required=True),
        _url("url4068916274", "permalink", domains=[], required=True),
    ])
    context_posts = _collection(CONTEXT_POSTS_ID, "context_posts", [
        _relation("relation3797779838", "context", CONTEXTS_ID, max_select=1),
        _post_relation(),
    ])

    return [
        Migration(
            "1751584263_updated_posts",
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_TITLE, _POSTS_TAGS, _POSTS_CONTEXT,
                                       _POSTS_SLUG, _POSTS_URL_PERMALINK]}),
                  _insert(10, _url("url4068916274", "permalink", domains=None))),
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_TITLE, _POSTS_TAGS,
                                       _POSTS_CONTEXT, _POSTS_SLUG]}),
                  _drop("url4068916274")),
        ),
        Migration(
            "1751584310_updated_posts",
            _edit(POSTS_ID, _insert(11, _relation(
                "relation2517729048", "uploads", FILES_ID, max_select=999))),
            _edit(POSTS_ID, _drop("relation2517729048")),
        ),
        Migration(
            "1751612203_updated_contexts",
            _edit(CONTEXTS_ID, _insert(4, _relation(
                "relation3834550803", "logo", FILES_ID, max_select=1))),
            _edit(CONTEXTS_ID, _drop("relation3834550803")),
        ),
        _create("1751613271_created_segments", segments),
        Migration(
            "1751613297_updated_segments",
            _edit(SEGMENTS_ID, _insert(4, _number("number4113142680", "order"))),
            _edit(SEGMENTS_ID, _drop("number4113142680")),
        ),
        Migration(
            "1751613322_updated_posts",
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_TITLE, _POSTS_TAGS,
                                       _POSTS_SLUG, _POSTS_URL_PERMALINK]}),
                  _drop("relation3797779838")),
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_TITLE, _POSTS_TAGS, _POSTS_CONTEXT,
                                       _POSTS_SLUG, _POSTS_URL_PERMALINK]}),
                  _insert(10, _posts_context())),
        ),
        _create("1751613414_created_context_posts", context_posts),
        Migration(
            "1751613470_updated_segments",
            _edit(SEGMENTS_ID,
                  _update({"indexes": [_CHAPTERS_POST], "name": "post_chapters"}),
                  _insert(1, _post_relation())),
            _edit(SEGMENTS_ID,
                  _update({"indexes": [], "name": "segments"}),
                  _drop("relation1519021197")),
        ),
        Migration(
            "1751614216_updated_post_chapters",
            _edit(POST_CHAPTERS_ID, _insert(2, _relation(
                "relation2345255272", "parent_chapter", POST_CHAPTERS_ID,
                max_select=1))),
            _edit(POST_CHAPTERS_ID, _drop("relation2345255272")),
        ),
        Migration(
            "1751614648_updated_uploads",
            _edit(FILES_ID, _insert(5, _url(
                "url1459288913", "credit_source_url", domains=[]))),
            _edit(FILES_ID, _drop("url1459288913")),
        ),
        Migration(
            "1751615142_updated_collections",
            _edit(COLLECTIONS_ID, _update({
                "indexes": [_COLLECTIONS_TITLE, _COLLECTIONS_SLUG], **_OPEN})),
            _edit(COLLECTIONS_ID, _update({
                "indexes": [_COLLECTIONS_TITLE_SLUG], **_CLOSED})),
        ),
        _open_up("1751615150_updated_context_posts", CONTEXT_POSTS_ID),
        _open_up("1751615156_updated_contexts", CONTEXTS_ID),
        _open_up("1751615162_updated_collection_posts", COLLECTION_POSTS_ID),
        _open_up("1751615170_updated_instagram_accounts", INSTAGRAM_ACCOUNTS_ID),
    ]