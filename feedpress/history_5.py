"""Last part of the migration history.

It opens the remaining collections to public listing and viewing. It
lengthens superuser token lifetimes and gives post chapters a plain-text
permalink. It also settles the single featured image, summary and page type
of posts.
"""

from __future__ import annotations

from typing import Any

from .history_1 import (
    FILES_ID,
    POSTS_ID,
    TAGS_ID,
    _drop,
    _edit,
    _insert,
    _text,
    _update,
)
from .history_2 import CONTEXTS_ID, LINKS_ID, _relation
from .history_3 import (
    CROSSPOST_QUEUE_ID,
    INSTAGRAM_POSTS_ID,
    _instagram_account,
    _select,
    _url,
)
from .history_4 import POST_CHAPTERS_ID, _open_up
from .schema import Migration

SUPERUSERS_ID = "pbc_3142635823"


def _tokens(auth_duration: int, file_duration: int) -> dict[str, Any]:
    return dict(authToken=dict(duration=auth_duration),
                fileToken=dict(duration=file_duration))


def _featured_image(name: str, max_select: int) -> dict[str, Any]:
    return _relation("relation4036791755", name, FILES_ID, max_select=max_select)


def _post_type(values: list[str]) -> dict[str, Any]:
    return _select("select2363381545", "type", values)


def _context_slug() -> dict[str, Any]:
    return _text("text2560465762", "slug")


def migrations() -> list[Migration]:
    """Return this part of the migration history in order."""
    return [
        _open_up("1751615175_updated_instagram_posts", INSTAGRAM_POSTS_ID),
        _open_up("1751615179_updated_links", LINKS_ID),
        _open_up("1751615184_updated_post_chapters", POST_CHAPTERS_ID),
        Migration(
            "1751620560_updated_contexts",
            _edit(CONTEXTS_ID, _insert(5, _instagram_account())),
            _edit(CONTEXTS_ID, _drop("relation4029274538")),
        ),
        Migration(
            "1751632980_updated__superusers",
            _edit(SUPERUSERS_ID, _update(_tokens(94670856, 1800))),
            _edit(SUPERUSERS_ID, _update(_tokens(86400, 180))),
        ),
        Migration(
            "1751657064_updated_post_chapters",
            _edit(POST_CHAPTERS_ID, _drop("url4068916274")),
            _edit(POST_CHAPTERS_ID, _insert(5, _url(
                "url4068916274", "permalink", domains=[], required=True))),
        ),
        Migration(
            "1751657085_updated_post_chapters",
            _edit(POST_CHAPTERS_ID, _insert(6, _text("text4068916274", "permalink"))),
            _edit(POST_CHAPTERS_ID, _drop("text4068916274")),
        ),
        _open_up("1751659734_updated_posts", POSTS_ID),
        _open_up("1751659766_updated_tags", TAGS_ID),
        _open_up("1751659770_updated_uploads", FILES_ID),
        _open_up("1751659803_updated_crosspost_queue", CROSSPOST_QUEUE_ID),
        Migration(
            "1751660092_updated_posts",
            _edit(POSTS_ID, _insert(8, _featured_image("featured_image", 1))),
            _edit(POSTS_ID, _insert(8, _featured_image("featured_images", 999))),
        ),
        Migration(
            "1751664898_updated_posts",
            _edit(POSTS_ID, _insert(11, _text("text3458754147", "summary"))),
            _edit(POSTS_ID, _drop("text3458754147")),
        ),
        Migration(
            "1751665590_updated_posts",
            _edit(POSTS_ID, _insert(4, _post_type(["Blog", "Youtube", "Gallery", "Pages"]))),
            _edit(POSTS_ID, _insert(4, _post_type(["Blog", "Youtube", "Gallery"]))),
        ),
        Migration(
            "1751890268_updated_contexts",
            _edit(CONTEXTS_ID, _insert(6, _context_slug())),
            _edit(CONTEXTS_ID, _drop("text2560465762")),
        ),
        Migration(
            "1751890304_updated_contexts",
            _edit(CONTEXTS_ID, _drop("text2560465762")),
            _edit(CONTEXTS_ID, _insert(6, _context_slug())),
        ),
    ]