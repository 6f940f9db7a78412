"""Third part of the migration history.

It turns the crosspost job list into a queue and adds Instagram accounts
and posts. It also splits uploads into file and URL fields and drops the
text permalink from posts.
"""

from __future__ import annotations

from typing import Any

from .history_1 import (
    FILES_ID,
    POSTS_ID,
    _collection,
    _create,
    _drop,
    _edit,
    _field,
    _insert,
    _text,
    _update,
)
from .history_2 import (
    _POSTS_CONTEXT,
    _POSTS_PERMALINK,
    _POSTS_SLUG,
    _POSTS_TAGS,
    _POSTS_TITLE,
    CROSSPOST_JOBS_ID,
    _bool,
    _relation,
)
from .schema import Migration

CROSSPOST_QUEUE_ID = CROSSPOST_JOBS_ID
INSTAGRAM_ACCOUNTS_ID = "pbc_1204830414"
INSTAGRAM_POSTS_ID = "pbc_3545500662"

_QUEUE_POST = "CREATE INDEX `idx_iUxkYuv3ar` ON `crosspost_queue` (`post`)"


def _date(field_id: str, name: str) -> dict[str, Any]:
    return _field(field_id, name, "date", max="", min="", required=False)


def _url(field_id: str, name: str, *, domains: list[str] | None,
         required: bool = False) -> dict[str, Any]:
    return _field(field_id, name, "url",
                  exceptDomains=None if domains is None else list(domains),
                  onlyDomains=None if domains is None else list(domains),
                  required=required)


def _select(field_id: str, name: str, values: list[str]) -> dict[str, Any]:
    return _field(field_id, name, "select", maxSelect=1, required=False,
                  values=list(values))


def _file(name: str) -> dict[str, Any]:
    return _field("file4101391790", name, "file", maxSelect=1, maxSize=0,
                  mimeTypes=[], protected=False, required=False, thumbs=[])


def _instagram_account(required: bool = False) -> dict[str, Any]:
    return _relation("relation4029274538", "instagram_account",
                     INSTAGRAM_ACCOUNTS_ID, max_select=1, required=required)


def _instagram_post_link(linked: bool) -> dict[str, Any]:
    return _relation("relation1519021197", "post", POSTS_ID, max_select=1,
                     required=linked, cascade=linked)


def _instagram_accounts() -> dict[str, Any]:
    data = _collection(INSTAGRAM_ACCOUNTS_ID, "instagram_accounts", [
        _text("text1579384326", "name"),
        _text("text3939563132", "access_key"),
        _bool("bool2406368959", "has_threads_link"),
        _date("date3800161007", "last_token_refresh"),
    ])
    data["fields"][0] = _field(
        "text3208210256", "id", "text", autogeneratePattern="", max=0, min=0,
        pattern="^[a-z0-9]+$", primaryKey=True, required=True, system=True)
    data["indexes"] = [
        "CREATE INDEX `idx_LLYAjD4PGs` ON `instagram_accounts` (`name`)"]
    return data


def migrations() -> list[Migration]:
    """Return this part of the migration history in order."""
    return [
        Migration(
            "1751583282_updated_crosspost_jobs",
            _edit(CROSSPOST_QUEUE_ID,
                  _update({"indexes": [_QUEUE_POST], "name": "crosspost_queue"}),
                  _insert(3, _select("select2063623452", "status",
                                     ["Queued", "Success", "Failure"])),
                  _insert(4, _text("text3194832890", "status_message")),
                  _insert(5, _date("date989355118", "completed"))),
            _edit(CROSSPOST_QUEUE_ID,
                  _update({"indexes": [], "name": "crosspost_jobs"}),
                  _drop("select2063623452"),
                  _drop("text3194832890"),
                  _drop("date989355118")),
        ),
        _create("1751583455_created_instagram_accounts", _instagram_accounts()),
        _create("1751583545_created_instagram_posts",
                _collection(INSTAGRAM_POSTS_ID, "instagram_posts", [
                    _instagram_account(),
                    _instagram_post_link(False),
                ])),
        Migration(
            "1751583600_updated_instagram_accounts",
            _edit(INSTAGRAM_ACCOUNTS_ID,
                  _insert(1, _relation("relation3311767829", "profile_picture",
                                       FILES_ID, max_select=1)),
                  _insert(3, _text("text1784151356", "at"))),
            _edit(INSTAGRAM_ACCOUNTS_ID,
                  _drop("relation3311767829"),
                  _drop("text1784151356")),
        ),
        Migration(
            "1751583658_updated_instagram_posts",
            _edit(INSTAGRAM_POSTS_ID,
                  _insert(3, _url("url260122942", "instagram_url", domains=[])),
                  _insert(4, _url("url966623967", "threads_url", domains=None)),
                  _insert(1, _instagram_account(required=True)),
                  _insert(2, _instagram_post_link(True))),
            _edit(INSTAGRAM_POSTS_ID,
                  _drop("url260122942"),
                  _drop("url966623967"),
                  _insert(1, _instagram_account()),
                  _insert(2, _instagram_post_link(False))),
        ),
        Migration(
            "1751583713_updated_crosspost_queue",
            _edit(CROSSPOST_QUEUE_ID,
                  _drop("text961728715"),
                  _insert(5, _instagram_account())),
            _edit(CROSSPOST_QUEUE_ID,
                  _insert(1, _text("text961728715", "platform")),
                  _drop("relation4029274538")),
        ),
        Migration(
            "1751583755_updated_crosspost_queue",
            _edit(CROSSPOST_QUEUE_ID,
                  _insert(1, _select("select961728715", "platform", ["Instagram"]))),
            _edit(CROSSPOST_QUEUE_ID, _drop("select961728715")),
        ),
        Migration(
            "1751583786_updated_crosspost_queue",
            _edit(CROSSPOST_QUEUE_ID,
                  _insert(2, _select("select2363381545", "type", ["Create", "Update"]))),
            _edit(CROSSPOST_QUEUE_ID, _drop("select2363381545")),
        ),
        Migration(
            "1751583891_updated_instagram_posts",
            _edit(INSTAGRAM_POSTS_ID, _insert(5, _date("date2173440322", "last_synced"))),
            _edit(INSTAGRAM_POSTS_ID, _drop("date2173440322")),
        ),
        Migration(
            "1751584235_updated_uploads",
            # The file field is renamed before the new "url" field is added so
            # that the two never share a name.
            _edit(FILES_ID,
                  _insert(1, _file("file")),
                  _insert(2, _url("url4101391790", "url", domains=None))),
            _edit(FILES_ID,
                  _drop("url4101391790"),
                  _insert(1, _file("url"))),
        ),
        Migration(
            "1751584248_updated_posts",
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_TITLE, _POSTS_TAGS,
                                       _POSTS_CONTEXT, _POSTS_SLUG]}),
                  _drop("text4068916274")),
            _edit(POSTS_ID,
                  _update({"indexes": [_POSTS_TITLE, _POSTS_TAGS, _POSTS_CONTEXT,
                                       _POSTS_SLUG, _POSTS_PERMALINK]}),
                  _insert(6, _text("text4068916274", "permalink", required=True))),
        ),
    ]