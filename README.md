# feedpress

Tools for running a small personal feed: take a Markdown post with YAML
frontmatter, store it with a unique slug, link its tags, contexts and
collections, split its headings into chapters, and queue Instagram
crossposts. The package also holds the full history of collection-schema
migrations, so the current schema can be built, upgraded and rolled back in
memory.

## Install

```
pip install feedpress
```

For the test suite:

```
pip install "feedpress[test]"
pytest
```

## Posts

A post starts with a frontmatter block:

```
---
title: Hello World
subtitle: First post
tags: [python, notes]
collections: [Journal]
is_visible: true
crosspost_instagram: false
---
# Introduction
Some text.
## Details
More text.
```

```python
from feedpress.catalog import build_schema
from feedpress.store import RecordStore
from feedpress.posts import PostProcessor, parse_frontmatter, parse_chapters, slug_base

store = RecordStore(build_schema())
processor = PostProcessor(store, app_url="https://blog.example.com")

result = processor.process_post(markdown_text)          # create
post = result["post"]
processor.process_post(markdown_text, post.id)          # update

slug_base("Hello, World!")          # "hello-world"
front, body = parse_frontmatter(markdown_text)
chapters = parse_chapters(body)     # list of Chapter(title, level, order, parent_id)
```

`process_post` returns `{"post": Record, "message": "Post processed successfully"}`.
When `app_url` is not given, the `APP_URL` environment variable is used; if
it is set, posts get a permalink of `<app_url>/<slug>`.

Slugs are made unique per collection: `hello-world`, then `hello-world-1`
up to `hello-world-5`, and after that a nanosecond timestamp suffix. For
posts, a slug whose permalink is already taken also counts as used.

Tags and collections named in the frontmatter are created when missing;
contexts must already exist and unknown ones are skipped. Each heading
becomes a `post_chapters` record linked to its parent heading. A crosspost
queue entry is added only when `crosspost_instagram` is true and an
Instagram account exists; `crosspost_threads` is read but queues nothing.

Malformed frontmatter raises `FrontmatterError`; an update for an unknown
post raises `RecordNotFound`; an unknown collection raises
`CollectionNotFound`.

## Record store

`feedpress.store.RecordStore` keeps `Record` objects per collection in
memory. It offers `new_record`, `save`, `delete`, `get`, `find_first` and
`find_all`; the finders take field values as keyword arguments, and
`find_all` returns the newest records first.

## Schema migrations

```python
from feedpress.catalog import all_migrations, build_schema
from feedpress.schema import MigrationRunner, Schema

schema = build_schema()
schema.find("posts").field_names()

runner = MigrationRunner(all_migrations())
fresh = Schema()
runner.upgrade(fresh)          # names of the migrations applied
runner.downgrade(fresh, 1)     # names of the migrations reverted
```

`build_schema` starts from the built-in `_superusers` collection and applies
every migration. Each migration runs in a transaction: if it fails, the
schema is left as it was and `SchemaError` is raised.

## Text helpers

```python
from feedpress.text import (
    format_date, format_relative_date, format_short_date, format_time, truncate_string,
)

format_date("2024-03-05T14:07:00Z")       # "Mar 5, 2024 at 2:07 PM"
format_short_date("2024-03-05T14:07:00Z") # "Mar 5, 2024"
format_time("2024-03-05T14:07:00Z")       # "2:07 PM"
format_relative_date("2024-03-05T14:07:00Z", now)  # "just now", "3 hours ago", ...
truncate_string("abcdefghij", 6)          # "abc..."
```

Unparsable dates are returned unchanged.

`feedpress.assets.asset_url` adds a cache-busting version taken from the
modification time of the file at `../<path>` (`?v=0` when it is missing),
and `feedpress.templui` has small helpers for templates: `if_value`,
`if_else`, `merge_attributes` and `random_id`.

## What it does not do

There is no HTTP server or endpoint for receiving posts, no command-line
tool, and no database: records and schemas live in memory only, and
migrations change the in-memory `Schema`, not any real tables.