import pytest

from feedpress import history_1, history_2, history_3, history_4
from feedpress.schema import MigrationRunner, Schema, SchemaError


def _earlier():
    return history_1.migrations() + history_2.migrations() + history_3.migrations()


def _snapshot(schema):
    return {
        c.id: (c.name, sorted(f.id for f in c.fields), list(c.indexes),
               c.list_rule, c.view_rule)
        for c in schema
    }


@pytest.fixture
def base_schema():
    schema = Schema()
    MigrationRunner(_earlier()).upgrade(schema)
    return schema


@pytest.fixture
def full():
    schema = Schema()
    runner = MigrationRunner(_earlier() + history_4.migrations())
    runner.upgrade(schema)
    return runner, schema


def test_upgrade_applies_names_in_order(base_schema):
    names = [m.name for m in history_4.migrations()]
    runner = MigrationRunner(_earlier() + history_4.migrations())
    assert runner.upgrade(base_schema) == names
    assert base_schema.applied[-len(names):] == names
    assert names == sorted(names)


def test_posts_fields_after_upgrade(full):
    _, schema = full
    posts = schema.find("posts")
    names = posts.field_names()
    assert "context" not in names
    assert "uploads" in names
    permalink = next(f for f in posts.fields if f.name == "permalink")
    assert permalink.id == "url4068916274"
    assert permalink.type == "url"
    assert "CREATE UNIQUE INDEX `idx_FIRBHrXwJR` ON `posts` (`permalink`)" in posts.indexes
    assert all("`context`" not in index for index in posts.indexes)


def test_segments_renamed_to_post_chapters(full):
    _, schema = full
    assert "segments" not in schema
    chapters = schema.find("post_chapters")
    assert chapters.id == history_4.POST_CHAPTERS_ID
    assert chapters.indexes == ["CREATE INDEX `idx_SeUwUX3TmJ` ON `post_chapters` (`post`)"]
    parent = next(f for f in chapters.fields if f.name == "parent_chapter")
    assert parent.options["collectionId"] == chapters.id
    assert {"post", "title", "slug", "permalink", "order"} <= set(chapters.field_names())
    assert chapters.list_rule == ""


def test_context_posts_links_contexts_and_posts(full):
    _, schema = full
    links = schema.find("context_posts")
    by_name = {f.name: f for f in links.fields}
    assert by_name["context"].options["collectionId"] == history_2.CONTEXTS_ID
    assert by_name["post"].options["collectionId"] == history_1.POSTS_ID
    assert links.view_rule == ""


def test_collections_indexes_and_rules(full):
    _, schema = full
    collections = schema.find("collections")
    assert collections.indexes == [
        "CREATE UNIQUE INDEX `idx_RQOq8j64oR` ON `collections` (`title`)",
        "CREATE UNIQUE INDEX `idx_Zd2PuMIvHf` ON `collections` (`slug`)",
    ]
    assert collections.list_rule == ""
    assert collections.view_rule == ""


def test_uploads_credit_source_and_contexts_logo(full):
    _, schema = full
    uploads = schema.find("uploads")
    credit = next(f for f in uploads.fields if f.name == "credit_source_url")
    assert credit.options["onlyDomains"] == []
    contexts = schema.find("contexts")
    logo = next(f for f in contexts.fields if f.name == "logo")
    assert logo.options["collectionId"] == history_1.FILES_ID
    assert contexts.list_rule == ""


def test_downgrade_restores_previous_schema(base_schema, full):
    runner, schema = full
    steps = len(history_4.migrations())
    reverted = runner.downgrade(schema, steps)
    assert reverted == [m.name for m in reversed(history_4.migrations())]
    assert _snapshot(schema) == _snapshot(base_schema)
    assert schema.applied == base_schema.applied


def test_partial_downgrade_brings_back_context(full):
    runner, schema = full
    names = [m.name for m in history_4.migrations()]
    count = len(names) - names.index("1751613322_updated_posts")
    runner.downgrade(schema, count)
    posts = schema.find("posts")
    assert "context" in posts.field_names()
    assert "CREATE INDEX `idx_zZQC4x0xyG` ON `posts` (`context`)" in posts.indexes
    assert "context_posts" not in schema


def test_running_alone_fails_and_leaves_schema_empty():
    schema = Schema()
    with pytest.raises(SchemaError):
        MigrationRunner(history_4.migrations()).upgrade(schema)
    assert len(schema) == 0
    assert schema.applied == []