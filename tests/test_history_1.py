import pytest

from feedpress.history_1 import migrations
from feedpress.schema import MigrationRunner, Schema, SchemaError


@pytest.fixture
def upgraded():
    runner = MigrationRunner(migrations())
    schema = Schema()
    runner.upgrade(schema)
    return runner, schema


def test_migration_names_are_ordered():
    names = [m.name for m in migrations()]
    assert names == sorted(names)
    assert names[0] == "1751581763_created_collections"
    assert len(names) == 8


def test_upgrade_creates_collections(upgraded):
    _, schema = upgraded
    assert sorted(c.name for c in schema) == ["collections", "posts", "tags", "uploads"]


def test_files_renamed_to_uploads_with_type(upgraded):
    _, schema = upgraded
    uploads = schema.find("pbc_3446931122")
    assert uploads.name == "uploads"
    assert uploads.field_names() == ["id", "url", "description", "type", "created", "updated"]
    with pytest.raises(SchemaError):
        schema.find("files")


def test_posts_fields_and_indexes(upgraded):
    _, schema = upgraded
    posts = schema.find("posts")
    assert posts.field_names() == [
        "id", "title", "subtitle", "content", "type", "is_visible",
        "permalink", "slug", "featured_images", "created", "updated",
    ]
    assert "CREATE INDEX `idx_RQpao89B94` ON `posts` (`title`)" in posts.indexes
    assert len(posts.indexes) == 2


def test_tags_and_collections_indexes(upgraded):
    _, schema = upgraded
    assert schema.find("tags").indexes == [
        "CREATE UNIQUE INDEX `idx_VeDgE3m8s8` ON `tags` (`title`)"]
    assert len(schema.find("collections").indexes) == 1


def test_required_flags_carried(upgraded):
    _, schema = upgraded
    posts = {f.name: f for f in schema.find("posts").fields}
    assert posts["title"].required is True
    assert posts["content"].required is False


def test_downgrade_one_step(upgraded):
    runner, schema = upgraded
    assert runner.downgrade(schema) == ["1751582344_updated_collections"]
    assert schema.find("collections").indexes == []


def test_full_downgrade_and_reupgrade(upgraded):
    runner, schema = upgraded
    before = sorted(schema, key=lambda c: c.id)
    runner.downgrade(schema, len(migrations()))
    assert len(schema) == 0
    runner.upgrade(schema)
    assert sorted(schema, key=lambda c: c.id) == before


def test_downgrade_restores_files_name(upgraded):
    runner, schema = upgraded
    runner.downgrade(schema, 4)
    files = schema.find("files")
    assert "type" not in files.field_names()
    assert schema.find("posts").indexes == []
    assert "featured_images" not in schema.find("posts").field_names()