import pytest

from feedpress import history_1, history_2
from feedpress.schema import MigrationRunner, Schema, SchemaError


def _runner():
    return MigrationRunner(history_1.migrations() + history_2.migrations())


def _upgraded():
    schema = Schema()
    _runner().upgrade(schema)
    return schema


def _snapshot(schema):
    return sorted(schema, key=lambda c: c.id)


def _field(collection, name):
    return next(f for f in collection.fields if f.name == name)


def test_migrations_are_ordered_after_first_part():
    names = [m.name for m in history_2.migrations()]
    assert names == sorted(names)
    assert len(names) == 10
    last_first = max(m.name for m in history_1.migrations())
    assert all(name > last_first for name in names)


def test_upgrade_creates_new_collections():
    schema = _upgraded()
    for name in ("contexts", "collection_posts", "links", "crosspost_jobs"):
        assert name in schema
    assert schema.find("contexts").id == "pbc_3961493164"


def test_posts_fields_after_upgrade():
    posts = _upgraded().find("posts")
    assert posts.field_names() == [
        "id", "title", "subtitle", "content", "type", "is_visible", "permalink",
        "slug", "featured_images", "tags", "context", "created", "updated",
    ]
    assert _field(posts, "tags").options["collectionId"] == "pbc_1219621782"
    assert _field(posts, "context").options["collectionId"] == "pbc_3961493164"


def test_posts_indexes_after_upgrade():
    posts = _upgraded().find("posts")
    assert posts.indexes == [
        "CREATE INDEX `idx_RQpao89B94` ON `posts` (`title`)",
        "CREATE INDEX `idx_FLcgWqytYx` ON `posts` (`tags`)",
        "CREATE INDEX `idx_zZQC4x0xyG` ON `posts` (`context`)",
        "CREATE UNIQUE INDEX `idx_qnorEI6EBq` ON `posts` (`slug`)",
        "CREATE UNIQUE INDEX `idx_dlm3OzAux5` ON `posts` (`permalink`)",
    ]


def test_collections_gain_explainer_post():
    collections = _upgraded().find("collections")
    assert collections.field_names().index("explainer_post") == 4
    assert _field(collections, "explainer_post").options["maxSelect"] == 1


def test_collection_posts_links_cascade_after_upgrade():
    cp = _upgraded().find("collection_posts")
    assert cp.field_names()[:4] == ["id", "collection", "post", "order"]
    assert _field(cp, "collection").options["cascadeDelete"] is True
    assert _field(cp, "post").options["cascadeDelete"] is True
    assert _field(cp, "order").required


def test_downgrade_one_step_restores_no_cascade():
    schema = _upgraded()
    reverted = _runner().downgrade(schema, 1)
    assert reverted == ["1751583123_updated_collection_posts"]
    cp = schema.find("collection_posts")
    assert _field(cp, "collection").options["cascadeDelete"] is False
    assert _field(cp, "post").options["cascadeDelete"] is False
    assert cp.field_names()[:4] == ["id", "collection", "post", "order"]


def test_links_schema():
    links = _upgraded().find("links")
    assert links.field_names() == [
        "id", "title", "href", "is_local", "image", "click_count",
        "is_visible", "order", "created", "updated",
    ]
    assert len(links.indexes) == 2


def test_full_downgrade_returns_to_first_part():
    base = Schema()
    MigrationRunner(history_1.migrations()).upgrade(base)
    expected = _snapshot(base)

    schema = _upgraded()
    _runner().downgrade(schema, len(history_2.migrations()))
    assert _snapshot(schema) == expected
    assert "contexts" not in schema
    assert "links" not in schema


def test_upgrade_then_downgrade_then_upgrade_is_stable():
    schema = _upgraded()
    first = _snapshot(schema)
    runner = _runner()
    runner.downgrade(schema, 10)
    runner.upgrade(schema)
    assert _snapshot(schema) == first


def test_requires_first_part():
    schema = Schema()
    with pytest.raises(SchemaError):
        MigrationRunner(history_2.migrations()).upgrade(schema)
    assert schema.applied == ["1751582453_created_contexts"]
    assert "contexts" in schema