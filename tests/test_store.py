import re

import pytest

from feedpress.store import CollectionNotFound, Record, RecordNotFound, RecordStore


@pytest.fixture
def store():
    return RecordStore(["posts", "tags"])


def test_new_record_unknown_collection(store):
    with pytest.raises(CollectionNotFound):
        store.new_record("missing")


def test_save_assigns_id(store):
    record = store.new_record("tags")
    record["title"] = "alpha"
    store.save(record)
    assert re.fullmatch(r"[a-z0-9]{15}", record.id)
    assert store.get("tags", record.id)["title"] == "alpha"


def test_get_missing_raises(store):
    with pytest.raises(RecordNotFound):
        store.get("tags", "nothing")


def test_get_returns_copy(store):
    record = store.new_record("tags")
    record["title"] = "alpha"
    store.save(record)
    fetched = store.get("tags", record.id)
    fetched["title"] = "beta"
    assert store.get("tags", record.id)["title"] == "alpha"


def test_save_updates_existing(store):
    record = store.new_record("tags")
    record["title"] = "alpha"
    store.save(record)
    first_id = record.id
    record["title"] = "beta"
    store.save(record)
    assert record.id == first_id
    assert [r["title"] for r in store.find_all("tags")] == ["beta"]


def test_find_first_filters(store):
    for title in ("alpha", "beta"):
        record = store.new_record("tags")
        record["title"] = title
        store.save(record)
    assert store.find_first("tags", title="beta")["title"] == "beta"
    with pytest.raises(RecordNotFound):
        store.find_first("tags", title="gamma")


def test_find_first_returns_oldest(store):
    ids = []
    for _ in range(3):
        record = store.new_record("tags")
        record["kind"] = "same"
        store.save(record)
        ids.append(record.id)
    assert store.find_first("tags", kind="same").id == ids[0]


def test_find_all_newest_first(store):
    ids = []
    for title in ("a", "b", "c"):
        record = store.new_record("posts")
        record["title"] = title
        store.save(record)
        ids.append(record.id)
    assert [r.id for r in store.find_all("posts")] == list(reversed(ids))


def test_find_all_unknown_collection(store):
    with pytest.raises(CollectionNotFound):
        store.find_all("missing")


def test_delete(store):
    record = store.new_record("tags")
    store.save(record)
    store.delete(record)
    with pytest.raises(RecordNotFound):
        store.get("tags", record.id)
    with pytest.raises(RecordNotFound):
        store.delete(record)


def test_record_mapping_access():
    record = Record("tags")
    record["title"] = "alpha"
    assert "title" in record
    assert record.get("missing", "fallback") == "fallback"
    assert record.to_dict()["collectionName"] == "tags"