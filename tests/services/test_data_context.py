"""
Unit tests for `services/data_context.py` – DataContextStore.

Covers additive record accounting, replacement semantics, eviction of present
and absent names, insertion ordering and snapshot isolation.
"""

import pytest

from services.data_context import DataContextStore, DataSourceNotFoundError


def test_records_ingested_is_sum_of_all_ingests_regardless_of_evictions():
    store = DataContextStore()
    operations = [
        ("ingest", "a.csv", 10),
        ("ingest", "b.csv", 5),
        ("evict", "a.csv", None),
        ("ingest", "a.csv", 7),
        ("evict", "missing.csv", None),
        ("evict", "b.csv", None),
        ("ingest", "c.csv", 0),
    ]
    expected = 0
    for action, name, count in operations:
        if action == "ingest":
            store.ingest(name, "x,y\n1,2", count)
            expected += count
        else:
            store.evict(name)
        assert store.records_ingested == expected

    assert store.records_ingested == 22


def test_reingest_replaces_content_and_adds_count():
    store = DataContextStore()

    assert store.ingest("sales.csv", "<content>", 120) is False
    assert store.records_ingested == 120

    assert store.ingest("sales.csv", "<other content>", 30) is True
    assert store.records_ingested == 150
    assert store.get("sales.csv") == "<other content>"
    assert store.list_names() == ["sales.csv"]


def test_evict_removes_name_and_absent_name_is_noop():
    store = DataContextStore()
    store.ingest("a.csv", "1", 1)

    assert store.evict("a.csv") is True
    assert "a.csv" not in store.list_names()

    assert store.evict("a.csv") is False
    assert store.evict("never-loaded.csv") is False
    assert store.list_names() == []


def test_list_names_keeps_insertion_order_on_replacement():
    store = DataContextStore()
    store.ingest("first.csv", "1", 1)
    store.ingest("second.csv", "2", 1)
    store.ingest("first.csv", "1b", 1)

    assert store.list_names() == ["first.csv", "second.csv"]


def test_get_unknown_name_raises_not_found():
    store = DataContextStore()

    with pytest.raises(DataSourceNotFoundError) as excinfo:
        store.get("nope.csv")

    assert excinfo.value.name == "nope.csv"
    assert isinstance(excinfo.value, KeyError)


def test_snapshot_is_independent_copy():
    store = DataContextStore()
    store.ingest("a.csv", "a", 1)

    snapshot = store.snapshot()
    store.ingest("b.csv", "b", 1)
    store.evict("a.csv")

    assert snapshot == {"a.csv": "a"}
    assert store.snapshot() == {"b.csv": "b"}


@pytest.mark.parametrize("name, count", [("", 1), ("a.csv", -1), ("a.csv", 1.5), ("a.csv", True)])
def test_ingest_rejects_invalid_arguments(name, count):
    store = DataContextStore()

    with pytest.raises(ValueError):
        store.ingest(name, "content", count)

    assert store.records_ingested == 0
    assert len(store) == 0
