import json
import os
import threading

import pytest

from visit_counter import metrics
from visit_counter.store import CounterStore, badges_path_for


def test_unknown_counter_is_zero(counters_path):
    store = CounterStore(counters_path)
    assert store.get("never-seen") == 0
    assert store.get_badge("never-seen") is None
    # reads never create files
    assert not os.path.exists(counters_path)


def test_get_is_counted_in_metrics(counters_path):
    store = CounterStore(counters_path)
    store.get("page")
    store.increment("page")
    store.get("page")
    assert metrics.get("counter_get") == 2
    assert metrics.get("counter_increment") == 1


def test_increment_sequence(counters_path):
    store = CounterStore(counters_path)
    results = [store.increment("home") for _ in range(5)]
    assert results == [1, 2, 3, 4, 5]
    assert store.get("home") == 5


def test_set_can_decrease(counters_path):
    store = CounterStore(counters_path)
    for _ in range(10):
        store.increment("page")
    store.set("page", 3)
    assert store.get("page") == 3
    store.set("page", 3)
    assert store.get("page") == 3


def test_set_rejects_negative(counters_path):
    store = CounterStore(counters_path)
    with pytest.raises(ValueError):
        store.set("page", -1)
    assert store.get("page") == 0


def test_badge_mirrors_counter(counters_path):
    store = CounterStore(counters_path)
    store.increment("blog")
    first = store.get_badge("blog")
    assert first is not None
    assert first.name == "blog"
    assert first.count == store.get("blog") == 1
    assert first.created_at == first.last_accessed

    store.set("blog", 41)
    second = store.get_badge("blog")
    assert second.count == store.get("blog") == 41
    assert second.last_accessed >= first.last_accessed
    assert second.created_at == first.created_at

    store.increment("blog")
    third = store.get_badge("blog")
    assert third.count == 42
    assert third.last_accessed >= second.last_accessed


def test_create_badge_defaults_and_initial_count(counters_path):
    store = CounterStore(counters_path)
    x = store.create_badge("x")
    assert x.count == 0
    assert store.get("x") == 0
    assert store.get_badge("x").count == 0

    y = store.create_badge("y", 5)
    assert y.count == 5
    assert store.get("y") == 5


def test_returned_badges_are_copies(counters_path):
    store = CounterStore(counters_path)
    store.create_badge("x", 1)
    badge = store.get_badge("x")
    badge.count = 999
    assert store.get("x") == 1


def test_delete_badge_removes_counter(counters_path):
    store = CounterStore(counters_path)
    store.increment("gone")
    assert store.delete_badge("gone") is True
    assert store.get("gone") == 0
    assert store.get_badge("gone") is None
    assert store.delete_badge("gone") is False

    with open(counters_path, "r", encoding="utf-8") as fh:
        assert "gone" not in json.load(fh)


def test_get_all_badges(counters_path):
    store = CounterStore(counters_path)
    store.increment("a")
    store.create_badge("b", 7)
    badges = {b.name: b.count for b in store.get_all_badges()}
    assert badges == {"a": 1, "b": 7}
    assert len(store) == 2
    assert "a" in store


def test_files_written_as_pretty_json(counters_path):
    store = CounterStore(counters_path)
    store.increment("a")
    store.increment("a")
    badges_path = badges_path_for(counters_path)
    assert badges_path.endswith("counters_badges.json")

    with open(counters_path, "r", encoding="utf-8") as fh:
        text = fh.read()
    assert json.loads(text) == {"a": 2}
    assert "\n" in text

    with open(badges_path, "r", encoding="utf-8") as fh:
        record = json.load(fh)["a"]
    assert record["name"] == "a"
    assert record["count"] == 2
    assert record["created_at"].endswith("Z")
    assert record["last_accessed"].endswith("Z")


def test_reload_reproduces_state(counters_path):
    store = CounterStore(counters_path)
    store.increment("a")
    store.increment("a")
    store.set("b", 10)
    store.create_badge("c", 3)

    reloaded = CounterStore(counters_path)
    for name in ("a", "b", "c"):
        assert reloaded.get(name) == store.get(name)
    before = sorted(store.get_all_badges(), key=lambda b: b.name)
    after = sorted(reloaded.get_all_badges(), key=lambda b: b.name)
    assert before == after


def test_unreadable_files_fall_back_to_empty(counters_path):
    with open(counters_path, "w", encoding="utf-8") as fh:
        fh.write("{not json")
    with open(badges_path_for(counters_path), "w", encoding="utf-8") as fh:
        fh.write("[1, 2, 3]")
    store = CounterStore(counters_path)
    assert store.get_all_badges() == []
    assert metrics.get("load_failure") == 2
    assert store.increment("fresh") == 1


def test_negative_counts_are_rejected_on_load(counters_path):
    with open(counters_path, "w", encoding="utf-8") as fh:
        json.dump({"a": -3, "b": 2}, fh)
    store = CounterStore(counters_path)
    assert store.get("a") == 0
    assert store.get("b") == 0


def test_counters_without_badge_records_get_one(counters_path):
    with open(counters_path, "w", encoding="utf-8") as fh:
        json.dump({"legacy": 12}, fh)
    store = CounterStore(counters_path)
    assert store.get("legacy") == 12
    badge = store.get_badge("legacy")
    assert badge is not None
    assert badge.count == 12


def test_counters_file_wins_over_badge_count(counters_path):
    with open(counters_path, "w", encoding="utf-8") as fh:
        json.dump({"a": 9}, fh)
    with open(badges_path_for(counters_path), "w", encoding="utf-8") as fh:
        json.dump({"a": {"name": "a", "count": 4,
                         "created_at": "2024-01-02T03:04:05.123456789Z",
                         "last_accessed": "2024-01-03T00:00:00Z"}}, fh)
    store = CounterStore(counters_path)
    badge = store.get_badge("a")
    assert store.get("a") == 9
    assert badge.count == 9
    assert badge.created_at.year == 2024
    assert badge.created_at.microsecond == 123456


def test_badge_without_counter_is_dropped_on_load(counters_path):
    store = CounterStore(counters_path)
    store.increment("gone")
    store.increment("gone")
    store.increment("kept")
    with open(badges_path_for(counters_path), encoding="utf-8") as fh:
        stale_badges = fh.read()

    assert store.delete_badge("gone") is True
    # simulate a crash after the counters file was rewritten but before the badges file
    with open(badges_path_for(counters_path), "w", encoding="utf-8") as fh:
        fh.write(stale_badges)

    reloaded = CounterStore(counters_path)
    assert reloaded.get("gone") == 0
    assert reloaded.get_badge("gone") is None
    assert "gone" not in reloaded
    assert [b.name for b in reloaded.get_all_badges()] == ["kept"]
    assert reloaded.get("kept") == 1


def test_persist_failure_is_swallowed(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = CounterStore(str(blocker / "counters.json"))

    assert store.increment("a") == 1
    assert store.increment("a") == 2
    assert store.get("a") == 2
    assert store.get_badge("a").count == 2
    # both files fail on every write
    assert metrics.get("persist_failure") == 4


def test_concurrent_increments(counters_path):
    store = CounterStore(counters_path)
    threads = [threading.Thread(target=lambda: [store.increment("hot") for _ in range(25)])
               for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.get("hot") == 200
    assert store.get_badge("hot").count == 200
    assert CounterStore(counters_path).get("hot") == 200


def test_badges_path_for_variants():
    assert badges_path_for("/data/counters.json") == "/data/counters_badges.json"
    assert badges_path_for("state/visits") == "state/visits_badges.json"
