"""
Unit tests for TodoManager: cached list, background store calls, error surfacing
"""

import threading

import pytest

from wristdo.apps.todo.errors import NotFoundError
from wristdo.apps.todo.manager import TodoManager

TIMEOUT = 5


def test_refresh_loads_cache(store):
    store.insert("Existing")
    manager = TodoManager(store)
    try:
        assert not manager.loaded
        tasks = manager.refresh().result(timeout=TIMEOUT)

        assert manager.loaded
        assert [t.text for t in tasks] == ["Existing"]
        assert manager.get_tasks() == tasks
    finally:
        manager.close()


def test_add_task_refreshes_list(manager, store):
    tasks = manager.add_task("Buy milk").result(timeout=TIMEOUT)

    assert [t.text for t in tasks] == ["Buy milk"]
    assert manager.get_tasks() == tasks
    assert store.count() == 1


def test_add_task_strips_whitespace(manager):
    tasks = manager.add_task("  Walk dog \n").result(timeout=TIMEOUT)
    assert tasks[0].text == "Walk dog"


@pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
def test_blank_text_never_reaches_store(fake_manager, fake_store, text):
    assert fake_manager.add_task(text) is None
    fake_manager.refresh().result(timeout=TIMEOUT)

    assert 'insert' not in fake_store.calls
    assert fake_store.count() == 0


def test_delete_task_removes_it(manager):
    manager.add_task("a").result(timeout=TIMEOUT)
    tasks = manager.add_task("b").result(timeout=TIMEOUT)

    remaining = manager.delete_task(tasks[0]).result(timeout=TIMEOUT)

    assert [t.text for t in remaining] == ["b"]
    assert tasks[0] not in manager.get_tasks()


def test_delete_missing_is_logged_noop(manager):
    tasks = manager.add_task("keep").result(timeout=TIMEOUT)

    result = manager.delete_task(999).result(timeout=TIMEOUT)

    assert result == tasks
    assert manager.error is None


def test_delete_missing_reported_when_asked(manager, store):
    manager.add_task("keep").result(timeout=TIMEOUT)

    future = manager.delete_task(999, report_missing=True)

    with pytest.raises(NotFoundError):
        future.result(timeout=TIMEOUT)
    assert [t.text for t in manager.get_tasks()] == ["keep"]
    assert manager.error is None


def test_delete_reaches_store_before_first_load(store):
    task = store.insert("present")
    manager = TodoManager(store)
    try:
        remaining = manager.delete_task(task.id, report_missing=True).result(timeout=TIMEOUT)

        assert remaining == []
        assert store.count() == 0
    finally:
        manager.close()


def test_double_delete_settles_on_store_state(manager):
    task = manager.add_task("once").result(timeout=TIMEOUT)[0]

    first = manager.delete_task(task)
    second = manager.delete_task(task)

    assert first.result(timeout=TIMEOUT) == []
    assert second.result(timeout=TIMEOUT) == []
    assert manager.get_tasks() == []


def test_rapid_adds_all_land_with_distinct_ids(manager):
    futures = [manager.add_task(f"task {i}") for i in range(20)]
    for future in futures:
        future.result(timeout=TIMEOUT)

    tasks = manager.get_tasks()
    assert [t.text for t in tasks] == [f"task {i}" for i in range(20)]
    assert len({t.id for t in tasks}) == 20


def test_on_change_called_after_cache_update(store):
    seen = []
    done = threading.Event()

    def on_change():
        seen.append([t.text for t in manager.get_tasks()])
        done.set()

    manager = TodoManager(store, on_change=on_change)
    try:
        manager.add_task("Buy milk").result(timeout=TIMEOUT)
        assert done.wait(TIMEOUT)
        assert seen[-1] == ["Buy milk"], "Callback must see the refreshed list"
    finally:
        manager.close()


def test_on_change_errors_do_not_break_jobs(store):
    def broken():
        raise RuntimeError("render failed")

    manager = TodoManager(store, on_change=broken)
    try:
        tasks = manager.add_task("still saved").result(timeout=TIMEOUT)
        assert [t.text for t in tasks] == ["still saved"]
    finally:
        manager.close()


def test_storage_failure_is_surfaced(fake_store):
    notified = threading.Event()
    manager = TodoManager(fake_store, on_change=notified.set)
    try:
        manager.add_task("before").result(timeout=TIMEOUT)
        notified.clear()

        fake_store.fail = True
        result = manager.add_task("during outage").result(timeout=TIMEOUT)

        assert result is None
        assert manager.error and "disk I/O error" in manager.error
        assert notified.is_set()
        assert [t.text for t in manager.get_tasks()] == ["before"], "Cache keeps the last good read"

        fake_store.fail = False
        manager.refresh().result(timeout=TIMEOUT)
        assert manager.error is None
    finally:
        manager.close()


def test_closed_manager_rejects_work(store):
    manager = TodoManager(store)
    manager.close()

    with pytest.raises(RuntimeError):
        manager.add_task("too late")
    with pytest.raises(RuntimeError):
        manager.refresh()
