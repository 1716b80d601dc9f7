import threading

from domains.icon_export.jobs.registry import DebounceRegistry, JobHandle


def test_register_returns_displaced_handle():
    registry = DebounceRegistry()
    first = JobHandle("/tmp/a.svg")
    second = JobHandle("/tmp/a.svg")

    assert registry.register_or_replace(first.path, first) is None
    assert registry.register_or_replace(second.path, second) is first
    assert registry.get(first.path) is second
    assert len(registry) == 1


def test_remove_is_noop_for_absent_or_newer_entry():
    registry = DebounceRegistry()
    old = JobHandle("/tmp/a.svg")
    new = JobHandle("/tmp/a.svg")

    assert registry.remove("/tmp/missing.svg") is False

    registry.register_or_replace(old.path, old)
    registry.register_or_replace(new.path, new)

    # A superseded job finishing must not evict its successor.
    assert registry.remove(old.path, old) is False
    assert "/tmp/a.svg" in registry

    assert registry.remove(new.path, new) is True
    assert len(registry) == 0


def test_concurrent_replacements_hand_each_old_handle_out_once():
    registry = DebounceRegistry()
    path = "/tmp/busy.svg"
    handles = [JobHandle(path) for _ in range(200)]
    displaced = []
    lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker(chunk):
        barrier.wait()
        for handle in chunk:
            previous = registry.register_or_replace(path, handle)
            if previous is not None:
                with lock:
                    displaced.append(previous)

    threads = [threading.Thread(target=worker, args=(handles[i::8],)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    active = registry.get(path)
    assert len(displaced) == len(handles) - 1
    assert len({id(h) for h in displaced}) == len(displaced)
    assert active not in displaced
    assert len(registry) == 1


def test_handle_wait_observes_cancel():
    handle = JobHandle("/tmp/a.svg")
    assert handle.wait(0.01) is False
    assert not handle.cancelled

    handle.cancel()
    assert handle.wait(5) is True
    assert handle.cancelled


def test_pop_all_empties_registry():
    registry = DebounceRegistry()
    for name in ("a", "b", "c"):
        registry.register_or_replace(name, JobHandle(name))

    handles = registry.pop_all()

    assert sorted(h.path for h in handles) == ["a", "b", "c"]
    assert len(registry) == 0
    assert registry.snapshot() == {}
