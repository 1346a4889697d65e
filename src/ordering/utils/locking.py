"""Process-local keyed locks for serialising work on one aggregate instance.

Inbound events for the same order must not interleave their load-modify-save
cycles. Each (kind, id) pair gets its own lock, so unrelated orders are
processed concurrently.
"""

import functools
import threading
from contextlib import contextmanager

_registry_lock = threading.Lock()
_locks: dict[tuple[str, str], threading.RLock] = {}


def _lock_for(kind: str, key: str) -> threading.RLock:
    with _registry_lock:
        lock = _locks.get((kind, key))
        if lock is None:
            lock = threading.RLock()
            _locks[(kind, key)] = lock
        return lock


@contextmanager
def aggregate_lock(kind: str, key):
    """Hold the lock for aggregate ``kind`` with identity ``key``."""
    lock = _lock_for(kind, str(key))
    with lock:
        yield


def serialized(kind: str, attribute: str):
    """Run a handler method under the ``kind`` lock keyed by ``message.<attribute>``.

    Place it above ``@handle``: the handle wrapper opens the unit of work, so
    the lock then spans load, save, commit and the events dispatched after
    the commit.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(instance, message):
            with aggregate_lock(kind, getattr(message, attribute)):
                return fn(instance, message)

        return wrapper

    return decorator


def reset_locks() -> None:
    with _registry_lock:
        _locks.clear()
