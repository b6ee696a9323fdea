import threading
from contextlib import contextmanager
from typing import Dict

_registry_lock = threading.Lock()
_tournament_locks: Dict[int, threading.Lock] = {}


def get_tournament_lock(tournament_id: int) -> threading.Lock:
    with _registry_lock:
        lock = _tournament_locks.get(tournament_id)
        if lock is None:
            lock = threading.Lock()
            _tournament_locks[tournament_id] = lock
        return lock


@contextmanager
def tournament_lock(tournament_id: int):
    """Serialize round creation, close and reset for one tournament within this process."""
    lock = get_tournament_lock(tournament_id)
    with lock:
        yield


def release_tournament_lock(tournament_id: int) -> None:
    """Forget the lock of a tournament that no longer exists."""
    with _registry_lock:
        _tournament_locks.pop(tournament_id, None)
