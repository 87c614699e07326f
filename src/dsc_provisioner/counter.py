"""
Process-wide counters shared by every provisioner configuration.
"""
import threading

_counters: dict[str, int] = {}
_lock = threading.Lock()


def get_and_update_counter(name: str = "default") -> int:
    """
    Increment the named counter and return its new value.

    The first call for a given name returns 1.
    """
    with _lock:
        value = _counters.get(name, 0) + 1
        _counters[name] = value
        return value


def reset_counters() -> None:
    """Forget all counter values. Only meant for tests."""
    with _lock:
        _counters.clear()
