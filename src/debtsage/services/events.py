"""In-process notifications raised after user-facing actions."""

from __future__ import annotations

from threading import Lock
from typing import Callable, Dict, List

from ..logging_config import get_logger

__all__ = [
    "SIMULATION_COMPLETED",
    "subscribe",
    "unsubscribe",
    "emit",
    "clear_subscribers",
]

logger = get_logger(__name__)

# Fired once per successful payoff simulation; consumed by onboarding progress.
SIMULATION_COMPLETED = "debt-simulator-run"

Listener = Callable[[], None]

_SUBSCRIBERS: Dict[str, List[Listener]] = {}
_LOCK = Lock()


def subscribe(event: str, callback: Listener) -> None:
    """Register ``callback`` to run whenever ``event`` is emitted."""

    with _LOCK:
        listeners = _SUBSCRIBERS.setdefault(event, [])
        if callback not in listeners:
            listeners.append(callback)


def unsubscribe(event: str, callback: Listener) -> None:
    with _LOCK:
        listeners = _SUBSCRIBERS.get(event, [])
        if callback in listeners:
            listeners.remove(callback)


def clear_subscribers() -> None:
    """Remove all listeners (useful for tests)."""

    with _LOCK:
        _SUBSCRIBERS.clear()


def emit(event: str) -> int:
    """Notify listeners of ``event`` and return how many ran successfully.

    A failing listener is logged and skipped so it cannot undo the action
    that triggered the notification.
    """

    with _LOCK:
        listeners = list(_SUBSCRIBERS.get(event, ()))

    delivered = 0
    for callback in listeners:
        try:
            callback()
        except Exception:
            logger.exception("Listener for %s failed", event)
        else:
            delivered += 1
    return delivered
