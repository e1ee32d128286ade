from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List


log = logging.getLogger(__name__)

LANGUAGE_CHANGED = "languageChanged"


@dataclass(frozen=True)
class LanguageChanged:
    language: str


Listener = Callable[[Any], Any]


class EventBus:
    """Page-wide notifications for regions that re-render on their own."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, name: str, callback: Listener) -> None:
        if callback not in self._listeners[name]:
            self._listeners[name].append(callback)

    def unsubscribe(self, name: str, callback: Listener) -> None:
        try:
            self._listeners[name].remove(callback)
        except ValueError:
            log.debug("Listener %r was not subscribed to %s", callback, name)

    async def emit(self, name: str, payload: Any) -> int:
        """Deliver ``payload`` to every listener; returns how many succeeded."""
        delivered = 0
        for callback in list(self._listeners.get(name, ())):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                log.exception("Listener %r failed for %s: %s", callback, name, e)
        return delivered
