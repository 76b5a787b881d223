"""
Minimal event model for the recorder.

A Page owns one parsed document and is the single EventTarget listeners
attach to (the equivalent of document-level capture listeners). Events carry
the element they happened on. Listeners may be plain functions or coroutine
functions; dispatch() awaits the latter in order.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from autofill.dom import parse_html

Listener = Callable[["Event"], Any]


@dataclass
class Event:
    type: str
    target: Any = None
    default_prevented: bool = False
    detail: Dict[str, Any] = field(default_factory=dict)

    def prevent_default(self):
        self.default_prevented = True


class EventTarget:
    def __init__(self):
        self._listeners: Dict[str, List[Tuple[Listener, bool]]] = {}

    def add_event_listener(self, event_type: str, listener: Listener, capture: bool = False) -> None:
        entries = self._listeners.setdefault(event_type, [])
        if (listener, capture) not in entries:
            entries.append((listener, capture))

    def remove_event_listener(self, event_type: str, listener: Listener, capture: bool = False) -> None:
        entries = self._listeners.get(event_type, [])
        if (listener, capture) in entries:
            entries.remove((listener, capture))

    def listener_count(self, event_type: str = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(v) for v in self._listeners.values())

    async def dispatch(self, event: Event) -> Event:
        entries = list(self._listeners.get(event.type, []))
        # capture-phase listeners run before bubble-phase ones
        ordered = [l for l, capture in entries if capture] + [l for l, capture in entries if not capture]
        for listener in ordered:
            result = listener(event)
            if inspect.isawaitable(result):
                await result
        return event


class Page(EventTarget):
    def __init__(self, document, url: str = ""):
        super().__init__()
        self.document = document
        self.url = url

    @classmethod
    def from_html(cls, html: str, url: str = "") -> "Page":
        return cls(parse_html(html), url)
