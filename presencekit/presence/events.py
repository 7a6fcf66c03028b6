from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Tuple

log = logging.getLogger(__name__)


class EventEmitter:
    """Tiny synchronous listener registry.

    Listeners run in registration order on the caller's stack; whatever they
    raise reaches the code that called ``emit``.
    """

    def __init__(self) -> None:
        # event name -> [(listener, once)]
        self._listeners: Dict[str, List[Tuple[Callable, bool]]] = {}

    def on(self, event: str, listener: Callable) -> Callable:
        self._listeners.setdefault(event, []).append((listener, False))
        return listener

    def once(self, event: str, listener: Callable) -> Callable:
        self._listeners.setdefault(event, []).append((listener, True))
        return listener

    def off(self, event: str, listener: Callable) -> None:
        pipeline = self._listeners.get(event)
        if not pipeline:
            return
        self._listeners[event] = [(fn, once) for fn, once in pipeline if fn != listener]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def _dispatch(self, event: str, args: tuple) -> List[Any]:
        live = self._listeners.get(event, [])
        pipeline = list(live)
        if pipeline:
            log.debug("Dispatching '%s' to %d listener(s)", event, len(pipeline))
        results = []
        for entry in pipeline:
            fn, once = entry
            if once and entry in live:
                # only this registration; an on() of the same fn stays
                live.remove(entry)
            results.append(fn(*args))
        return results

    def emit(self, event: str, *args: Any) -> bool:
        """Run listeners synchronously. Coroutines returned by async listeners are not awaited."""
        return bool(self._dispatch(event, args))

    async def emit_async(self, event: str, *args: Any) -> bool:
        """Like ``emit`` but awaits whatever the listeners return when it is awaitable."""
        results = self._dispatch(event, args)
        for res in results:
            if inspect.isawaitable(res):
                await res
        return bool(results)
