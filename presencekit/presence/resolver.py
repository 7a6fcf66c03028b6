from __future__ import annotations

import datetime
import inspect
import logging
import random
from typing import Any, Callable, Dict, Optional, Tuple

from .events import EventEmitter
from .schema import LIST_FIELDS, validate_config
from .sinks import PresenceSink

log = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def gen_random(value: Any, rng: Optional[random.Random] = None) -> Any:
    """Pick one item uniformly. A scalar counts as a one item sequence."""
    if not isinstance(value, (list, tuple)):
        value = [value]
    if not value:
        return None
    rng = rng or random
    return value[rng.randrange(len(value))]


def merge_config(stored: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ``update`` on top of ``stored``.

    An update replaces the whole set of recognized fields: keys it leaves out,
    and keys it sets to a falsy value, are removed from the result.
    """
    conf = dict(stored)
    for key, value in update.items():
        if conf.get(key) != value:
            conf[key] = value
    for key in list(conf):
        if not update.get(key):
            del conf[key]
    return conf


def resolve_config(
    config: Dict[str, Any],
    old_timestamp: Optional[datetime.datetime] = None,
    rng: Optional[random.Random] = None,
    clock: Clock = utcnow,
) -> Tuple[Dict[str, Any], Optional[datetime.datetime]]:
    """Turn a validated config into the payload sent to the sink.

    Returns the payload and the start time to remember for the next call.
    """
    payload: Dict[str, Any] = {}
    stamp = config.get("timestamp")
    if stamp == "now":
        old_timestamp = clock()
    elif stamp is True:
        if old_timestamp is None:
            old_timestamp = clock()
    else:
        old_timestamp = None

    for key, value in config.items():
        if key in LIST_FIELDS:
            picked = gen_random(value, rng)
            if picked is not None:
                payload[key] = picked
        elif key == "timestamp":
            if old_timestamp is not None:
                payload["startTimestamp"] = old_timestamp
        else:
            payload[key] = value
    return payload, old_timestamp


class ConfigResolver(EventEmitter):
    """Keeps the presence config for one sink and pushes resolved payloads to it.

    ``config`` is the last validated raw config, ``actual`` the last payload
    handed to the sink and ``old_timestamp`` the start time reused while
    ``timestamp`` stays ``True``.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        sink: PresenceSink,
        rng: Optional[random.Random] = None,
        clock: Clock = utcnow,
    ) -> None:
        super().__init__()
        self.sink = sink
        self.config: Dict[str, Any] = dict(config or {})
        self.actual: Dict[str, Any] = {}
        self.old_timestamp: Optional[datetime.datetime] = None
        self.client_id: Optional[str] = None
        self.rng = rng or random.Random()
        self.clock = clock

    def verify_conf(self, new_conf: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if new_conf is None:
            self.config = validate_config(self.config)
            return self.config
        return validate_config(new_conf)

    def get_conf(self, config: Dict[str, Any]) -> Dict[str, Any]:
        self.actual, self.old_timestamp = resolve_config(
            config, self.old_timestamp, rng=self.rng, clock=self.clock
        )
        return self.actual

    def set_presence(self, new_conf: Optional[Dict[str, Any]] = None) -> Any:
        self.verify_conf()
        if new_conf is not None:
            self.config = merge_config(self.config, self.verify_conf(new_conf))
        payload = self.get_conf(self.config)
        log.info("[presence] set activity: %s", ", ".join(sorted(payload)) or "<empty>")
        return self.sink.set_activity(payload)

    def init(self, client_id: str) -> Any:
        self.client_id = client_id
        self.sink.once("ready", self._on_ready)
        return self.sink.login(client_id)

    async def _on_ready(self) -> Any:
        await self.emit_async("ready")
        res = self.set_presence()
        if inspect.isawaitable(res):
            res = await res
        return res
