from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Optional, Protocol

import discord
from discord.ext import commands

log = logging.getLogger(__name__)


class PresenceSink(Protocol):
    def login(self, identifier: str) -> Any: ...

    def once(self, event: str, handler: Callable) -> Any: ...

    def set_activity(self, payload: Dict[str, Any]) -> Any: ...


_ASSET_KEYS = {
    "largeImageKey": "large_image",
    "largeImageText": "large_text",
    "smallImageKey": "small_image",
    "smallImageText": "small_text",
}

_ACTIVITY_TYPES = {
    "playing": discord.ActivityType.playing,
    "watching": discord.ActivityType.watching,
    "listening": discord.ActivityType.listening,
    "competing": discord.ActivityType.competing,
}


_STATUSES = {
    "online": discord.Status.online,
    "idle": discord.Status.idle,
    "dnd": discord.Status.dnd,
    "invisible": discord.Status.invisible,
}


def status_from_str(s: Optional[str]) -> discord.Status:
    return _STATUSES.get((s or "online").lower(), discord.Status.online)


def _activity_type(s: Optional[str]) -> discord.ActivityType:
    return _ACTIVITY_TYPES.get((s or "playing").lower(), discord.ActivityType.playing)


def build_activity(
    payload: Dict[str, Any], name: str = "Presence", activity_type: Optional[str] = None
) -> Optional[discord.Activity]:
    """Map a resolved presence payload onto a ``discord.Activity``.

    An empty payload means "no activity".
    """
    if not payload:
        return None
    kwargs: Dict[str, Any] = {"name": name, "type": _activity_type(activity_type)}
    if payload.get("details"):
        kwargs["details"] = payload["details"]
    if payload.get("state"):
        kwargs["state"] = payload["state"]
    assets = {dst: payload[src] for src, dst in _ASSET_KEYS.items() if payload.get(src)}
    if assets:
        kwargs["assets"] = assets
    if "partySize" in payload and "partyMax" in payload:
        kwargs["party"] = {"size": [int(payload["partySize"]), int(payload["partyMax"])]}
    start = payload.get("startTimestamp")
    if start is not None:
        kwargs["timestamps"] = {"start": int(start.timestamp() * 1000)}
    return discord.Activity(**kwargs)


class DiscordPresenceSink:
    """PresenceSink backed by a discord.py bot connection."""

    def __init__(
        self,
        bot: commands.Bot,
        activity_name: str = "Presence",
        activity_type: Optional[str] = None,
        status: discord.Status = discord.Status.online,
    ):
        self.bot = bot
        self.activity_name = activity_name
        self.activity_type = activity_type
        self.status = status

    def login(self, identifier: str):
        return self.bot.start(identifier)

    def once(self, event: str, handler: Callable) -> None:
        listener_name = f"on_{event}"

        async def _fire(*args):
            self.bot.remove_listener(_fire, listener_name)
            res = handler(*args)
            if inspect.isawaitable(res):
                await res

        self.bot.add_listener(_fire, listener_name)

    def set_activity(self, payload: Dict[str, Any]):
        activity = build_activity(payload, self.activity_name, self.activity_type)
        log.debug("[presence] change_presence activity=%r", activity)
        return self.bot.change_presence(activity=activity, status=self.status)
