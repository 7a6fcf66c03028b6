from __future__ import annotations

import asyncio
import logging
import os

import discord
from discord.ext import commands

from presencekit.cogs.presence_config import add_presence_cog
from presencekit.config import compat_conf
from presencekit.config.env_loader import load_env
from presencekit.presence.resolver import ConfigResolver
from presencekit.presence.sinks import DiscordPresenceSink, status_from_str

log = logging.getLogger("presencekit.main")


def build_bot() -> commands.Bot:
    intents = discord.Intents.default()
    prefix = compat_conf.get("COMMAND_PREFIX", "!", cast=str)
    return commands.Bot(command_prefix=prefix, intents=intents)


def build_resolver(bot: commands.Bot) -> ConfigResolver:
    sink = DiscordPresenceSink(
        bot,
        activity_name=compat_conf.get("PRESENCE_ACTIVITY_NAME", "Presence", cast=str),
        activity_type=compat_conf.get("PRESENCE_ACTIVITY_TYPE", "playing", cast=str),
        status=status_from_str(compat_conf.get("PRESENCE_STATUS", "online", cast=str)),
    )
    resolver = ConfigResolver(compat_conf.load_presence_file(), sink=sink)
    resolver.on("ready", lambda: log.info("✅ Presence sink ready as %s", bot.user))
    return resolver


async def start_bot():
    token = compat_conf.get("DISCORD_TOKEN") or compat_conf.get("BOT_TOKEN")
    if not token:
        raise RuntimeError("ENV DISCORD_TOKEN / BOT_TOKEN is not set")
    bot = build_bot()
    resolver = build_resolver(bot)
    await add_presence_cog(
        bot,
        resolver,
        auto_sync=compat_conf.get("PRESENCE_SYNC_COMMANDS", True, cast=bool),
    )
    async with bot:
        await resolver.init(token)


def main():
    env_file = load_env()
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    log.info("🤖 Starting presence bot (env file: %s)", env_file or "-")
    asyncio.run(start_bot())


if __name__ == "__main__":
    main()
