from __future__ import annotations

import inspect
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from presencekit.config.compat_conf import load_presence_file
from presencekit.presence.resolver import ConfigResolver

log = logging.getLogger(__name__)


def _can_manage(itx: discord.Interaction) -> bool:
    # DMs hand us a User, which has no guild_permissions
    perms = getattr(itx.user, "guild_permissions", None)
    return perms is not None and bool(perms.manage_guild)


class PresenceConfigCog(commands.Cog):
    def __init__(
        self,
        bot: commands.Bot,
        resolver: ConfigResolver,
        path: Optional[str] = None,
        auto_sync: bool = True,
    ):
        self.bot = bot
        self.resolver = resolver
        self.path = path
        self.auto_sync = auto_sync
        self._synced = False

    async def _push(self, res):
        if inspect.isawaitable(res):
            res = await res
        return res

    async def apply_from_file(self):
        conf = load_presence_file(self.path)
        log.info("[presence] reload from file: %d field(s)", len(conf))
        return await self._push(self.resolver.set_presence(conf))

    async def shuffle(self):
        return await self._push(self.resolver.set_presence())

    async def sync_commands(self) -> bool:
        if self._synced:
            return False
        self._synced = True
        try:
            await self.bot.tree.sync()
            log.info("[presence] app commands synced")
        except discord.HTTPException as e:
            self._synced = False
            log.warning("[presence] app command sync failed: %r", e)
        return self._synced

    @commands.Cog.listener()
    async def on_ready(self):
        if not self.auto_sync:
            return
        await self.sync_commands()

    grp = app_commands.Group(
        name="presence",
        description="Presence config",
        guild_only=True,
        default_permissions=discord.Permissions(manage_guild=True),
    )

    @grp.command(name="reload")
    async def reload_cmd(self, itx: discord.Interaction):
        if not _can_manage(itx):
            return await itx.response.send_message("Needs Manage Server permission.", ephemeral=True)
        await self.apply_from_file()
        await itx.response.send_message("Presence reloaded ✅", ephemeral=True)

    @grp.command(name="shuffle")
    async def shuffle_cmd(self, itx: discord.Interaction):
        if not _can_manage(itx):
            return await itx.response.send_message("Needs Manage Server permission.", ephemeral=True)
        await self.shuffle()
        await itx.response.send_message("Presence shuffled ✅", ephemeral=True)


async def add_presence_cog(
    bot: commands.Bot,
    resolver: ConfigResolver,
    path: Optional[str] = None,
    auto_sync: bool = True,
):
    if bot.get_cog("PresenceConfigCog") is None:
        await bot.add_cog(PresenceConfigCog(bot, resolver, path, auto_sync))
