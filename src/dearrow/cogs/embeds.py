from __future__ import annotations

import logging

import discord
from discord.ext import commands

from ..services.replacer import EmbedReplacer

log = logging.getLogger("dearrow.cog.embedreplacementcog")


class EmbedReplacementCog(commands.Cog):
    """Feeds new and edited guild messages into the embed replacer."""

    def __init__(self, bot: commands.Bot, replacer: EmbedReplacer | None = None) -> None:
        self.bot = bot
        self.replacer = replacer if replacer is not None else bot.replacer  # type: ignore[attr-defined]

    async def cog_load(self) -> None:
        log.info("Loaded %s (scan=%s)", self.__class__.__name__, self.replacer.scan.value)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.guild is None:
            return
        await self.replacer.handle(message)

    @commands.Cog.listener()
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        # Discord attaches link previews with a MESSAGE_UPDATE shortly after creation
        if after.guild is None:
            return
        await self.replacer.handle(after)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(EmbedReplacementCog(bot))
