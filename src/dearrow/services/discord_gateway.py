from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

log = logging.getLogger("dearrow.discord_gateway")


class DiscordGateway:
    """PlatformGateway backed by a connected discord.py client."""

    def __init__(self, bot: commands.Bot, self_user_id: int = 0) -> None:
        self.bot = bot
        self.self_user_id = self_user_id

    def self_member(self, guild_id: int) -> Optional[discord.Member]:
        guild = self.bot.get_guild(guild_id)
        if guild is None:
            return None
        if self.self_user_id:
            member = guild.get_member(self.self_user_id)
            if member is not None:
                return member
        return guild.me

    def permissions_in(self, member: discord.Member, channel_id: int) -> Optional[discord.Permissions]:
        channel = member.guild.get_channel_or_thread(channel_id)
        if channel is None:
            log.debug("Channel %s not cached in guild %s", channel_id, member.guild.id)
            return None
        return channel.permissions_for(member)

    async def post_reply(self, message: discord.Message, embed: discord.Embed) -> None:
        await message.reply(
            embed=embed,
            mention_author=False,
            allowed_mentions=discord.AllowedMentions.none(),
        )

    async def suppress_embeds(self, message: discord.Message) -> None:
        await message.edit(suppress=True)
