from __future__ import annotations

import logging
from typing import Any

import aiohttp
import discord
from discord.ext import commands

from . import __version__
from .config import Settings
from .services.branding import BrandingClient
from .services.discord_gateway import DiscordGateway
from .services.replacer import EmbedReplacer
from .services.stats import RuntimeStats

log = logging.getLogger("dearrow.bot")


def build_intents() -> discord.Intents:
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    # Embeds on other users' messages are only delivered with message content intent.
    intents.message_content = True
    return intents


class DeArrowBot(commands.Bot):
    def __init__(self, settings: Settings) -> None:
        intents = build_intents()
        log.info("starting the bot...")
        log.info("dearrow %s, discord.py version: %s", __version__, discord.__version__)
        log.info(
            "INTENTS: guilds=%s guild_messages=%s message_content=%s",
            intents.guilds,
            intents.guild_messages,
            intents.message_content,
        )

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            # guild.me is always kept; no other member records are cached
            member_cache_flags=discord.MemberCacheFlags.none(),
            chunk_guilds_at_startup=False,
            allowed_mentions=discord.AllowedMentions.none(),
            activity=discord.Activity(type=discord.ActivityType.watching, name=settings.presence_text),
            help_command=None,
        )

        self.settings = settings
        self.stats = RuntimeStats()
        self.http_session: aiohttp.ClientSession | None = None
        self.replacer: EmbedReplacer | None = None

    async def setup_hook(self) -> None:
        self.http_session = aiohttp.ClientSession(
            headers={"User-Agent": f"dearrow-discord-bot/{__version__}"},
        )
        branding = BrandingClient(
            self.http_session,
            api_url=self.settings.branding_api_url,
            timeout_seconds=self.settings.request_timeout_seconds,
        )
        self.replacer = EmbedReplacer(
            DiscordGateway(self, self.settings.self_user_id),
            branding,
            thumbnail_api_url=self.settings.thumbnail_api_url,
            scan=self.settings.embed_scan,
            stats=self.stats,
        )

        loaded: list[str] = []
        failed: list[str] = []

        for extension in ("dearrow.cogs.embeds",):
            try:
                log.info("Loading extension: %s", extension)
                await self.load_extension(extension)
                loaded.append(extension)
            except commands.ExtensionError as e:
                log.exception("Failed to load extension: %s", extension)
                failed.append(f"{extension} ({type(e).__name__})")

        log.info("Startup extension load summary: loaded=%d failed=%d", len(loaded), len(failed))
        for name in failed:
            log.warning("Startup extension failed: %s", name)
        if failed:
            raise RuntimeError(f"required extensions failed to load: {', '.join(failed)}")

    async def on_ready(self) -> None:
        assert self.user is not None
        if self.settings.self_user_id and self.settings.self_user_id != self.user.id:
            log.warning(
                "DEARROW_USER_ID=%s does not match the logged in user %s (%s)",
                self.settings.self_user_id,
                self.user,
                self.user.id,
            )
        log.info("dearrow bot is now running as %s in %d guild(s).", self.user, len(self.guilds))

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        log.exception("Unhandled error in event %s", event_method)

    async def close(self) -> None:
        try:
            if self.http_session is not None and not self.http_session.closed:
                await self.http_session.close()
            log.info("Shutting down: %s", self.stats.summary())
        finally:
            await super().close()
