from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional

import aiohttp
import discord

from ..constants import THUMBNAIL_API_URL
from ..interfaces import BrandingSource, PlatformGateway
from .branding import BrandingDecodeError, BrandingError
from .embed_policy import EmbedScan, build_replacement_embed, extract_video_id, select_source_embed
from .stats import RuntimeStats

log = logging.getLogger("dearrow.replacer")

# discord.py re-raises connection failures from its HTTP client unchanged
OUTBOUND_ERRORS = (discord.HTTPException, aiohttp.ClientError, OSError, asyncio.TimeoutError)


class ReplacementOutcome(Enum):
    """Terminal state of one message event."""
    SKIPPED_NO_GUILD = "skipped_no_guild"
    SKIPPED_NO_PERMISSION = "skipped_no_permission"
    SKIPPED_NO_EMBEDS = "skipped_no_embeds"
    SKIPPED_NO_SOURCE = "skipped_no_source"
    FETCH_FAILED = "fetch_failed"
    POST_FAILED = "post_failed"
    SUPPRESS_FAILED = "suppress_failed"
    REPLACED = "replaced"


class EmbedReplacer:
    """
    Replaces a message's YouTube preview with a DeArrow-branded one.

    Each call to :meth:`handle` runs the whole pipeline once: permission and
    eligibility gate, branding fetch, embed synthesis, reply, then embed
    suppression on the original. The reply and the suppression are
    independent steps; a posted reply is never rolled back.
    """

    def __init__(
        self,
        gateway: PlatformGateway,
        branding: BrandingSource,
        *,
        thumbnail_api_url: str = THUMBNAIL_API_URL,
        scan: EmbedScan = EmbedScan.FIRST_ONLY,
        stats: Optional[RuntimeStats] = None,
    ) -> None:
        self.gateway = gateway
        self.branding = branding
        self.thumbnail_api_url = thumbnail_api_url
        self.scan = scan
        self.stats = stats or RuntimeStats()

    def can_send(self, guild_id: int, channel_id: int) -> bool:
        member = self.gateway.self_member(guild_id)
        if member is None:
            return False
        permissions = self.gateway.permissions_in(member, channel_id)
        return permissions is not None and bool(permissions.send_messages)

    async def handle(self, message: discord.Message) -> ReplacementOutcome:
        self.stats.events_seen += 1

        guild = getattr(message, "guild", None)
        if guild is None:
            return ReplacementOutcome.SKIPPED_NO_GUILD
        channel_id = message.channel.id

        if not self.can_send(guild.id, channel_id):
            log.debug("No send_messages in guild=%s channel=%s; skipping", guild.id, channel_id)
            return ReplacementOutcome.SKIPPED_NO_PERMISSION

        if not message.embeds:
            return ReplacementOutcome.SKIPPED_NO_EMBEDS

        source = select_source_embed(message.embeds, self.scan)
        if source is None:
            return ReplacementOutcome.SKIPPED_NO_SOURCE

        video_id = extract_video_id(source.url)
        try:
            record = await self.branding.fetch_branding(video_id)
        except BrandingDecodeError as e:
            self.stats.fetch_failures += 1
            log.error("There was an error while decoding a branding response: %s", e)
            return ReplacementOutcome.FETCH_FAILED
        except BrandingError as e:
            self.stats.fetch_failures += 1
            log.error("There was an error while running a branding request: %s", e)
            return ReplacementOutcome.FETCH_FAILED

        embed = build_replacement_embed(source, record, video_id, self.thumbnail_api_url)

        outcome = ReplacementOutcome.REPLACED
        try:
            await self.gateway.post_reply(message, embed)
            self.stats.replacements_posted += 1
        except OUTBOUND_ERRORS as e:
            self.stats.post_failures += 1
            outcome = ReplacementOutcome.POST_FAILED
            log.error("There was an error while creating a message in channel=%s: %s", channel_id, e)

        try:
            await self.gateway.suppress_embeds(message)
            self.stats.embeds_suppressed += 1
        except OUTBOUND_ERRORS as e:
            self.stats.suppress_failures += 1
            log.error("There was an error while suppressing embeds on message=%s: %s", message.id, e)
            if outcome is ReplacementOutcome.REPLACED:
                outcome = ReplacementOutcome.SUPPRESS_FAILED
            return outcome

        if outcome is ReplacementOutcome.REPLACED:
            log.info("Replaced YouTube embed for video=%s on message=%s", video_id, message.id)
        return outcome
