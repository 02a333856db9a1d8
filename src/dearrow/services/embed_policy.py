"""
Replacement policy for YouTube link previews.

Everything in this module is pure: it reads embeds and branding records and
builds new embeds, but never talks to Discord or to DeArrow.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, TYPE_CHECKING
from urllib.parse import parse_qs, quote, urlparse

import discord

from ..constants import ORIGINAL_TITLE_PREFIX, VIDEO_ID_QUERY_PARAM, YOUTUBE_PROVIDER_NAME

if TYPE_CHECKING:
    from .branding import BrandingRecord


class EmbedScan(Enum):
    """How a message's embeds are searched for the YouTube preview."""
    # Only the first embed counts; anything else abandons the message.
    FIRST_ONLY = "first_only"
    # Walk all embeds and take the first YouTube one.
    FIRST_MATCH = "first_match"


def is_youtube_embed(embed: discord.Embed) -> bool:
    provider = getattr(embed, "provider", None)
    return provider is not None and getattr(provider, "name", None) == YOUTUBE_PROVIDER_NAME


def select_source_embed(
    embeds: Sequence[discord.Embed],
    scan: EmbedScan = EmbedScan.FIRST_ONLY,
) -> Optional[discord.Embed]:
    """Pick the embed to replace, or None when the message is not eligible."""
    if not embeds:
        return None
    if scan is EmbedScan.FIRST_ONLY:
        first = embeds[0]
        return first if is_youtube_embed(first) else None
    for embed in embeds:
        if is_youtube_embed(embed):
            return embed
    return None


def extract_video_id(url: Optional[str]) -> str:
    """Return the ``v`` query value of a watch URL, or an empty string."""
    if not url:
        return ""
    try:
        query = parse_qs(urlparse(url).query or "")
    except ValueError:
        return ""
    return (query.get(VIDEO_ID_QUERY_PARAM) or [""])[0]


def format_thumbnail_url(base_url: str, video_id: str, timestamp: float) -> str:
    return f"{base_url}?videoID={quote(video_id, safe='')}&time={timestamp:f}&generateNow=true"


def choose_thumbnail_url(
    record: BrandingRecord,
    video_id: str,
    original_url: Optional[str],
    thumbnail_api_url: str,
) -> Optional[str]:
    """
    Resolve the image for the replacement embed.

    A submitted non-original thumbnail wins. Otherwise a frame at
    ``random_time * video_duration`` is generated when the duration is known,
    and the platform's own thumbnail is kept as the last resort.
    """
    if record.thumbnails and not record.thumbnails[0].original:
        timestamp = record.thumbnails[0].timestamp
        return format_thumbnail_url(thumbnail_api_url, video_id, timestamp if timestamp is not None else 0.0)
    duration = record.video_duration
    if duration:
        return format_thumbnail_url(thumbnail_api_url, video_id, record.random_time * duration)
    return original_url


def build_replacement_embed(
    source: discord.Embed,
    record: BrandingRecord,
    video_id: str,
    thumbnail_api_url: str,
) -> discord.Embed:
    """Build the corrected preview for ``source`` from a branding record."""
    title = source.title
    footer: Optional[str] = None
    if record.titles:
        title = record.titles[0].title
        footer = ORIGINAL_TITLE_PREFIX + (source.title or "")

    embed = discord.Embed(title=title, url=source.url, color=source.color)

    author = source.author
    if getattr(author, "name", None):
        embed.set_author(name=author.name, url=author.url, icon_url=author.icon_url)

    if footer is not None:
        embed.set_footer(text=footer)

    image_url = choose_thumbnail_url(record, video_id, source.thumbnail.url, thumbnail_api_url)
    if image_url:
        embed.set_image(url=image_url)
    return embed
