"""
Interface contracts for the DeArrow bot.

The replacement pipeline only talks to Discord and to DeArrow through these
protocols, so tests can substitute small fakes for the live client.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable, TYPE_CHECKING

import discord

if TYPE_CHECKING:
    from .services.branding import BrandingRecord


@runtime_checkable
class PlatformGateway(Protocol):
    """Read access to the member cache plus the two outbound actions."""

    @abstractmethod
    def self_member(self, guild_id: int) -> Optional[discord.Member]:
        """Return the bot's own cached member in ``guild_id``."""
        ...

    @abstractmethod
    def permissions_in(self, member: discord.Member, channel_id: int) -> Optional[discord.Permissions]:
        """Effective permissions of ``member`` in ``channel_id``, or None if the channel is unknown."""
        ...

    @abstractmethod
    async def post_reply(self, message: discord.Message, embed: discord.Embed) -> None:
        """Reply to ``message`` with ``embed`` and no mentions. Raises discord.HTTPException."""
        ...

    @abstractmethod
    async def suppress_embeds(self, message: discord.Message) -> None:
        """Set the suppress-embeds flag on ``message``. Raises discord.HTTPException."""
        ...


@runtime_checkable
class BrandingSource(Protocol):
    """Source of DeArrow branding records."""

    @abstractmethod
    async def fetch_branding(self, video_id: str) -> BrandingRecord:
        """Fetch the record for ``video_id``. Raises BrandingError."""
        ...
