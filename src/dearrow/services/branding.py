from __future__ import annotations

import asyncio
import math
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import aiohttp

from ..constants import BRANDING_API_URL, DEFAULT_REQUEST_TIMEOUT_SECONDS

log = logging.getLogger("dearrow.branding")


class BrandingError(Exception):
    """Base error for DeArrow branding lookups."""


class BrandingFetchError(BrandingError):
    """The branding request could not be completed."""


class BrandingDecodeError(BrandingError):
    """The branding response was not a usable JSON document."""


def _as_number(value: Any, name: str) -> float:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BrandingDecodeError(f"{name} must be a number, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise BrandingDecodeError(f"{name} must be finite, got {number}")
    return number


def _as_list(value: Any, name: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise BrandingDecodeError(f"{name} must be an array, got {type(value).__name__}")
    return value


def _as_object(value: Any, name: str) -> dict:
    if not isinstance(value, dict):
        raise BrandingDecodeError(f"{name} must be an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class TitleCandidate:
    title: str

    @classmethod
    def from_payload(cls, payload: Any) -> "TitleCandidate":
        data = _as_object(payload, "titles[]")
        title = data.get("title", "")
        if title is None:
            title = ""
        if not isinstance(title, str):
            raise BrandingDecodeError(f"titles[].title must be a string, got {type(title).__name__}")
        return cls(title=title)


@dataclass(frozen=True)
class ThumbnailCandidate:
    timestamp: Optional[float]
    original: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "ThumbnailCandidate":
        data = _as_object(payload, "thumbnails[]")
        raw_timestamp = data.get("timestamp")
        timestamp = None if raw_timestamp is None else _as_number(raw_timestamp, "thumbnails[].timestamp")
        original = data.get("original", False)
        if original is None:
            original = False
        if not isinstance(original, bool):
            raise BrandingDecodeError(f"thumbnails[].original must be a boolean, got {type(original).__name__}")
        return cls(timestamp=timestamp, original=original)


@dataclass(frozen=True)
class BrandingRecord:
    """Crowd-sourced titles and thumbnails for one video."""
    titles: tuple[TitleCandidate, ...] = field(default_factory=tuple)
    thumbnails: tuple[ThumbnailCandidate, ...] = field(default_factory=tuple)
    random_time: float = 0.0
    video_duration: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "BrandingRecord":
        """Decode the JSON body of ``/api/branding``; unknown keys are ignored."""
        data = _as_object(payload, "branding response")

        titles = tuple(TitleCandidate.from_payload(t) for t in _as_list(data.get("titles"), "titles"))
        thumbnails = tuple(
            ThumbnailCandidate.from_payload(t) for t in _as_list(data.get("thumbnails"), "thumbnails")
        )

        raw_random = data.get("randomTime")
        random_time = 0.0 if raw_random is None else _as_number(raw_random, "randomTime")

        raw_duration = data.get("videoDuration")
        video_duration = None if raw_duration is None else _as_number(raw_duration, "videoDuration")

        return cls(
            titles=titles,
            thumbnails=thumbnails,
            random_time=random_time,
            video_duration=video_duration,
        )


class BrandingClient:
    """Reads branding records from the DeArrow API over a shared aiohttp session."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_url: str = BRANDING_API_URL,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.session = session
        self.api_url = api_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch_branding(self, video_id: str) -> BrandingRecord:
        """GET the branding record for ``video_id``. No retries."""
        try:
            async with self.session.get(self.api_url, params={"videoID": video_id}, timeout=self.timeout) as resp:
                status = resp.status
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise BrandingDecodeError(
                        f"undecodable branding response ({status} {resp.url}): {e}"
                    ) from e
        except aiohttp.ClientError as e:
            raise BrandingFetchError(f"branding request failed ({self.api_url} videoID={video_id!r}): {e}") from e
        except asyncio.TimeoutError as e:
            raise BrandingFetchError(
                f"branding request timed out after {self.timeout.total}s ({self.api_url} videoID={video_id!r})"
            ) from e

        try:
            record = BrandingRecord.from_payload(payload)
        except BrandingDecodeError as e:
            raise BrandingDecodeError(f"invalid branding response ({status} videoID={video_id!r}): {e}") from e
        log.debug(
            "Branding for %s: titles=%d thumbnails=%d duration=%s",
            video_id,
            len(record.titles),
            len(record.thumbnails),
            record.video_duration,
        )
        return record
