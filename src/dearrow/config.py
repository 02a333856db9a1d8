from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import (
    BRANDING_API_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PRESENCE_TEXT,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    THUMBNAIL_API_URL,
)
from .services.embed_policy import EmbedScan


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, "").strip() or default


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _get_scan(name: str, default: EmbedScan) -> EmbedScan:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    try:
        return EmbedScan(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    token: str
    # Own user id; only the bot's own member record needs to stay cached.
    self_user_id: int = 0
    log_level: str = DEFAULT_LOG_LEVEL
    branding_api_url: str = BRANDING_API_URL
    thumbnail_api_url: str = THUMBNAIL_API_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    embed_scan: EmbedScan = EmbedScan.FIRST_ONLY
    presence_text: str = DEFAULT_PRESENCE_TEXT


def load_settings() -> Settings:
    token = os.getenv("DEARROW_BOT_TOKEN", "").strip()
    if not token:
        raise RuntimeError("DEARROW_BOT_TOKEN is required")
    return Settings(
        token=token,
        self_user_id=_get_int("DEARROW_USER_ID", 0),
        log_level=_get_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        branding_api_url=_get_str("DEARROW_BRANDING_API_URL", BRANDING_API_URL),
        thumbnail_api_url=_get_str("DEARROW_THUMBNAIL_API_URL", THUMBNAIL_API_URL),
        request_timeout_seconds=_get_float("DEARROW_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS),
        embed_scan=_get_scan("DEARROW_EMBED_SCAN", EmbedScan.FIRST_ONLY),
        presence_text=_get_str("DEARROW_PRESENCE_TEXT", DEFAULT_PRESENCE_TEXT),
    )
