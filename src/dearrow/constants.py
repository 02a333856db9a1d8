from __future__ import annotations

from typing import Final

# DeArrow endpoints
BRANDING_API_URL: Final[str] = "https://sponsor.ajay.app/api/branding"
THUMBNAIL_API_URL: Final[str] = "https://dearrow-thumb.ajay.app/api/v1/getThumbnail"

# Embed matching
YOUTUBE_PROVIDER_NAME: Final[str] = "YouTube"
VIDEO_ID_QUERY_PARAM: Final[str] = "v"
ORIGINAL_TITLE_PREFIX: Final[str] = "Original title: "

# Bot configuration
DEFAULT_REQUEST_TIMEOUT_SECONDS: Final[float] = 10.0
DEFAULT_PRESENCE_TEXT: Final[str] = "YouTube embeds"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
