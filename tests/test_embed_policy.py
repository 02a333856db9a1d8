from __future__ import annotations

import unittest

import discord

from dearrow.constants import THUMBNAIL_API_URL
from dearrow.services.branding import BrandingRecord, ThumbnailCandidate, TitleCandidate
from dearrow.services.embed_policy import (
    EmbedScan,
    build_replacement_embed,
    extract_video_id,
    format_thumbnail_url,
    select_source_embed,
)

WATCH_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
ORIGINAL_THUMB = "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"


def youtube_embed(**overrides) -> discord.Embed:
    data = {
        "type": "video",
        "url": WATCH_URL,
        "title": "Original Title",
        "color": 0xFF0000,
        "provider": {"name": "YouTube", "url": "https://www.youtube.com"},
        "author": {"name": "Some Channel", "url": "https://www.youtube.com/@some", "icon_url": "https://yt3.example/icon.png"},
        "thumbnail": {"url": ORIGINAL_THUMB, "width": 1280, "height": 720},
    }
    data.update(overrides)
    return discord.Embed.from_dict(data)


def other_embed(provider: str = "Twitch") -> discord.Embed:
    return discord.Embed.from_dict({"type": "link", "url": "https://example.com", "provider": {"name": provider}})


class SelectSourceEmbedTests(unittest.TestCase):
    def test_no_embeds(self):
        self.assertIsNone(select_source_embed([], EmbedScan.FIRST_ONLY))
        self.assertIsNone(select_source_embed([], EmbedScan.FIRST_MATCH))

    def test_first_youtube_embed_is_selected(self):
        yt = youtube_embed()
        self.assertIs(select_source_embed([yt, other_embed()], EmbedScan.FIRST_ONLY), yt)

    def test_first_only_abandons_message_on_non_youtube_first_embed(self):
        self.assertIsNone(select_source_embed([other_embed(), youtube_embed()], EmbedScan.FIRST_ONLY))

    def test_first_match_keeps_scanning(self):
        yt = youtube_embed()
        self.assertIs(select_source_embed([other_embed(), yt], EmbedScan.FIRST_MATCH), yt)

    def test_provider_name_must_match_exactly(self):
        self.assertIsNone(select_source_embed([other_embed("youtube")], EmbedScan.FIRST_MATCH))
        self.assertIsNone(select_source_embed([discord.Embed(title="no provider")], EmbedScan.FIRST_MATCH))


class ExtractVideoIdTests(unittest.TestCase):
    def test_watch_url(self):
        self.assertEqual(extract_video_id(WATCH_URL), "dQw4w9WgXcQ")

    def test_extra_query_params(self):
        self.assertEqual(extract_video_id("https://www.youtube.com/watch?t=42&v=abc123&list=PL1"), "abc123")

    def test_missing_v_is_empty(self):
        self.assertEqual(extract_video_id("https://youtu.be/dQw4w9WgXcQ"), "")
        self.assertEqual(extract_video_id(None), "")
        self.assertEqual(extract_video_id(""), "")


class ThumbnailUrlTests(unittest.TestCase):
    def test_time_has_six_decimals(self):
        self.assertEqual(
            format_thumbnail_url("https://thumb.example/getThumbnail", "abc", 42),
            "https://thumb.example/getThumbnail?videoID=abc&time=42.000000&generateNow=true",
        )


class BuildReplacementEmbedTests(unittest.TestCase):
    def test_title_correction_keeps_original_thumbnail_without_duration(self):
        record = BrandingRecord(titles=(TitleCandidate("Better Title"),), video_duration=None)
        source = youtube_embed()

        out = build_replacement_embed(source, record, "dQw4w9WgXcQ", THUMBNAIL_API_URL)

        self.assertEqual(out.title, "Better Title")
        self.assertEqual(out.footer.text, "Original title: Original Title")
        self.assertEqual(out.image.url, ORIGINAL_THUMB)
        self.assertEqual(out.url, WATCH_URL)
        self.assertEqual(out.color, source.color)
        self.assertEqual(out.author.name, "Some Channel")
        self.assertEqual(out.author.url, "https://www.youtube.com/@some")
        self.assertEqual(out.author.icon_url, "https://yt3.example/icon.png")

    def test_no_title_correction_has_no_footer(self):
        out = build_replacement_embed(youtube_embed(), BrandingRecord(), "dQw4w9WgXcQ", THUMBNAIL_API_URL)

        self.assertEqual(out.title, "Original Title")
        self.assertIsNone(out.footer.text)

    def test_submitted_thumbnail_uses_its_timestamp(self):
        record = BrandingRecord(thumbnails=(ThumbnailCandidate(timestamp=42.0, original=False),))

        out = build_replacement_embed(youtube_embed(), record, "dQw4w9WgXcQ", THUMBNAIL_API_URL)

        self.assertEqual(
            out.image.url,
            f"{THUMBNAIL_API_URL}?videoID=dQw4w9WgXcQ&time=42.000000&generateNow=true",
        )

    def test_random_frame_when_no_thumbnail_and_duration_known(self):
        record = BrandingRecord(random_time=0.5, video_duration=600)

        out = build_replacement_embed(youtube_embed(), record, "dQw4w9WgXcQ", THUMBNAIL_API_URL)

        self.assertEqual(
            out.image.url,
            f"{THUMBNAIL_API_URL}?videoID=dQw4w9WgXcQ&time=300.000000&generateNow=true",
        )

    def test_original_thumbnail_candidate_falls_back_to_random_frame(self):
        record = BrandingRecord(
            thumbnails=(ThumbnailCandidate(timestamp=None, original=True),),
            random_time=0.25,
            video_duration=200.0,
        )

        out = build_replacement_embed(youtube_embed(), record, "vid", THUMBNAIL_API_URL)

        self.assertEqual(out.image.url, f"{THUMBNAIL_API_URL}?videoID=vid&time=50.000000&generateNow=true")

    def test_zero_duration_keeps_original_thumbnail(self):
        record = BrandingRecord(random_time=0.5, video_duration=0.0)

        out = build_replacement_embed(youtube_embed(), record, "vid", THUMBNAIL_API_URL)

        self.assertEqual(out.image.url, ORIGINAL_THUMB)

    def test_source_without_thumbnail_or_author(self):
        source = discord.Embed.from_dict({"url": WATCH_URL, "title": "T", "provider": {"name": "YouTube"}})

        out = build_replacement_embed(source, BrandingRecord(), "vid", THUMBNAIL_API_URL)

        self.assertIsNone(out.image.url)
        self.assertIsNone(out.author.name)


if __name__ == "__main__":
    unittest.main()
