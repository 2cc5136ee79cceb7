"""Tests for content reference parsing."""

import pytest

from sweeper.moderation.video_ref import (
    InvalidVideoRefError,
    VideoRefType,
    parse_video_ref,
)


VIDEO_ID = "dQw4w9WgXcQ"


class TestParseVideoRef:
    """Known YouTube URL shapes resolve to the 11-character video ID."""

    @pytest.mark.parametrize(
        ("url", "ref_type"),
        [
            (f"https://www.youtube.com/watch?v={VIDEO_ID}", VideoRefType.WATCH),
            (f"https://youtube.com/watch?v={VIDEO_ID}&t=42s", VideoRefType.WATCH),
            (
                f"https://www.youtube.com/watch?feature=share&v={VIDEO_ID}",
                VideoRefType.WATCH,
            ),
            (f"https://m.youtube.com/watch?v={VIDEO_ID}", VideoRefType.WATCH),
            (f"https://youtu.be/{VIDEO_ID}", VideoRefType.SHORT_LINK),
            (f"https://youtu.be/{VIDEO_ID}?si=abc123", VideoRefType.SHORT_LINK),
            (f"https://www.youtube.com/embed/{VIDEO_ID}", VideoRefType.PATH),
            (f"https://www.youtube.com/v/{VIDEO_ID}", VideoRefType.PATH),
            (f"https://www.youtube.com/shorts/{VIDEO_ID}", VideoRefType.PATH),
            (f"https://www.youtube.com/live/{VIDEO_ID}?feature=x", VideoRefType.PATH),
            (f"youtube.com/watch?v={VIDEO_ID}", VideoRefType.WATCH),
            (VIDEO_ID, VideoRefType.VIDEO_ID),
            (f"  {VIDEO_ID}  ", VideoRefType.VIDEO_ID),
        ],
    )
    def test_known_shapes(self, url: str, ref_type: VideoRefType):
        parsed = parse_video_ref(url)
        assert parsed.video_id == VIDEO_ID
        assert parsed.ref_type == ref_type
        assert parsed.original == url

    @pytest.mark.parametrize(
        "ref",
        [
            "not a url",
            "",
            "https://example.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/watch?v=short",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQXYZ",
            "https://vimeo.com/123456789",
            "dQw4w9WgXc",
        ],
    )
    def test_invalid_references(self, ref: str):
        with pytest.raises(InvalidVideoRefError):
            parse_video_ref(ref)
