"""Content reference parsing.

Turns a caller-supplied YouTube URL (or a bare video ID) into the
11-character video ID used by the Data API.
"""

import re
from dataclasses import dataclass
from enum import Enum


class VideoRefType(str, Enum):
    """Shapes of content references we recognise."""

    WATCH = "watch"  # youtube.com/watch?v=ID (also m. and music.)
    SHORT_LINK = "short_link"  # youtu.be/ID
    PATH = "path"  # youtube.com/{embed,v,e,shorts,live}/ID
    VIDEO_ID = "video_id"  # Just an ID


@dataclass(frozen=True)
class ParsedVideoRef:
    """Parsed content reference."""

    ref_type: VideoRefType
    video_id: str
    original: str = ""


class InvalidVideoRefError(ValueError):
    """Raised when a content reference has no recognisable video ID."""


_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"
_HOST = r"(?:^|[/.])(?:youtube\.com|youtube-nocookie\.com)"

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
WATCH_PATTERN = re.compile(_HOST + r"/(?:watch|attribution_link)?.*?[?&]v=" + _ID)
SHORT_LINK_PATTERN = re.compile(r"(?:^|[/.])youtu\.be/" + _ID)
PATH_PATTERN = re.compile(
    _HOST + r"/(?:embed|v|e|shorts|live)/" + _ID,
)
# youtube.com/user/name/ID style links
LEGACY_PATH_PATTERN = re.compile(_HOST + r"/[^/?#]+/.+/" + _ID)


def parse_video_ref(content_ref: str) -> ParsedVideoRef:
    """Extract the video ID from a content reference.

    Args:
        content_ref: A YouTube URL in any of the common shapes, or a bare ID.

    Returns:
        ParsedVideoRef with the extracted ID.

    Raises:
        InvalidVideoRefError: If no video ID can be extracted.
    """
    ref = content_ref.strip()

    if VIDEO_ID_PATTERN.match(ref):
        return ParsedVideoRef(VideoRefType.VIDEO_ID, ref, content_ref)

    for ref_type, pattern in (
        (VideoRefType.WATCH, WATCH_PATTERN),
        (VideoRefType.SHORT_LINK, SHORT_LINK_PATTERN),
        (VideoRefType.PATH, PATH_PATTERN),
        (VideoRefType.PATH, LEGACY_PATH_PATTERN),
    ):
        match = pattern.search(ref)
        if match:
            return ParsedVideoRef(ref_type, match.group(1), content_ref)

    raise InvalidVideoRefError(f"Cannot extract a YouTube video ID from: {ref!r}")
