"""Comment moderation module.

Provides spam moderation of YouTube comment threads:
- Lexical spam classification (blacklist / whitelist / NFKD check)
- Fetch-and-classify of a video's comments
- Best-effort concurrent batch delete with per-comment outcomes

Note: Router is not exported here to avoid circular imports.
Import directly from sweeper.moderation.router when needed.
"""

from .classifier import classify
from .keywords import JsonKeywordSource, KeywordConfig, StaticKeywordSource
from .models import (
    Comment,
    DeleteFailureReason,
    DeletionOutcome,
    DeletionReport,
    ModerationResult,
)
from .service import ModerationService
from .youtube import YouTubeApiError, YouTubeClient


__all__ = [
    "Comment",
    "DeleteFailureReason",
    "DeletionOutcome",
    "DeletionReport",
    "JsonKeywordSource",
    "KeywordConfig",
    "ModerationResult",
    "ModerationService",
    "StaticKeywordSource",
    "YouTubeApiError",
    "YouTubeClient",
    "classify",
]
