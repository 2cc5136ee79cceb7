"""Moderation domain records.

All records are request-scoped and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Comment:
    """A top-level comment annotated with its spam verdict."""

    comment_id: str
    text: str
    author_name: str
    author_profile_image_url: str | None
    like_count: int
    published_at: str
    is_spam: bool


def _snippet(item: dict[str, Any]) -> dict[str, Any]:
    snippet = item.get("snippet") or {}
    top_level = snippet.get("topLevelComment") or {}
    return top_level.get("snippet") or {}


def comment_text(item: dict[str, Any]) -> str:
    """Primary text of a raw comment thread item."""
    return _snippet(item).get("textDisplay") or ""


def comment_from_item(item: dict[str, Any], *, is_spam: bool) -> Comment:
    """Map a raw ``commentThreads`` item into a Comment."""
    snippet = _snippet(item)
    return Comment(
        comment_id=item.get("id", ""),
        text=snippet.get("textDisplay") or "",
        author_name=snippet.get("authorDisplayName") or "",
        author_profile_image_url=snippet.get("authorProfileImageUrl") or None,
        like_count=max(int(snippet.get("likeCount") or 0), 0),
        published_at=snippet.get("publishedAt") or "",
        is_spam=is_spam,
    )


@dataclass(frozen=True)
class ModerationResult:
    """Annotated comments of one video plus derived counts."""

    video_id: str
    comments: list[Comment]

    @property
    def total_comments(self) -> int:
        return len(self.comments)

    @property
    def spam_comments(self) -> int:
        return sum(1 for c in self.comments if c.is_spam)

    @property
    def summary(self) -> str:
        if self.spam_comments:
            return (
                f"Found {self.spam_comments} spam comments out of "
                f"{self.total_comments} total comments"
            )
        return f"No spam comments found in {self.total_comments} total comments"


class DeleteFailureReason(str, Enum):
    """Why a single comment deletion failed."""

    PERMISSION = "permission"  # remote reason "forbidden"
    AUTH = "auth"  # remote reason "authError"
    RATE_LIMITED = "rate_limited"  # remote reason "quotaExceeded"
    ERROR = "error"  # anything else


@dataclass(frozen=True)
class DeletionOutcome:
    """Result of deleting one requested comment ID."""

    comment_id: str
    success: bool
    reason: DeleteFailureReason | None = None
    message: str | None = None

    @classmethod
    def ok(cls, comment_id: str) -> "DeletionOutcome":
        return cls(comment_id=comment_id, success=True)

    @classmethod
    def failed(
        cls, comment_id: str, reason: DeleteFailureReason, message: str
    ) -> "DeletionOutcome":
        return cls(comment_id=comment_id, success=False, reason=reason, message=message)


@dataclass(frozen=True)
class DeletionReport:
    """Outcomes of a batch delete, one per requested ID, in request order."""

    outcomes: list[DeletionOutcome] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return len(self.outcomes)

    @property
    def successful_ids(self) -> list[str]:
        return [o.comment_id for o in self.outcomes if o.success]

    @property
    def failures(self) -> list[DeletionOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def succeeded(self) -> bool:
        """True when at least one deletion went through."""
        return any(o.success for o in self.outcomes)

    @property
    def all_failed(self) -> bool:
        return not self.succeeded and bool(self.outcomes)

    @property
    def primary_failure(self) -> DeletionOutcome | None:
        """First failure in request order."""
        failures = self.failures
        return failures[0] if failures else None

    @property
    def summary(self) -> str:
        deleted = len(self.successful_ids)
        failed = len(self.failures)
        if not failed:
            return f"Successfully deleted {deleted} spam comments"
        return f"Deleted {deleted} comments, {failed} failed"
