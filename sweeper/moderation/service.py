"""Comment moderation service layer.

Business logic for:
- Fetching a video's comments and classifying each as spam
- Best-effort batch deletion with per-comment outcomes
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import structlog

from .classifier import classify
from .credentials import BearerCredential, CredentialStatus
from .keywords import KeywordConfig, KeywordSource
from .models import (
    DeleteFailureReason,
    DeletionOutcome,
    DeletionReport,
    ModerationResult,
    comment_from_item,
    comment_text,
)
from .video_ref import InvalidVideoRefError, parse_video_ref
from .youtube import (
    REASON_INVALID_RESPONSE,
    REASON_NETWORK,
    REASON_TIMEOUT,
    YouTubeApiError,
    YouTubeClient,
)


T = TypeVar("T")

# ==============================================================================
# Custom Exceptions
# ==============================================================================


class ModerationError(Exception):
    """Base moderation error."""

    def __init__(self, message: str, code: str = "moderation_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidInputError(ModerationError):
    """Caller supplied malformed input."""

    def __init__(self, message: str = "Invalid input", code: str = "invalid_input"):
        super().__init__(message, code)


class InvalidReferenceError(InvalidInputError):
    """Content reference has no recognisable video ID."""

    def __init__(self, message: str = "Invalid YouTube URL"):
        super().__init__(message, "invalid_reference")


class UnauthenticatedError(ModerationError):
    """Caller must (re-)establish identity."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthenticated"):
        super().__init__(message, code)


class MissingCredentialError(UnauthenticatedError):
    """Session carries no usable bearer credential."""

    def __init__(
        self,
        message: str = (
            "Missing access token. "
            "You need to sign in again to refresh your access token"
        ),
    ):
        super().__init__(message, "missing_credential")


class ModerationNotConfiguredError(ModerationError):
    """YouTube API key is not configured."""

    def __init__(self, message: str = "YouTube API key is not configured"):
        super().__init__(message, "not_configured")


class RemoteRateLimitedError(ModerationError):
    """YouTube quota exhausted; retry later."""

    def __init__(
        self,
        message: str = "YouTube API quota exceeded. Please try again tomorrow.",
    ):
        super().__init__(message, "rate_limited")


class RemotePermissionDeniedError(ModerationError):
    """User may not delete this comment."""

    def __init__(
        self, message: str = "You do not have permission to delete this comment"
    ):
        super().__init__(message, "permission_denied")


class RemoteAuthInvalidError(ModerationError):
    """YouTube rejected the bearer credential."""

    def __init__(self, message: str = "Authentication error. Please sign in again."):
        super().__init__(message, "auth_invalid")


class RemoteUnavailableError(ModerationError):
    """YouTube call failed; ``reason`` tells why."""

    COMMENTS_DISABLED = "comments_disabled"
    VIDEO_NOT_FOUND = "video_not_found"
    INVALID_RESPONSE = "invalid_response"
    UPSTREAM_ERROR = "upstream_error"
    TIMEOUT = "timeout"
    NETWORK = "network"

    def __init__(
        self,
        message: str = "Failed to fetch comments from YouTube",
        *,
        reason: str = UPSTREAM_ERROR,
        details: str | None = None,
        upstream_status: int | None = None,
    ):
        self.reason = reason
        self.details = details
        self.upstream_status = upstream_status
        super().__init__(message, "remote_unavailable")


class BatchDeleteFailedError(ModerationError):
    """Every requested deletion failed."""

    def __init__(self, report: DeletionReport):
        self.report = report
        primary = report.primary_failure
        message = (primary.message if primary else None) or "Failed to delete comments"
        super().__init__(message, "batch_delete_failed")


# ==============================================================================
# Remote error translation
# ==============================================================================

QUOTA_REASONS = frozenset({"quotaExceeded", "rateLimitExceeded", "dailyLimitExceeded"})


def read_error(error: YouTubeApiError) -> ModerationError:
    """Translate a failed comment-thread read."""
    if error.reason == "commentsDisabled":
        return RemoteUnavailableError(
            "Comments are disabled for this video",
            reason=RemoteUnavailableError.COMMENTS_DISABLED,
            upstream_status=error.status_code,
        )
    if error.reason in QUOTA_REASONS:
        return RemoteRateLimitedError()
    if error.reason == "videoNotFound":
        return RemoteUnavailableError(
            "Video not found",
            reason=RemoteUnavailableError.VIDEO_NOT_FOUND,
            upstream_status=error.status_code,
        )
    if error.reason == REASON_INVALID_RESPONSE:
        return RemoteUnavailableError(
            "Invalid response format from YouTube API",
            reason=RemoteUnavailableError.INVALID_RESPONSE,
            upstream_status=error.status_code,
        )
    if error.reason == REASON_TIMEOUT:
        reason = RemoteUnavailableError.TIMEOUT
    elif error.reason == REASON_NETWORK:
        reason = RemoteUnavailableError.NETWORK
    else:
        reason = RemoteUnavailableError.UPSTREAM_ERROR
    return RemoteUnavailableError(
        reason=reason,
        details=error.remote_message or error.message,
        upstream_status=error.status_code,
    )


def delete_error(error: YouTubeApiError) -> ModerationError:
    """Translate a failed single-comment delete."""
    if error.reason == "forbidden" or (error.reason is None and error.status_code == 403):
        return RemotePermissionDeniedError()
    if error.reason == "authError" or (error.reason is None and error.status_code == 401):
        return RemoteAuthInvalidError()
    if error.reason in QUOTA_REASONS:
        return RemoteRateLimitedError()
    if error.remote_message:
        return RemoteUnavailableError(
            error.remote_message, upstream_status=error.status_code
        )
    if error.status_code is not None:
        return RemoteUnavailableError(
            f"Failed to delete comment (status {error.status_code})",
            upstream_status=error.status_code,
        )
    return RemoteUnavailableError(error.message)


FAILURE_REASONS: dict[str, DeleteFailureReason] = {
    "permission_denied": DeleteFailureReason.PERMISSION,
    "auth_invalid": DeleteFailureReason.AUTH,
    "rate_limited": DeleteFailureReason.RATE_LIMITED,
}


# ==============================================================================
# Retry hook
# ==============================================================================

RetryPolicy = Callable[[Callable[[], Awaitable[Any]]], Awaitable[Any]]


async def run_once(call: Callable[[], Awaitable[T]]) -> T:
    """Default retry policy: a single attempt."""
    return await call()


# ==============================================================================
# Moderation Service
# ==============================================================================


class ModerationService:
    """Fetch-and-classify plus batch delete over the YouTube Data API."""

    DEFAULT_PAGE_SIZE = 100

    def __init__(
        self,
        client: YouTubeClient | None,
        keywords: KeywordSource,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        logger: Any = None,
        retry_policy: RetryPolicy = run_once,
    ):
        """Initialize the service.

        Args:
            client: YouTube client, or None when no API key is configured.
            keywords: Source of the blacklist/whitelist.
            page_size: Comment threads fetched per classification call.
            logger: Structured log sink for moderation events.
            retry_policy: Wraps every remote call.
        """
        self._client = client
        self._keywords = keywords
        self._page_size = page_size
        self._log = logger or structlog.get_logger(__name__)
        self._retry = retry_policy

    def keywords(self) -> KeywordConfig:
        """Current keyword configuration."""
        return self._keywords.load()

    def _require_client(self) -> YouTubeClient:
        if self._client is None:
            raise ModerationNotConfiguredError()
        return self._client

    async def fetch_and_classify(self, content_ref: str) -> ModerationResult:
        """Fetch a video's comments and flag the spam ones.

        Args:
            content_ref: YouTube URL or bare video ID.

        Returns:
            ModerationResult with every fetched comment annotated.

        Raises:
            InvalidReferenceError: No video ID in the reference (no remote call).
            ModerationNotConfiguredError: No API key.
            RemoteRateLimitedError: YouTube quota exhausted.
            RemoteUnavailableError: Any other failed read.
        """
        try:
            video_id = parse_video_ref(content_ref).video_id
        except InvalidVideoRefError as e:
            self._log.info("invalid_content_reference", content_ref=content_ref[:200])
            raise InvalidReferenceError() from e

        client = self._require_client()
        keywords = self._keywords.load()

        try:
            payload = await self._retry(
                lambda: client.list_comment_threads(
                    video_id, max_results=self._page_size
                )
            )
        except YouTubeApiError as e:
            error = read_error(e)
            self._log.warning(
                "comments_fetch_failed",
                video_id=video_id,
                reason=e.reason,
                status_code=e.status_code,
                error=e.message,
            )
            raise error from e

        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            self._log.error("comments_invalid_response", video_id=video_id)
            raise RemoteUnavailableError(
                "Invalid response format from YouTube API",
                reason=RemoteUnavailableError.INVALID_RESPONSE,
            )

        comments = [
            comment_from_item(
                item,
                is_spam=classify(
                    comment_text(item), keywords.blacklist, keywords.whitelist
                ),
            )
            for item in items[: self._page_size]
        ]
        result = ModerationResult(video_id=video_id, comments=comments)

        self._log.info(
            "comments_classified",
            video_id=video_id,
            total_comments=result.total_comments,
            spam_comments=result.spam_comments,
        )
        return result

    async def delete_many(
        self,
        comment_ids: Sequence[str],
        credential: BearerCredential | None,
    ) -> DeletionReport:
        """Delete comments concurrently, one independent request per ID.

        Every request runs to completion regardless of its siblings. The
        report holds exactly one outcome per requested ID, in request order.

        Raises:
            InvalidInputError: Empty or non-list ID set (no remote call).
            MissingCredentialError: No bearer token.
            UnauthenticatedError: Bearer token expired and cannot be refreshed.
            ModerationNotConfiguredError: No API key.
        """
        if not isinstance(comment_ids, list) or not comment_ids:
            raise InvalidInputError("Comment IDs are required")
        if not all(isinstance(cid, str) and cid.strip() for cid in comment_ids):
            raise InvalidInputError("Comment IDs must be non-empty strings")

        if credential is None or not credential.access_token:
            raise MissingCredentialError()
        if credential.status is CredentialStatus.EXPIRED:
            raise UnauthenticatedError(
                "Access token expired and cannot be refreshed. Please sign in again.",
                "credential_expired",
            )

        client = self._require_client()
        access_token = credential.access_token
        self._log.info("batch_delete_started", requested=len(comment_ids))

        results = await asyncio.gather(
            *(self._delete_one(client, cid, access_token) for cid in comment_ids),
            return_exceptions=True,
        )

        outcomes: list[DeletionOutcome] = []
        for comment_id, result in zip(comment_ids, results, strict=True):
            if isinstance(result, DeletionOutcome):
                outcomes.append(result)
                continue
            self._log.error(
                "comment_delete_crashed",
                comment_id=comment_id,
                error=str(result),
                error_type=type(result).__name__,
            )
            outcomes.append(
                DeletionOutcome.failed(
                    comment_id, DeleteFailureReason.ERROR, str(result) or "Unknown error"
                )
            )

        report = DeletionReport(outcomes=outcomes)
        self._log.info(
            "batch_delete_finished",
            requested=report.total_processed,
            deleted=len(report.successful_ids),
            failed=len(report.failures),
        )
        return report

    async def _delete_one(
        self, client: YouTubeClient, comment_id: str, access_token: str
    ) -> DeletionOutcome:
        try:
            await self._retry(lambda: client.delete_comment(comment_id, access_token))
        except YouTubeApiError as e:
            error = delete_error(e)
            reason = FAILURE_REASONS.get(error.code, DeleteFailureReason.ERROR)
            self._log.warning(
                "comment_delete_failed",
                comment_id=comment_id,
                reason=reason.value,
                status_code=e.status_code,
                remote_reason=e.reason,
            )
            return DeletionOutcome.failed(comment_id, reason, error.message)

        self._log.debug("comment_deleted", comment_id=comment_id)
        return DeletionOutcome.ok(comment_id)
