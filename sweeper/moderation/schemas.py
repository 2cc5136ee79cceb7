"""Pydantic schemas for moderation API.

Request and response models for comment classification and batch delete.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import DeletionOutcome, DeletionReport, ModerationResult


# ==============================================================================
# Request Schemas
# ==============================================================================


class ClassifyCommentsRequest(BaseModel):
    """Request to fetch and classify a video's comments."""

    url: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="YouTube video URL or video ID",
    )


class DeleteCommentsRequest(BaseModel):
    """Request to delete a set of comments."""

    model_config = ConfigDict(populate_by_name=True)

    comment_ids: list[str] = Field(
        ...,
        alias="commentIds",
        min_length=1,
        description="Comment IDs to delete",
    )

    @field_validator("comment_ids")
    @classmethod
    def validate_comment_ids(cls, v: list[str]) -> list[str]:
        """Reject blank IDs."""
        if any(not cid.strip() for cid in v):
            msg = "Comment IDs cannot be empty"
            raise ValueError(msg)
        return v


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentResponse(BaseModel):
    """A fetched comment with its spam verdict."""

    model_config = ConfigDict(from_attributes=True)

    comment_id: str
    text: str
    author_name: str
    author_profile_image_url: str | None = None
    like_count: int = Field(default=0, ge=0)
    published_at: str
    is_spam: bool


class ModerationResultResponse(BaseModel):
    """Classified comments for one video."""

    video_id: str
    comments: list[CommentResponse] = Field(default_factory=list)
    total_comments: int = 0
    spam_comments: int = 0
    message: str = ""

    @classmethod
    def from_result(cls, result: ModerationResult) -> "ModerationResultResponse":
        return cls(
            video_id=result.video_id,
            comments=[
                CommentResponse.model_validate(c) for c in result.comments
            ],
            total_comments=result.total_comments,
            spam_comments=result.spam_comments,
            message=result.summary,
        )


class FailedDeleteResponse(BaseModel):
    """A comment that could not be deleted."""

    comment_id: str
    error: str = Field(..., description="Failure reason code")
    message: str = Field(..., description="Human-readable failure description")

    @classmethod
    def from_outcome(cls, outcome: DeletionOutcome) -> "FailedDeleteResponse":
        return cls(
            comment_id=outcome.comment_id,
            error=outcome.reason.value if outcome.reason else "error",
            message=outcome.message or "Unknown error",
        )


class DeleteCommentsResponse(BaseModel):
    """Per-ID outcome of a batch delete.

    Callers should drop exactly ``successful_deletes`` from their view.
    """

    success: bool
    total_processed: int
    successful_deletes: list[str] = Field(default_factory=list)
    failed_deletes: list[FailedDeleteResponse] = Field(default_factory=list)
    message: str = ""

    @classmethod
    def from_report(cls, report: DeletionReport) -> "DeleteCommentsResponse":
        return cls(
            success=report.succeeded,
            total_processed=report.total_processed,
            successful_deletes=report.successful_ids,
            failed_deletes=[FailedDeleteResponse.from_outcome(o) for o in report.failures],
            message=report.summary,
        )


class KeywordConfigResponse(BaseModel):
    """Keyword lists currently used by the classifier."""

    blacklist: list[str] = Field(default_factory=list)
    whitelist: list[str] = Field(default_factory=list)
