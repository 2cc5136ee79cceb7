"""Moderation API endpoints.

Provides routes for:
- Fetching and classifying a video's comments
- Deleting a set of comments on behalf of the signed-in user
- Reading the active keyword lists
"""

import structlog
from fastapi import APIRouter

from .dependencies import CurrentSession, ModerationServiceDep
from .schemas import (
    ClassifyCommentsRequest,
    DeleteCommentsRequest,
    DeleteCommentsResponse,
    KeywordConfigResponse,
    ModerationResultResponse,
)
from .service import BatchDeleteFailedError


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/moderation", tags=["moderation"])


@router.post(
    "/comments",
    response_model=ModerationResultResponse,
    summary="Fetch and classify comments for a video",
)
async def classify_comments(
    data: ClassifyCommentsRequest,
    _session: CurrentSession,  # Required for auth, not used in logic
    service: ModerationServiceDep,
) -> ModerationResultResponse:
    """Fetch up to one page of top-level comments and flag spam.

    Classification is read-only and uses the server's API key; the session
    only proves the caller is signed in.
    """
    result = await service.fetch_and_classify(data.url)
    return ModerationResultResponse.from_result(result)


@router.post(
    "/comments/delete",
    response_model=DeleteCommentsResponse,
    summary="Delete a set of comments",
)
async def delete_comments(
    data: DeleteCommentsRequest,
    session: CurrentSession,
    service: ModerationServiceDep,
) -> DeleteCommentsResponse:
    """Delete every requested comment, each independently.

    Partial failure is a success response listing both the deleted and the
    failed IDs. Only when nothing could be deleted does the call fail, and
    the error still carries the per-ID failures.
    """
    report = await service.delete_many(data.comment_ids, session.credential)

    if report.all_failed:
        raise BatchDeleteFailedError(report)

    if report.failures:
        logger.warning(
            "batch_delete_partial",
            deleted=len(report.successful_ids),
            failed=len(report.failures),
        )

    return DeleteCommentsResponse.from_report(report)


@router.get(
    "/keywords",
    response_model=KeywordConfigResponse,
    summary="Get active spam keyword lists",
)
async def get_keywords(
    _session: CurrentSession,
    service: ModerationServiceDep,
) -> KeywordConfigResponse:
    """Return the blacklist and whitelist the classifier currently uses."""
    config = service.keywords()
    return KeywordConfigResponse(
        blacklist=list(config.blacklist),
        whitelist=list(config.whitelist),
    )
