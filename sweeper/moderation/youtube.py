"""YouTube Data API v3 client for comment threads.

Only the two calls moderation needs:
- list top-level comment threads of a video (API key, read-only)
- delete a single comment (API key + the signed-in user's bearer token)

Errors are raised as YouTubeApiError carrying the HTTP status and the
machine-readable reason code from the error payload, e.g.::

    {"error": {"code": 403, "message": "...", "errors": [{"reason": "forbidden"}]}}
"""

from typing import Any

import httpx
import structlog


logger = structlog.get_logger(__name__)


class YouTubeApiError(Exception):
    """Raised when a YouTube Data API call fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        remote_message: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.reason = reason
        self.remote_message = remote_message
        super().__init__(message)


# Reasons synthesised for transport-level failures
REASON_TIMEOUT = "timeout"
REASON_NETWORK = "network"
REASON_INVALID_RESPONSE = "invalidResponse"


def parse_error_payload(response: httpx.Response) -> tuple[str | None, str | None]:
    """Extract (reason, message) from a YouTube error response body.

    Bodies that are not the documented JSON shape yield (None, None).
    """
    try:
        payload = response.json()
    except ValueError:
        return None, None

    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return None, None

    reason = None
    errors = error.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        reason = errors[0].get("reason")

    message = error.get("message")
    return reason, message if isinstance(message, str) and message else None


class YouTubeClient:
    """Async YouTube Data API client sharing one connection pool."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Data API key sent with every request.
            base_url: API root.
            timeout: Time budget for each request, in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                path,
                params={**params, "key": self._api_key},
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("youtube_api_timeout", method=method, path=path)
            raise YouTubeApiError(
                "YouTube API request timed out", reason=REASON_TIMEOUT
            ) from e
        except httpx.RequestError as e:
            logger.error("youtube_api_request_error", method=method, error=str(e))
            raise YouTubeApiError(
                f"Error communicating with YouTube API: {e}", reason=REASON_NETWORK
            ) from e

        if response.is_success:
            return response

        reason, message = parse_error_payload(response)
        logger.warning(
            "youtube_api_error",
            method=method,
            path=path,
            status_code=response.status_code,
            reason=reason,
            response_text=response.text[:500],
        )
        raise YouTubeApiError(
            message or f"YouTube API error (status {response.status_code})",
            status_code=response.status_code,
            reason=reason,
            remote_message=message,
        )

    async def list_comment_threads(
        self,
        video_id: str,
        *,
        max_results: int = 100,
    ) -> dict[str, Any]:
        """Fetch one page of top-level comment threads for a video.

        Returns:
            The decoded response body (``items`` holds the threads).

        Raises:
            YouTubeApiError: On a non-success status or transport failure.
        """
        response = await self._request(
            "GET",
            "/commentThreads",
            params={
                "part": "snippet",
                "videoId": video_id,
                "maxResults": max_results,
            },
        )
        try:
            return response.json()
        except ValueError as e:
            raise YouTubeApiError(
                "Invalid response format from YouTube API",
                status_code=response.status_code,
                reason=REASON_INVALID_RESPONSE,
            ) from e

    async def delete_comment(self, comment_id: str, access_token: str) -> None:
        """Delete one comment on behalf of the signed-in user.

        Raises:
            YouTubeApiError: On a non-success status or transport failure.
        """
        await self._request(
            "DELETE",
            "/comments",
            params={"id": comment_id},
            headers={"Authorization": f"Bearer {access_token}"},
        )
