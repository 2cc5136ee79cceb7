"""Tests for the YouTube Data API client."""

import httpx
import pytest

from sweeper.moderation.youtube import (
    REASON_INVALID_RESPONSE,
    REASON_NETWORK,
    REASON_TIMEOUT,
    YouTubeApiError,
    YouTubeClient,
    parse_error_payload,
)


BASE_URL = "https://youtube.test/youtube/v3"


def error_body(code: int, reason: str, message: str = "boom") -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "errors": [{"reason": reason, "message": message}],
        }
    }


def make_client(handler) -> YouTubeClient:
    return YouTubeClient(
        "test-key",
        base_url=BASE_URL,
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestListCommentThreads:
    """GET commentThreads."""

    @pytest.mark.asyncio
    async def test_sends_expected_query(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": []})

        client = make_client(handler)
        body = await client.list_comment_threads("dQw4w9WgXcQ", max_results=50)
        await client.aclose()

        assert body == {"items": []}
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/youtube/v3/commentThreads"
        assert request.url.params["part"] == "snippet"
        assert request.url.params["videoId"] == "dQw4w9WgXcQ"
        assert request.url.params["maxResults"] == "50"
        assert request.url.params["key"] == "test-key"
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_error_payload_is_parsed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403, json=error_body(403, "commentsDisabled", "disabled")
            )

        client = make_client(handler)
        with pytest.raises(YouTubeApiError) as exc_info:
            await client.list_comment_threads("dQw4w9WgXcQ")

        assert exc_info.value.status_code == 403
        assert exc_info.value.reason == "commentsDisabled"
        assert exc_info.value.remote_message == "disabled"

    @pytest.mark.asyncio
    async def test_non_json_error_falls_back_to_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        client = make_client(handler)
        with pytest.raises(YouTubeApiError) as exc_info:
            await client.list_comment_threads("dQw4w9WgXcQ")

        assert exc_info.value.status_code == 502
        assert exc_info.value.reason is None
        assert exc_info.value.remote_message is None
        assert "502" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_becomes_api_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        client = make_client(handler)
        with pytest.raises(YouTubeApiError) as exc_info:
            await client.list_comment_threads("dQw4w9WgXcQ")

        assert exc_info.value.reason == REASON_TIMEOUT
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_connection_error_becomes_api_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(YouTubeApiError) as exc_info:
            await client.list_comment_threads("dQw4w9WgXcQ")

        assert exc_info.value.reason == REASON_NETWORK

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        client = make_client(handler)
        with pytest.raises(YouTubeApiError) as exc_info:
            await client.list_comment_threads("dQw4w9WgXcQ")

        assert exc_info.value.reason == REASON_INVALID_RESPONSE
        assert exc_info.value.status_code == 200


class TestDeleteComment:
    """DELETE comments."""

    @pytest.mark.asyncio
    async def test_sends_bearer_token_and_id(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        client = make_client(handler)
        await client.delete_comment("Ugx123", "ya29.access")

        request = seen[0]
        assert request.method == "DELETE"
        assert request.url.path == "/youtube/v3/comments"
        assert request.url.params["id"] == "Ugx123"
        assert request.url.params["key"] == "test-key"
        assert request.headers["Authorization"] == "Bearer ya29.access"

    @pytest.mark.asyncio
    async def test_forbidden(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json=error_body(403, "forbidden"))

        client = make_client(handler)
        with pytest.raises(YouTubeApiError) as exc_info:
            await client.delete_comment("Ugx123", "ya29.access")

        assert exc_info.value.reason == "forbidden"
        assert exc_info.value.status_code == 403


class TestParseErrorPayload:
    """Error body parsing."""

    def test_documented_shape(self):
        response = httpx.Response(401, json=error_body(401, "authError", "bad"))
        assert parse_error_payload(response) == ("authError", "bad")

    def test_missing_errors_list(self):
        response = httpx.Response(500, json={"error": {"message": "oops"}})
        assert parse_error_payload(response) == (None, "oops")

    def test_unexpected_json(self):
        response = httpx.Response(500, json=["not", "a", "dict"])
        assert parse_error_payload(response) == (None, None)

    def test_not_json(self):
        response = httpx.Response(500, text="nope")
        assert parse_error_payload(response) == (None, None)
