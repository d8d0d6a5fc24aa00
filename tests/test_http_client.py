"""
HTTP Client Unit Tests

Tests for the connection pooling and retry logic.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import httpx

from app.core import http_client


class TestHttpClient:
    """Tests for the HTTP client module."""

    def test_get_http_client_returns_singleton(self):
        """Verify that get_http_client returns the same instance."""
        with patch.object(http_client, "_http_client", None), \
                patch("app.core.http_client.httpx.AsyncClient") as client_cls:
            client1 = http_client.get_http_client()
            client2 = http_client.get_http_client()

            assert client1 is client2
            client_cls.assert_called_once()

    def test_http_client_has_connection_limits(self):
        """Verify connection pool limits are configured."""
        with patch.object(http_client, "_http_client", None), \
                patch("app.core.http_client.httpx.AsyncClient") as client_cls:
            http_client.get_http_client()

            kwargs = client_cls.call_args.kwargs
            assert kwargs["limits"].max_connections == http_client.MAX_CONNECTIONS
            assert kwargs["limits"].max_keepalive_connections == http_client.MAX_KEEPALIVE_CONNECTIONS
            assert kwargs["follow_redirects"] is True

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        client = AsyncMock()

        with patch.object(http_client, "_http_client", client):
            await http_client.close_http_client()

            assert http_client._http_client is None
            client.aclose.assert_awaited_once()


class TestRequestWithRetry:
    """Tests for retry logic."""

    @pytest.mark.asyncio
    async def test_retry_on_server_error(self):
        """Verify retry on 5xx status codes."""
        mock_response_fail = MagicMock()
        mock_response_fail.status_code = 500

        mock_response_success = MagicMock()
        mock_response_success.status_code = 200

        mock_client = AsyncMock()
        mock_client.request = AsyncMock(
            side_effect=[mock_response_fail, mock_response_success]
        )

        with patch("app.core.http_client.get_http_client", return_value=mock_client):
            with patch("app.core.http_client.RETRY_BACKOFF_BASE", 0.01):  # Fast retry
                response = await http_client.request_with_retry("GET", "http://test.com")

                assert response.status_code == 200
                assert mock_client.request.call_count == 2

    @pytest.mark.asyncio
    async def test_last_server_error_is_returned(self):
        """After the final attempt a 5xx response is handed back to the caller."""
        mock_response = MagicMock()
        mock_response.status_code = 503

        mock_client = AsyncMock()
        mock_client.request = AsyncMock(return_value=mock_response)

        with patch("app.core.http_client.get_http_client", return_value=mock_client):
            with patch("app.core.http_client.RETRY_BACKOFF_BASE", 0.01):
                response = await http_client.request_with_retry(
                    "GET", "http://test.com", max_retries=1
                )

                assert response.status_code == 503
                assert mock_client.request.call_count == 2

    @pytest.mark.asyncio
    async def test_no_retry_on_success(self):
        """Verify no retry when request succeeds."""
        mock_response = MagicMock()
        mock_response.status_code = 200

        mock_client = AsyncMock()
        mock_client.request = AsyncMock(return_value=mock_response)

        with patch("app.core.http_client.get_http_client", return_value=mock_client):
            response = await http_client.get_with_retry("http://test.com")

            assert response.status_code == 200
            assert mock_client.request.call_count == 1

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self):
        """Verify exception after all retries exhausted."""
        mock_client = AsyncMock()
        mock_client.request = AsyncMock(side_effect=httpx.ConnectError("Connection failed"))

        with patch("app.core.http_client.get_http_client", return_value=mock_client):
            with patch("app.core.http_client.RETRY_BACKOFF_BASE", 0.01):
                with pytest.raises(httpx.ConnectError):
                    await http_client.request_with_retry("GET", "http://test.com", max_retries=2)

                assert mock_client.request.call_count == 3  # Initial + 2 retries
