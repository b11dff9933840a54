"""Tests for HTTP utilities module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from mdtree.exceptions import FetchError
from mdtree.http_utils import (
    HEAD_REJECTED_STATUS_CODES,
    RETRY_STATUS_CODES,
    probe_url,
)


def _response(status_code: int) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    return response


def _mock_client_class(mock_client_class: MagicMock, mock_client: AsyncMock) -> None:
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client_class.return_value = mock_client


class TestStatusCodeSets:
    """Tests for status code constants."""

    def test_retry_codes(self) -> None:
        """Should contain all expected retryable status codes."""
        assert RETRY_STATUS_CODES == frozenset({429, 500, 502, 503, 504})

    def test_head_rejected_codes(self) -> None:
        """Should contain the codes servers use to refuse HEAD."""
        assert HEAD_REJECTED_STATUS_CODES == frozenset({403, 405, 501})


class TestProbeUrl:
    """Tests for probe_url function."""

    @pytest.mark.asyncio
    async def test_returns_head_status(self) -> None:
        """Returns the HEAD status when the server accepts HEAD."""
        with patch("mdtree.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = AsyncMock()
            mock_client.head = AsyncMock(return_value=_response(200))
            _mock_client_class(mock_client_class, mock_client)

            result = await probe_url("https://example.com")

        assert result == 200
        mock_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_get(self) -> None:
        """Retries with GET when HEAD is not allowed."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(return_value=_response(405))
        mock_client.get = AsyncMock(return_value=_response(200))

        result = await probe_url("https://example.com", client=mock_client)

        assert result == 200
        mock_client.get.assert_called_once_with("https://example.com")

    @pytest.mark.asyncio
    async def test_returns_not_found_without_retry(self) -> None:
        """A 404 is a final answer."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(return_value=_response(404))

        result = await probe_url("https://example.com/missing", client=mock_client)

        assert result == 404
        assert mock_client.head.call_count == 1

    @pytest.mark.asyncio
    async def test_retries_on_503(self) -> None:
        """Retries on 503 status code."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(side_effect=[_response(503), _response(200)])

        with (
            patch("mdtree.http_utils.MDTREE_FETCH_MAX_RETRIES", 2),
            patch("mdtree.http_utils.MDTREE_FETCH_BACKOFF_S", 0.01),
        ):
            result = await probe_url("https://example.com", client=mock_client)

        assert result == 200
        assert mock_client.head.call_count == 2

    @pytest.mark.asyncio
    async def test_returns_last_retryable_status(self) -> None:
        """Returns the transient status once retries are exhausted."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(return_value=_response(503))

        with (
            patch("mdtree.http_utils.MDTREE_FETCH_MAX_RETRIES", 2),
            patch("mdtree.http_utils.MDTREE_FETCH_BACKOFF_S", 0.01),
        ):
            result = await probe_url("https://example.com", client=mock_client)

        assert result == 503
        # Initial attempt + 2 retries = 3 total
        assert mock_client.head.call_count == 3

    @pytest.mark.asyncio
    async def test_raises_when_unreachable(self) -> None:
        """Raises FetchError when every attempt fails at the transport level."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))

        with (
            patch("mdtree.http_utils.MDTREE_FETCH_MAX_RETRIES", 1),
            patch("mdtree.http_utils.MDTREE_FETCH_BACKOFF_S", 0.01),
        ):
            with pytest.raises(FetchError, match="Failed to reach"):
                await probe_url("https://unreachable.invalid", client=mock_client)

        assert mock_client.head.call_count == 2

    @pytest.mark.asyncio
    async def test_timeout_is_unreachable(self) -> None:
        """A timeout is reported as FetchError."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))

        with patch("mdtree.http_utils.MDTREE_FETCH_MAX_RETRIES", 0):
            with pytest.raises(FetchError):
                await probe_url("https://slow.example.com", client=mock_client)

    @pytest.mark.asyncio
    async def test_recovers_after_request_error(self) -> None:
        """Retries on network request errors."""
        mock_client = AsyncMock()
        mock_client.head = AsyncMock(
            side_effect=[httpx.RequestError("Connection failed"), _response(204)]
        )

        with (
            patch("mdtree.http_utils.MDTREE_FETCH_MAX_RETRIES", 2),
            patch("mdtree.http_utils.MDTREE_FETCH_BACKOFF_S", 0.01),
        ):
            result = await probe_url("https://example.com", client=mock_client)

        assert result == 204

    @pytest.mark.asyncio
    async def test_client_has_correct_settings(self) -> None:
        """Creates client with correct timeout and redirect settings."""
        with patch("mdtree.http_utils.httpx.AsyncClient") as mock_client_class:
            mock_client = AsyncMock()
            mock_client.head = AsyncMock(return_value=_response(200))
            _mock_client_class(mock_client_class, mock_client)

            await probe_url("https://example.com")

            call_kwargs = mock_client_class.call_args[1]
            assert call_kwargs["follow_redirects"] is True
            assert call_kwargs["max_redirects"] == 5
            assert "timeout" in call_kwargs
            assert "User-Agent" in call_kwargs["headers"]
