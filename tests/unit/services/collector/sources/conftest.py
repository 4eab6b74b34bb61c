"""Shared fixtures for fact source tests."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from onefact.infrastructure.http_client import HTTPClient


@pytest.fixture
def mock_http_client() -> HTTPClient:
    """Create a mock HTTP client."""
    client = MagicMock(spec=HTTPClient)
    client.get = AsyncMock()
    return client


def create_mock_response(json_data=None, status_code=200):
    """Create a mock HTTP response.

    Args:
        json_data: Data to return from json()
        status_code: HTTP status code; non-2xx makes raise_for_status() raise

    Returns:
        Mock response object
    """
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    if status_code >= 400:
        request = httpx.Request("GET", "https://example.com")
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                f"HTTP {status_code}",
                request=request,
                response=httpx.Response(status_code, request=request),
            )
        )
    else:
        response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def mock_response():
    """Factory for mock HTTP responses."""
    return create_mock_response
