"""Shared HTTP client for the fact sources.

Every source adapter fetches through one pooled ``HTTPClient`` created by
the DI container. Failed connection attempts are retried by the transport;
HTTP status handling stays with the caller (see ``BaseSource._fetch_json``).
Each response is logged at DEBUG with its status and elapsed time, and the
``pass_id``/``source`` bound by the collection pipeline ride along.
"""

import httpx

from onefact.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "OneFact/1.0 (fact-of-the-day collector)"


async def log_response(response: httpx.Response) -> None:
    """Response hook: one DEBUG line per upstream call."""
    logger.debug(
        "Upstream response",
        method=response.request.method,
        host=response.request.url.host,
        path=response.request.url.path,
        status=response.status_code,
    )


class HTTPClient:
    """Pooled HTTP client shared by all sources.

    Create once at startup, inject into sources, close at shutdown.

    Attributes:
        user_agent: User-Agent sent with every request
        retries: Connection attempts retried before a request fails
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
        user_agent: str = DEFAULT_USER_AGENT,
        retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            max_connections: Maximum number of connections
            max_keepalive_connections: Maximum keepalive connections
            user_agent: User-Agent header sent with every request
            retries: Retries for connections that fail to establish
            transport: Transport override (tests use ``httpx.MockTransport``)
        """
        self.user_agent = user_agent
        self.retries = retries
        limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=limits,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport or httpx.AsyncHTTPTransport(retries=retries, limits=limits),
            event_hooks={"response": [log_response]},
        )
        logger.info(
            "HTTP client initialized",
            timeout=timeout,
            max_connections=max_connections,
            retries=retries,
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """Send GET request.

        Keyword arguments (``params``, ``timeout``, ...) go to httpx as-is.
        """
        return await self._client.get(url, **kwargs)

    async def close(self) -> None:
        """Close the client and release pooled connections."""
        await self._client.aclose()
        logger.info("HTTP client closed")


__all__ = ["DEFAULT_USER_AGENT", "HTTPClient", "log_response"]
