"""HTTP transport for registry requests."""

from __future__ import annotations

import httpx

from regwatch.registry.base import RegistryResponse
from regwatch.utils.errors import (
    NotFoundError,
    RegistryUnavailableError,
    RequestFailedError,
    TransportError,
    UnauthorizedError,
)
from regwatch.utils.logging import get_logger

logger = get_logger(__name__)


class HttpxTransport:
    """Transport backed by httpx.

    The transport holds no per-request state, so one instance can be shared
    by concurrent checks. When no client is supplied a short-lived client is
    opened for each request; a supplied client is reused and left open.

    Example:
        transport = HttpxTransport(timeout=10.0)
        response = transport.get("https://ghcr.io/v2/", ignore_unauthorized=True)
        print(response.status)
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Existing httpx client to reuse (e.g. with a mock transport)
            timeout: Default request timeout in seconds
            max_retries: Connection retry attempts for owned clients
        """
        self._client = client
        self._timeout = timeout
        self._max_retries = max_retries

    def _get_client(self) -> httpx.Client:
        """Create an HTTP client with retry support."""
        transport = httpx.HTTPTransport(retries=self._max_retries)
        return httpx.Client(
            timeout=self._timeout,
            transport=transport,
            follow_redirects=True,
        )

    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        ignore_unauthorized: bool = False,
        params: list[tuple[str, str]] | None = None,
        timeout: float | None = None,
    ) -> RegistryResponse:
        return self._request("GET", url, headers, ignore_unauthorized, params, timeout)

    def head(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> RegistryResponse:
        return self._request("HEAD", url, headers, False, None, timeout)

    def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        ignore_unauthorized: bool,
        params: list[tuple[str, str]] | None,
        timeout: float | None,
    ) -> RegistryResponse:
        request_timeout = httpx.USE_CLIENT_DEFAULT if timeout is None else timeout
        logger.debug("%s %s", method, url)

        try:
            if self._client is not None:
                response = self._client.request(
                    method, url, headers=headers, params=params, timeout=request_timeout
                )
            else:
                with self._get_client() as client:
                    response = client.request(
                        method, url, headers=headers, params=params, timeout=request_timeout
                    )
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {url}: timed out: {e}", url=url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {url}: {e}", url=url) from e

        status = response.status_code
        if status == 404:
            raise NotFoundError(url, method=method)
        if status == 401 and not ignore_unauthorized:
            raise UnauthorizedError(url, method=method)
        if status == 502:
            raise RegistryUnavailableError(url, method=method)
        if status >= 400 and status != 401:
            raise RequestFailedError(url, status, method=method)

        return RegistryResponse(
            url=str(response.url),
            status=status,
            headers=response.headers,
            body=response.content,
        )
