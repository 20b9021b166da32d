"""Base registry protocols and types."""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, Field

from regwatch.utils.errors import InvalidResponseError

# Manifest media types, most specific first
MANIFEST_LIST = "application/vnd.docker.distribution.manifest.list.v2+json"
MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
OCI_INDEX = "application/vnd.oci.image.index.v1+json"
OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"

MANIFEST_ACCEPT = ", ".join([MANIFEST_LIST, MANIFEST_V2, OCI_INDEX, OCI_MANIFEST])


class RegistryResponse(BaseModel):
    """Status, headers and body of a registry answer."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    url: str = Field(description="URL that produced this response")
    status: int = Field(description="HTTP status code")
    headers: httpx.Headers = Field(
        default_factory=httpx.Headers,
        description="Response headers (case-insensitive)",
    )
    body: bytes = Field(default=b"", description="Raw response body")

    def json_body(self) -> Any:
        """Decode the body as JSON.

        Raises:
            InvalidResponseError: If the body is not JSON
        """
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise InvalidResponseError(f"{self.url}: invalid JSON body: {e}", url=self.url) from e


class AuthChallenge(BaseModel):
    """A parsed ``WWW-Authenticate: Bearer`` challenge."""

    model_config = {"frozen": True}

    realm: str = Field(description="Token endpoint URL")
    service: str | None = Field(default=None, description="Service the token is issued for")


@runtime_checkable
class Transport(Protocol):
    """Protocol for executing registry HTTP requests.

    Implementations map statuses to the error taxonomy:
    404 raises NotFoundError, 401 raises UnauthorizedError unless
    ``ignore_unauthorized`` is set, 502 raises RegistryUnavailableError,
    any other status >= 400 raises RequestFailedError. Failures without an
    HTTP answer raise TransportError. Everything else is returned.

    ``timeout`` is a per-request deadline in seconds.
    """

    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        ignore_unauthorized: bool = False,
        params: list[tuple[str, str]] | None = None,
        timeout: float | None = None,
    ) -> RegistryResponse:
        ...

    def head(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> RegistryResponse:
        ...


def bearer_headers(token: str | None, **extra: str) -> dict[str, str]:
    """Build request headers, adding a bearer Authorization when a token is known."""
    headers = dict(extra)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
