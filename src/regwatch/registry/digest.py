"""Manifest digest lookup."""

from __future__ import annotations

from regwatch.registry.base import MANIFEST_ACCEPT, Transport, bearer_headers
from regwatch.utils.errors import MissingDigestError
from regwatch.utils.logging import get_logger

logger = get_logger(__name__)


class DigestChecker:
    """Reads the content digest a registry reports for a tag."""

    def __init__(self, transport: Transport, timeout: float | None = None) -> None:
        self._transport = transport
        self._timeout = timeout

    def check_digest(
        self,
        host: str,
        repository: str,
        tag: str,
        token: str | None,
        insecure: bool = False,
    ) -> str:
        """Get the manifest digest for a tag.

        The digest header is returned verbatim; its format is not validated.

        Args:
            host: Registry API host
            repository: Repository path
            tag: Tag to look up
            token: Bearer token, or None for anonymous access
            insecure: Use plain HTTP

        Returns:
            The docker-content-digest header value

        Raises:
            MissingDigestError: If the response has no digest header
            RegwatchError: If the request fails
        """
        scheme = "http" if insecure else "https"
        url = f"{scheme}://{host}/v2/{repository}/manifests/{tag}"
        headers = bearer_headers(token, Accept=MANIFEST_ACCEPT)

        response = self._transport.head(url, headers, timeout=self._timeout)

        digest = response.headers.get("docker-content-digest")
        if not digest:
            raise MissingDigestError(url)

        logger.debug("%s:%s is %s", repository, tag, digest)
        return digest
