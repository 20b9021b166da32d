"""Tag listing with pagination and version filtering."""

from __future__ import annotations

import re

import httpx

from regwatch.models.version import UpdateType, Version
from regwatch.registry.base import Transport, bearer_headers
from regwatch.utils.errors import InvalidResponseError
from regwatch.utils.logging import get_logger
from regwatch.utils.version import parse_version

logger = get_logger(__name__)

DEFAULT_MAX_PAGES = 10

_NEXT_LINK_RE = re.compile(r'<([^>]*)>\s*;\s*rel="?next"?', re.IGNORECASE)


def next_page_url(link_header: str | None, current_url: str) -> str | None:
    """Extract the next page URL from a Link header.

    Relative URLs are resolved against the current page. A next link whose
    ``n`` query parameter is ``0`` marks the end of the listing.

    Args:
        link_header: Value of the Link response header, if any
        current_url: URL of the page that carried the header

    Returns:
        Absolute URL of the next page, or None when the listing is done
    """
    if not link_header:
        return None

    match = _NEXT_LINK_RE.search(link_header)
    if not match:
        return None

    url = httpx.URL(current_url).join(match.group(1))
    if url.params.get("n") == "0":
        return None
    return str(url)


def parse_tags(tags: list[str]) -> list[Version]:
    """Parse tag strings, dropping tags that are not versions."""
    versions = []
    for tag in tags:
        version = parse_version(tag)
        if version is not None:
            versions.append(version)
    return versions


def matches_update_type(candidate: Version, base: Version, ignore_update_type: UpdateType) -> bool:
    """Whether the candidate survives the caller's update-type filter."""
    if ignore_update_type == UpdateType.MAJOR:
        return candidate.major == base.major
    if ignore_update_type == UpdateType.MINOR:
        return candidate.major == base.major and candidate.minor == base.minor
    if ignore_update_type == UpdateType.PATCH:
        return candidate.sort_key == base.sort_key
    return True


def filter_versions(
    versions: list[Version],
    base: Version,
    ignore_update_type: UpdateType = UpdateType.NONE,
) -> list[Version]:
    """Apply the shape and update-type filters, keeping order."""
    return [
        v
        for v in versions
        if v.same_shape(base) and matches_update_type(v, base, ignore_update_type)
    ]


class TagLister:
    """Fetches and filters the tag list of a repository.

    The lister returns candidates in registry order; choosing the newest
    one is left to the resolver.

    Example:
        lister = TagLister(HttpxTransport())
        versions = lister.list_tags("ghcr.io", "owner/name", token, base=Version(major=1, minor=4, patch=2))
    """

    def __init__(self, transport: Transport, timeout: float | None = None) -> None:
        self._transport = transport
        self._timeout = timeout

    def list_tags(
        self,
        host: str,
        repository: str,
        token: str | None,
        base: Version,
        ignore_update_type: UpdateType = UpdateType.NONE,
        insecure: bool = False,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> list[Version]:
        """List candidate versions for a repository.

        Args:
            host: Registry API host
            repository: Repository path (e.g., "owner/name")
            token: Bearer token, or None for anonymous access
            base: Version currently in use
            ignore_update_type: Granularity of change to ignore
            insecure: Use plain HTTP
            max_pages: Maximum number of pages to fetch

        Returns:
            Deduplicated, filtered versions in registry order

        Raises:
            RegwatchError: If a page cannot be fetched or decoded
        """
        scheme = "http" if insecure else "https"
        url: str | None = f"{scheme}://{host}/v2/{repository}/tags/list"
        headers = bearer_headers(token, Accept="application/json")

        seen: set[tuple[int | None, int | None, int | None]] = set()
        versions: list[Version] = []
        pages = 0

        while url and pages < max_pages:
            response = self._transport.get(url, headers, timeout=self._timeout)
            pages += 1

            data = response.json_body()
            if not isinstance(data, dict):
                raise InvalidResponseError(f"{url}: unexpected tag list body", url=url)
            tags = data.get("tags") or []

            for version in parse_tags(tags):
                key = (version.major, version.minor, version.patch)
                if key in seen:
                    continue
                seen.add(key)
                versions.append(version)

            url = next_page_url(response.headers.get("link"), response.url)

        if url:
            logger.debug("Stopped listing %s after %d pages", repository, pages)

        candidates = filter_versions(versions, base, ignore_update_type)
        logger.debug(
            "%s: %d versions listed, %d candidates after filtering",
            repository,
            len(versions),
            len(candidates),
        )
        return candidates
