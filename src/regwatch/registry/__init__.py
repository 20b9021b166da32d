"""Registry v2 API clients."""

from regwatch.registry.auth import AuthNegotiator, parse_www_authenticate
from regwatch.registry.base import (
    MANIFEST_ACCEPT,
    AuthChallenge,
    RegistryResponse,
    Transport,
)
from regwatch.registry.digest import DigestChecker
from regwatch.registry.tags import TagLister, filter_versions, next_page_url
from regwatch.registry.transport import HttpxTransport

__all__ = [
    "MANIFEST_ACCEPT",
    "AuthChallenge",
    "AuthNegotiator",
    "DigestChecker",
    "HttpxTransport",
    "RegistryResponse",
    "TagLister",
    "Transport",
    "filter_versions",
    "next_page_url",
    "parse_www_authenticate",
]
