"""Registry authentication negotiation."""

from __future__ import annotations

import re

from regwatch.registry.base import AuthChallenge, Transport
from regwatch.utils.errors import (
    MissingRealmError,
    RegwatchError,
    TokenExchangeFailedError,
    UnsupportedAuthSchemeError,
)
from regwatch.utils.logging import get_logger

logger = get_logger(__name__)

_BEARER_RE = re.compile(r"^Bearer\s+", re.IGNORECASE)
_ATTR_RE = re.compile(r'(\w+)="(.*?)"')


def parse_www_authenticate(header: str) -> AuthChallenge:
    """Parse a WWW-Authenticate header into a bearer challenge.

    Args:
        header: Header value, e.g. 'Bearer realm="https://ghcr.io/token",service="ghcr.io"'

    Returns:
        The parsed challenge

    Raises:
        UnsupportedAuthSchemeError: If the scheme is not Bearer
        MissingRealmError: If no quoted realm attribute is present
    """
    if not _BEARER_RE.match(header):
        scheme = header.split(" ", 1)[0] if header else ""
        raise UnsupportedAuthSchemeError(scheme)

    attributes = {key.lower(): value for key, value in _ATTR_RE.findall(header)}
    if "realm" not in attributes:
        raise MissingRealmError(header)

    return AuthChallenge(realm=attributes["realm"], service=attributes.get("service"))


class AuthNegotiator:
    """Discovers whether a registry wants a token, and fetches one.

    Example:
        negotiator = AuthNegotiator(HttpxTransport())
        challenge = negotiator.probe("ghcr.io")
        if challenge:
            token = negotiator.exchange(challenge.realm, ["owner/name"])
    """

    def __init__(self, transport: Transport, timeout: float | None = None) -> None:
        self._transport = transport
        self._timeout = timeout

    def probe(self, host: str, insecure: bool = False) -> AuthChallenge | None:
        """Probe the registry base endpoint for an auth challenge.

        Args:
            host: Registry API host
            insecure: Use plain HTTP

        Any answer other than 401, failures included, means there is no
        challenge; an unreachable registry is reported by the next request.

        Returns:
            The challenge on 401, None otherwise

        Raises:
            UnsupportedAuthSchemeError: If the challenge is not Bearer
            MissingRealmError: If the challenge has no realm
        """
        scheme = "http" if insecure else "https"
        try:
            response = self._transport.get(
                f"{scheme}://{host}/v2/",
                {},
                ignore_unauthorized=True,
                timeout=self._timeout,
            )
        except RegwatchError as e:
            logger.debug("Probe of %s failed, assuming anonymous access: %s", host, e.message)
            return None

        if response.status != 401:
            logger.debug("%s allows anonymous access", host)
            return None

        challenge = parse_www_authenticate(response.headers.get("www-authenticate", ""))
        logger.debug("%s requires a token from %s", host, challenge.realm)
        return challenge

    def exchange(
        self,
        realm: str,
        repositories: list[str],
        credentials: str | None = None,
        service: str | None = None,
    ) -> str:
        """Exchange credentials for a bearer token scoped to pull the repositories.

        Args:
            realm: Token endpoint from the challenge
            repositories: Repositories to request pull scope for, one scope each
            credentials: Basic Authorization header value, or None for anonymous
            service: Service named by the challenge

        Returns:
            The bearer token

        Raises:
            TokenExchangeFailedError: If no token could be obtained
        """
        params: list[tuple[str, str]] = []
        if service:
            params.append(("service", service))
        for repository in repositories:
            params.append(("scope", f"repository:{repository}:pull"))

        headers = {"Authorization": credentials} if credentials else {}

        try:
            response = self._transport.get(realm, headers, params=params, timeout=self._timeout)
            data = response.json_body()
        except RegwatchError as e:
            raise TokenExchangeFailedError(e.message, realm=realm) from e

        if not isinstance(data, dict):
            raise TokenExchangeFailedError(f"{realm}: unexpected token response", realm=realm)

        token = data.get("token") or data.get("access_token")
        if not token:
            raise TokenExchangeFailedError(f"{realm}: no token in response", realm=realm)

        logger.debug("Obtained token for %d repositories", len(repositories))
        return token
