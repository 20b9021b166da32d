"""Error types for regwatch.

Every failure a registry check can run into is a subclass of
:class:`RegwatchError` carrying an :class:`ErrorCode`, so callers branch on
the code instead of parsing messages.
"""

from __future__ import annotations

from typing import Any

from regwatch.models.common import CheckError, ErrorCode


class RegwatchError(Exception):
    """Base exception for regwatch."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_check_error(self) -> CheckError:
        """Convert to CheckError model."""
        return CheckError(code=self.code, message=self.message, details=self.details)


class NotFoundError(RegwatchError):
    """The registry answered 404."""

    def __init__(self, url: str, method: str = "GET"):
        super().__init__(
            f"{method} {url}: not found",
            code=ErrorCode.NOT_FOUND,
            details={"url": url},
        )


class UnauthorizedError(RegwatchError):
    """The registry answered 401 and the caller did not expect it."""

    def __init__(self, url: str, method: str = "GET"):
        super().__init__(
            f"{method} {url}: unauthorized",
            code=ErrorCode.UNAUTHORIZED,
            details={"url": url},
        )


class RegistryUnavailableError(RegwatchError):
    """The registry answered 502."""

    def __init__(self, url: str, method: str = "GET"):
        super().__init__(
            f"{method} {url}: registry unavailable",
            code=ErrorCode.REGISTRY_UNAVAILABLE,
            details={"url": url},
        )


class RequestFailedError(RegwatchError):
    """Any other 4xx/5xx answer."""

    def __init__(self, url: str, status: int, method: str = "GET"):
        super().__init__(
            f"{method} {url}: request failed with status {status}",
            code=ErrorCode.REQUEST_FAILED,
            details={"url": url, "status": status},
        )
        self.status = status


class TransportError(RegwatchError):
    """The request never produced an HTTP response (network, timeout, bad URL)."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, code=ErrorCode.TRANSPORT_ERROR, details=details)


class UnsupportedAuthSchemeError(RegwatchError):
    """The registry challenged with something other than Bearer."""

    def __init__(self, scheme: str):
        super().__init__(
            "unsupported authentication scheme",
            code=ErrorCode.UNSUPPORTED_AUTH_SCHEME,
            details={"scheme": scheme},
        )


class MissingRealmError(RegwatchError):
    """A Bearer challenge without a realm attribute."""

    def __init__(self, header: str):
        super().__init__(
            "realm not found in www-authenticate header",
            code=ErrorCode.MISSING_REALM,
            details={"header": header},
        )


class TokenExchangeFailedError(RegwatchError):
    """The auth server did not hand out a token."""

    def __init__(self, message: str, realm: str | None = None):
        details = {"realm": realm} if realm else {}
        super().__init__(message, code=ErrorCode.TOKEN_EXCHANGE_FAILED, details=details)


class NoNewerTagError(RegwatchError):
    """Filtering left no candidate tags."""

    def __init__(self) -> None:
        super().__init__("no newer tag found", code=ErrorCode.NO_NEWER_TAG)


class InvalidTagError(RegwatchError):
    """The current tag is not a version and cannot be used as a base."""

    def __init__(self, tag: str):
        super().__init__(
            f"tag is not a valid version: {tag}",
            code=ErrorCode.INVALID_TAG,
            details={"tag": tag},
        )


class InvalidResponseError(RegwatchError):
    """A registry response body could not be decoded."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, code=ErrorCode.INVALID_RESPONSE, details=details)


class MissingDigestError(RegwatchError):
    """A manifest HEAD response carried no docker-content-digest header."""

    def __init__(self, url: str):
        super().__init__(
            f"HEAD {url}: no docker-content-digest header",
            code=ErrorCode.MISSING_DIGEST,
            details={"url": url},
        )


class ConfigurationError(RegwatchError):
    """Configuration error."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, code=ErrorCode.CONFIG_ERROR, details=details)
