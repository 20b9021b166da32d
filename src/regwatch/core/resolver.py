"""UpdateResolver for registry update checks."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from pydantic import BaseModel, Field

from regwatch.models.image import DigestInfo, ImageReference, ImageResult, VersionInfo
from regwatch.models.version import SelectionPolicy, UpdateType, Version
from regwatch.registry.auth import AuthNegotiator
from regwatch.registry.base import Transport
from regwatch.registry.digest import DigestChecker
from regwatch.registry.tags import TagLister
from regwatch.registry.transport import HttpxTransport
from regwatch.utils.config import RegistryConfig, RegwatchConfig
from regwatch.utils.errors import InvalidTagError, NoNewerTagError, RegwatchError
from regwatch.utils.logging import CheckLogger, get_check_logger
from regwatch.utils.version import parse_version


class CheckRequest(BaseModel):
    """One image to check in a batch."""

    model_config = {"frozen": True}

    reference: ImageReference = Field(description="Image to check")
    local_digests: frozenset[str] = Field(
        default_factory=frozenset,
        description="Digests currently deployed",
    )
    ignore_update_type: UpdateType = Field(
        default=UpdateType.NONE,
        description="Granularity of change to ignore",
    )


class UpdateResolver:
    """Resolver answering whether an image has an update.

    A check probes the registry for an auth challenge, exchanges
    credentials for a token when one is required, lists and filters the
    repository's tags, and either reports a newer version or compares the
    current tag's digest. Registry problems never raise; they end up in
    ``ImageResult.error``.

    Example:
        resolver = UpdateResolver()
        result = resolver.check(
            "ghcr.io",
            "owner",
            "name",
            "1.4.2",
            local_digests=["sha256:..."],
            ignore_update_type=UpdateType.MAJOR,
        )

        if result.success and result.has_update:
            print(result.version_info.latest_remote_tag)
    """

    def __init__(
        self,
        transport: Transport | None = None,
        config: RegwatchConfig | None = None,
        policy: SelectionPolicy | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            transport: Transport for registry requests; an HttpxTransport by default
            config: Settings; defaults apply when None
            policy: Selection policy overriding the configured one
        """
        self._config = config or RegwatchConfig()
        self._policy = policy or self._config.check.policy

        http = self._config.http
        self._transport = transport or HttpxTransport(
            timeout=http.timeout, max_retries=http.max_retries
        )
        self._auth = AuthNegotiator(self._transport, timeout=http.timeout)
        self._tags = TagLister(self._transport, timeout=http.timeout)
        self._digests = DigestChecker(self._transport, timeout=http.timeout)

    @property
    def policy(self) -> SelectionPolicy:
        return self._policy

    def check(
        self,
        registry: str,
        owner: str,
        repo: str,
        tag: str,
        local_digests: Iterable[str] = (),
        ignore_update_type: UpdateType = UpdateType.NONE,
        registry_config: RegistryConfig | None = None,
    ) -> ImageResult:
        """Check one image for a newer version or a changed digest.

        Args:
            registry: Registry hostname (e.g., "ghcr.io")
            owner: Repository owner
            repo: Repository name
            tag: Tag currently in use
            local_digests: Digests currently deployed
            ignore_update_type: Granularity of change to ignore
            registry_config: Settings for this registry, overriding the configured ones

        Returns:
            ImageResult with version and digest information, or an error
        """
        reference = ImageReference(registry=registry, repository=f"{owner}/{repo}", tag=tag)
        return self.check_reference(reference, local_digests, ignore_update_type, registry_config)

    def check_reference(
        self,
        reference: ImageReference,
        local_digests: Iterable[str] = (),
        ignore_update_type: UpdateType = UpdateType.NONE,
        registry_config: RegistryConfig | None = None,
    ) -> ImageResult:
        """Check an already-built image reference. See :meth:`check`."""
        result = self._new_result(reference, local_digests)
        log = get_check_logger(__name__, image=str(reference))
        config = registry_config or self._config.registry_for(reference.registry)

        try:
            base = self._parse_base(reference.tag)
            token = self._authenticate(reference.api_host, config, [reference.repository])
        except RegwatchError as e:
            log.warning("Check failed: %s", e.message)
            return result.model_copy(update={"error": e.to_check_error()})

        return self._check_with_token(result, base, ignore_update_type, config, token, log)

    def check_many(self, requests: Iterable[CheckRequest]) -> list[ImageResult]:
        """Check several images, one token per registry.

        Images are grouped by registry API host, so aliases such as
        ``docker.io`` and ``index.docker.io`` share a group. Each group is
        probed once and gets a single token scoped to every repository in
        it. Groups run in parallel.

        Args:
            requests: Images to check

        Returns:
            One ImageResult per request, in request order
        """
        requests = list(requests)
        if not requests:
            return []

        groups: dict[str, list[int]] = {}
        for index, request in enumerate(requests):
            groups.setdefault(request.reference.api_host, []).append(index)

        results: list[ImageResult | None] = [None] * len(requests)
        with ThreadPoolExecutor(max_workers=self._config.check.max_workers) as executor:
            futures = {
                executor.submit(self._check_group, [requests[i] for i in indexes]): indexes
                for indexes in groups.values()
            }
            for future, indexes in futures.items():
                for index, result in zip(indexes, future.result()):
                    results[index] = result

        return [r for r in results if r is not None]

    def _check_group(self, requests: list[CheckRequest]) -> list[ImageResult]:
        """Check images that share a registry API host."""
        host = requests[0].reference.api_host
        config = self._config.registry_for(requests[0].reference.registry)
        repositories = list(dict.fromkeys(r.reference.repository for r in requests))
        log = get_check_logger(__name__, registry=host)

        try:
            token = self._authenticate(host, config, repositories)
        except RegwatchError as e:
            log.warning("Authentication failed for %d images: %s", len(requests), e.message)
            error = e.to_check_error()
            return [
                self._new_result(r.reference, r.local_digests).model_copy(update={"error": error})
                for r in requests
            ]

        results = []
        for request in requests:
            result = self._new_result(request.reference, request.local_digests)
            image_log = get_check_logger(__name__, image=str(request.reference))
            try:
                base = self._parse_base(request.reference.tag)
            except RegwatchError as e:
                image_log.warning("Check failed: %s", e.message)
                results.append(result.model_copy(update={"error": e.to_check_error()}))
                continue
            results.append(
                self._check_with_token(
                    result, base, request.ignore_update_type, config, token, image_log
                )
            )
        return results

    @staticmethod
    def _new_result(reference: ImageReference, local_digests: Iterable[str]) -> ImageResult:
        return ImageResult(
            reference=reference,
            digest_info=DigestInfo(local_digests=frozenset(local_digests)),
        )

    @staticmethod
    def _parse_base(tag: str) -> Version:
        base = parse_version(tag)
        if base is None:
            raise InvalidTagError(tag)
        return base

    def _authenticate(
        self,
        host: str,
        config: RegistryConfig,
        repositories: list[str],
    ) -> str | None:
        """Get a token if the registry asks for one."""
        challenge = self._auth.probe(host, config.insecure)
        if challenge is None:
            return None
        return self._auth.exchange(
            challenge.realm,
            repositories,
            credentials=config.credentials,
            service=challenge.service,
        )

    def _check_with_token(
        self,
        result: ImageResult,
        base: Version,
        ignore_update_type: UpdateType,
        config: RegistryConfig,
        token: str | None,
        log: CheckLogger,
    ) -> ImageResult:
        """List candidates and resolve the verdict once auth is settled."""
        reference = result.reference

        try:
            candidates = self._tags.list_tags(
                reference.api_host,
                reference.repository,
                token,
                base,
                ignore_update_type=ignore_update_type,
                insecure=config.insecure,
                max_pages=self._config.check.max_pages,
            )
            if not candidates:
                raise NoNewerTagError()
        except RegwatchError as e:
            log.warning("Check failed: %s", e.message)
            return result.model_copy(update={"error": e.to_check_error()})

        newer = self.select(candidates, base, self._policy)
        result = result.model_copy(
            update={"version_info": VersionInfo(current_tag=base, latest_remote_tag=newer)}
        )

        if newer is not None:
            log.info("Update available: %s -> %s", base, newer)
            return result

        # Same version: look for a rebuild of the current tag
        try:
            remote_digest = self._digests.check_digest(
                reference.api_host,
                reference.repository,
                reference.tag,
                token,
                insecure=config.insecure,
            )
        except RegwatchError as e:
            log.warning("Digest check failed: %s", e.message)
            return result.model_copy(update={"error": e.to_check_error()})

        digest_info = (result.digest_info or DigestInfo()).model_copy(
            update={"remote_digest": remote_digest}
        )
        result = result.model_copy(update={"digest_info": digest_info})
        if digest_info.changed:
            log.info("Digest changed for %s: %s", reference.tag, remote_digest)
        else:
            log.info("Up to date")
        return result

    @staticmethod
    def select(
        candidates: list[Version],
        base: Version,
        policy: SelectionPolicy = SelectionPolicy.LATEST,
    ) -> Version | None:
        """Pick the version to report from filtered candidates.

        LATEST returns the highest candidate when it is newer than the base.
        FIRST trusts registry order and returns the first candidate that
        differs from the base.

        Returns:
            The newer version, or None when the base is still current
        """
        if policy == SelectionPolicy.FIRST:
            return next((v for v in candidates if v != base), None)

        if not candidates:
            return None
        latest = max(candidates, key=lambda v: v.sort_key)
        return latest if latest.is_newer_than(base) else None


def check(
    registry: str,
    owner: str,
    repo: str,
    tag: str,
    local_digests: Iterable[str] = (),
    ignore_update_type: UpdateType = UpdateType.NONE,
    registry_config: RegistryConfig | None = None,
) -> ImageResult:
    """Check one image with a default resolver. See :meth:`UpdateResolver.check`."""
    return UpdateResolver().check(
        registry,
        owner,
        repo,
        tag,
        local_digests,
        ignore_update_type=ignore_update_type,
        registry_config=registry_config,
    )
