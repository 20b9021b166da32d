"""Image-related data models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from regwatch.models.common import CheckError
from regwatch.models.version import Version

DEFAULT_REGISTRY = "docker.io"

# Hostnames whose API lives somewhere other than the name users type
REGISTRY_API_HOSTS = {
    "docker.io": "registry-1.docker.io",
    "index.docker.io": "registry-1.docker.io",
}


class ImageReference(BaseModel):
    """Identifies the image being checked."""

    model_config = {"frozen": True}

    registry: str = Field(description="Registry hostname (e.g., 'ghcr.io')")
    repository: str = Field(description="Repository path (e.g., 'owner/name')")
    tag: str = Field(description="Image tag")

    @property
    def api_host(self) -> str:
        """Host serving the registry API for this reference."""
        return REGISTRY_API_HOSTS.get(self.registry, self.registry)

    def __str__(self) -> str:
        return f"{self.registry}/{self.repository}:{self.tag}"

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """Parse a reference like 'ghcr.io/owner/name:1.2.3'.

        The registry defaults to Docker Hub, where single-segment names
        live under ``library/``. The tag defaults to ``latest``. Digest
        references (``@sha256:...``) are not accepted since there is no
        tag to compare.
        """
        if "@" in reference:
            raise ValueError(f"Digest references have no tag to check: {reference}")

        tag = "latest"
        name = reference
        last_segment = reference.rsplit("/", 1)[-1]
        if ":" in last_segment:
            name, tag = reference.rsplit(":", 1)

        parts = name.split("/")
        if len(parts) > 1 and ("." in parts[0] or ":" in parts[0] or parts[0] == "localhost"):
            registry = parts[0]
            repository = "/".join(parts[1:])
        else:
            registry = DEFAULT_REGISTRY
            repository = name

        if not repository or not tag:
            raise ValueError(f"Invalid image reference: {reference}")

        if registry in REGISTRY_API_HOSTS and "/" not in repository:
            repository = f"library/{repository}"

        return cls(registry=registry, repository=repository, tag=tag)


def strip_reference(digest: str) -> str:
    """Reduce 'host/repo@sha256:abc' to 'sha256:abc'."""
    return digest.rsplit("@", 1)[-1]


class DigestInfo(BaseModel):
    """Locally deployed digests and the digest the registry reports."""

    model_config = {"frozen": True}

    local_digests: frozenset[str] = Field(
        default_factory=frozenset,
        description="Digests currently deployed, bare or as full references",
    )
    remote_digest: str | None = Field(
        default=None,
        description="docker-content-digest reported by the registry",
    )

    @property
    def changed(self) -> bool:
        """Whether the remote digest is known and differs from every local one."""
        if self.remote_digest is None:
            return False
        local = {strip_reference(d) for d in self.local_digests}
        return self.remote_digest not in local


class VersionInfo(BaseModel):
    """Current version and the newest acceptable remote version."""

    model_config = {"frozen": True}

    current_tag: Version = Field(description="Version parsed from the current tag")
    latest_remote_tag: Version | None = Field(
        default=None,
        description="Newer version found in the registry, if any",
    )

    @property
    def format_str(self) -> str | None:
        if self.latest_remote_tag is None:
            return None
        return self.latest_remote_tag.format(prefix="v")


class ImageResult(BaseModel):
    """Outcome of checking one image."""

    model_config = {"frozen": True}

    reference: ImageReference = Field(description="Image that was checked")
    digest_info: DigestInfo | None = Field(default=None, description="Digest comparison")
    version_info: VersionInfo | None = Field(default=None, description="Version comparison")
    error: CheckError | None = Field(default=None, description="Failure, if any")

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def has_update(self) -> bool:
        """A newer version exists or the current tag's content changed."""
        if self.version_info and self.version_info.latest_remote_tag is not None:
            return True
        return bool(self.digest_info and self.digest_info.changed)
