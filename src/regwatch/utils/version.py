"""Tag-to-version parsing."""

from __future__ import annotations

import re

from packaging.version import InvalidVersion
from packaging.version import Version as PackagingVersion

from regwatch.models.version import Version

# Semantic version core with optional pre-release and build metadata,
# minor and patch optional so partial tags keep their shape
_SEMVER_RE = re.compile(
    r"^v?(\d+)(?:\.(\d+)(?:\.(\d+))?)?(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$"
)


def parse_version(tag: str) -> Version | None:
    """Parse an image tag into a Version.

    Tags are read as semantic versions first: a leading ``v`` is accepted
    and pre-release and build suffixes are discarded, so ``1.2.3-alpine``,
    ``1.2.3-rc.1`` and ``1.2.3+build.7`` all parse to ``1.2.3``. Tags that
    are not semver but are PEP 440 releases (``1.2.3rc1``) are accepted
    too, unless they carry an epoch or more than three release components.

    Args:
        tag: Tag string as listed by the registry

    Returns:
        The parsed version, or None if the tag is not a version
    """
    match = _SEMVER_RE.match(tag)
    if match:
        major, minor, patch = match.groups()
        return Version(
            major=int(major),
            minor=int(minor) if minor is not None else None,
            patch=int(patch) if patch is not None else None,
        )

    try:
        parsed = PackagingVersion(tag)
    except InvalidVersion:
        return None

    release = parsed.release
    if parsed.epoch or len(release) > 3:
        return None

    return Version(
        major=release[0],
        minor=release[1] if len(release) > 1 else None,
        patch=release[2] if len(release) > 2 else None,
    )


def is_valid(tag: str) -> bool:
    """Whether a tag parses as a version."""
    return parse_version(tag) is not None
