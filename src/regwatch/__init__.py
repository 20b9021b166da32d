"""regwatch: find newer versions of container images in Registry v2 APIs.

This package checks an image reference against its registry and reports
whether a newer tag is available or, when the tag is current, whether its
content digest changed since it was deployed:

- **Auth negotiation**: anonymous access, or a bearer token obtained with
  optional Basic credentials
- **Tag listing**: paginated listing with version-aware filtering
- **Digest checks**: manifest digest comparison for same-tag rebuilds

Usage:
    from regwatch import UpdateResolver, UpdateType

    resolver = UpdateResolver()
    result = resolver.check(
        "ghcr.io", "owner", "name", "1.4.2",
        local_digests=["sha256:..."],
        ignore_update_type=UpdateType.MAJOR,
    )
    if result.has_update:
        print(result.version_info.latest_remote_tag)

CLI:
    regwatch check ghcr.io/owner/name:1.4.2 --digest sha256:...
"""

__version__ = "0.1.0"

from regwatch.core.resolver import CheckRequest, UpdateResolver, check

from regwatch.models.common import CheckError, ErrorCode
from regwatch.models.image import DigestInfo, ImageReference, ImageResult, VersionInfo
from regwatch.models.version import SelectionPolicy, UpdateType, Version

from regwatch.registry.base import Transport
from regwatch.registry.transport import HttpxTransport

from regwatch.utils.config import RegistryConfig, RegwatchConfig, load_config

__all__ = [
    # Version
    "__version__",
    # Core
    "CheckRequest",
    "UpdateResolver",
    "check",
    # Models
    "CheckError",
    "ErrorCode",
    "DigestInfo",
    "ImageReference",
    "ImageResult",
    "VersionInfo",
    "SelectionPolicy",
    "UpdateType",
    "Version",
    # Registry
    "Transport",
    "HttpxTransport",
    # Config
    "RegistryConfig",
    "RegwatchConfig",
    "load_config",
]
