"""Data models for regwatch."""

from regwatch.models.common import CheckError, ErrorCode
from regwatch.models.image import (
    DigestInfo,
    ImageReference,
    ImageResult,
    VersionInfo,
)
from regwatch.models.version import SelectionPolicy, UpdateType, Version

__all__ = [
    # Common
    "CheckError",
    "ErrorCode",
    # Image
    "DigestInfo",
    "ImageReference",
    "ImageResult",
    "VersionInfo",
    # Version
    "SelectionPolicy",
    "UpdateType",
    "Version",
]
