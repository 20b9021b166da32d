"""Version data models."""

from enum import Enum

from pydantic import BaseModel, Field


class UpdateType(str, Enum):
    """Granularity of version change the caller wants to ignore.

    MINOR, for example, keeps only candidates within the same
    major.minor line, so only patch bumps are reported.
    """

    NONE = "none"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class SelectionPolicy(str, Enum):
    """How the newest version is picked from the filtered listing."""

    LATEST = "latest"  # highest version among candidates
    FIRST = "first"  # first candidate in registry order that differs from the base


class Version(BaseModel):
    """A version parsed from an image tag.

    Minor and patch are optional so that partial tags such as ``4`` or
    ``4.0`` keep their shape. Two versions are only comparable when their
    shapes match.
    """

    model_config = {"frozen": True}

    major: int = Field(ge=0, description="Major version")
    minor: int | None = Field(default=None, ge=0, description="Minor version, if present")
    patch: int | None = Field(default=None, ge=0, description="Patch version, if present")

    @property
    def shape(self) -> tuple[bool, bool]:
        """Which of minor and patch are defined."""
        return (self.minor is not None, self.patch is not None)

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.major, self.minor or 0, self.patch or 0)

    def same_shape(self, other: "Version") -> bool:
        return self.shape == other.shape

    def is_newer_than(self, other: "Version") -> bool:
        return self.sort_key > other.sort_key

    def format(self, prefix: str = "") -> str:
        """Render the defined components, e.g. ``1.4`` or ``v1.4.2``."""
        parts = [self.major, self.minor, self.patch]
        return prefix + ".".join(str(p) for p in parts if p is not None)

    def __str__(self) -> str:
        return self.format()
