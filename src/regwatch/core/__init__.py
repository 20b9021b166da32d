"""Core update-checking logic."""

from regwatch.core.resolver import CheckRequest, UpdateResolver, check

__all__ = ["CheckRequest", "UpdateResolver", "check"]
