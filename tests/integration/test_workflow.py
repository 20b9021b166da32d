"""Integration tests for end-to-end workflows."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from regwatch.cli.main import app
from regwatch.core.resolver import CheckRequest, UpdateResolver
from regwatch.models.common import ErrorCode
from regwatch.models.image import ImageReference
from regwatch.models.version import UpdateType, Version

HUB_TAGS = "https://registry-1.docker.io/v2/library/nginx/tags/list"
HUB_TOKEN = "https://auth.docker.io/token"


@pytest.fixture
def docker_hub(registry):
    """A Docker Hub lookalike: token auth, two pages of tags, manifests."""
    registry.add(
        "GET",
        "https://registry-1.docker.io/v2/",
        status=401,
        headers={
            "WWW-Authenticate": f'Bearer realm="{HUB_TOKEN}",service="registry.docker.io"',
        },
    )
    registry.add("GET", HUB_TOKEN, json={"token": "hub-token", "expires_in": 300})
    registry.add(
        "GET",
        HUB_TAGS,
        json={"name": "library/nginx", "tags": ["1.24", "1.25", "1.25.3", "latest", "stable"]},
        headers={"Link": '</v2/library/nginx/tags/list?last=stable&n=5>; rel="next"'},
    )
    registry.add(
        "GET",
        f"{HUB_TAGS}?last=stable&n=5",
        json={"name": "library/nginx", "tags": ["1.26", "1.26.1", "mainline", "2.0"]},
        headers={"Link": '</v2/library/nginx/tags/list?last=2.0&n=0>; rel="next"'},
    )
    registry.add(
        "HEAD",
        "https://registry-1.docker.io/v2/library/nginx/manifests/1.26",
        headers={"Docker-Content-Digest": "sha256:new"},
    )
    return registry


class TestDockerHubWorkflow:
    """Integration tests against a token-protected, paginated registry."""

    def test_newer_version_across_pages(self, docker_hub, transport):
        """Test a newer major.minor tag on the second page is found."""
        reference = ImageReference.parse("nginx:1.25")

        result = UpdateResolver(transport=transport).check_reference(reference)

        assert result.success
        assert result.version_info.latest_remote_tag == Version(major=2, minor=0)
        assert result.version_info.format_str == "v2.0"

        page_requests = docker_hub.requests_to(HUB_TAGS)
        assert len(page_requests) == 2
        assert all(r.headers["authorization"] == "Bearer hub-token" for r in page_requests)
        token_request = docker_hub.requests_to(HUB_TOKEN)[0]
        assert token_request.url.params["service"] == "registry.docker.io"
        assert token_request.url.params["scope"] == "repository:library/nginx:pull"

    def test_ignore_major(self, docker_hub, transport):
        """Test ignoring major updates stays on the 1.x line."""
        reference = ImageReference.parse("nginx:1.25")

        result = UpdateResolver(transport=transport).check_reference(
            reference, ignore_update_type=UpdateType.MAJOR
        )

        assert result.version_info.latest_remote_tag == Version(major=1, minor=26)

    def test_rebuilt_tag(self, docker_hub, transport):
        """Test a current tag that was re-pushed is reported through its digest."""
        reference = ImageReference.parse("docker.io/library/nginx:1.26")

        result = UpdateResolver(transport=transport).check_reference(
            reference, ["docker.io/library/nginx@sha256:old"], ignore_update_type=UpdateType.MINOR
        )

        assert result.success
        assert result.version_info.latest_remote_tag is None
        assert result.digest_info.remote_digest == "sha256:new"
        assert result.digest_info.changed
        assert result.has_update

    def test_cli_json(self, docker_hub, transport, tmp_path, monkeypatch):
        """Test the check command end to end with JSON output."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

        with patch("regwatch.core.resolver.HttpxTransport", return_value=transport):
            result = CliRunner().invoke(app, ["check", "nginx:1.25", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["reference"]["registry"] == "docker.io"
        assert data["version_info"]["latest_remote_tag"] == {"major": 2, "minor": 0, "patch": None}


class TestBatchWorkflow:
    """Integration tests for checking several images at once."""

    def test_mixed_registries(self, docker_hub, transport):
        """Test images on different registries are checked independently."""
        docker_hub.add("GET", "https://ghcr.io/v2/", status=200)
        docker_hub.add(
            "GET",
            "https://ghcr.io/v2/owner/app/tags/list",
            json={"tags": ["v1.0.0", "v1.0.1", "v1.1.0"]},
        )
        requests = [
            CheckRequest(reference=ImageReference.parse("nginx:1.25")),
            CheckRequest(
                reference=ImageReference.parse("ghcr.io/owner/app:v1.0.0"),
                ignore_update_type=UpdateType.MINOR,
            ),
            CheckRequest(reference=ImageReference.parse("ghcr.io/owner/missing:1.0.0")),
        ]

        results = UpdateResolver(transport=transport).check_many(requests)

        assert results[0].version_info.latest_remote_tag == Version(major=2, minor=0)
        assert results[1].version_info.latest_remote_tag == Version(major=1, minor=0, patch=1)
        assert results[2].error.code == ErrorCode.NOT_FOUND
        assert len(docker_hub.requests_to(HUB_TOKEN)) == 1
        assert docker_hub.requests_to("https://ghcr.io/token") == []
