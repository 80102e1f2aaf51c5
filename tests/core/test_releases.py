"""
Unit tests for latest release lookup.

Tests use mocked HTTP responses.
"""

import pytest
import requests
import responses

from twlauncher.core.exceptions import (
    DownloadCancelledError,
    HttpError,
    VersionResolutionError,
)
from twlauncher.core.releases import LATEST_VERSION_URL, ReleaseResolver
from twlauncher.core.retry import Deadline


class TestResolveLatest:
    """Test ReleaseResolver.resolve_latest()."""

    @responses.activate
    def test_returns_tag(self):
        responses.add(
            responses.GET,
            LATEST_VERSION_URL,
            json={"tag_name": "v4.0.0", "name": "v4.0.0"},
            status=200,
        )

        assert ReleaseResolver().resolve_latest() == "v4.0.0"
        assert responses.calls[0].request.headers["Accept"] == (
            "application/vnd.github+json"
        )

    @responses.activate
    def test_tag_returned_verbatim(self):
        responses.add(
            responses.GET, LATEST_VERSION_URL, json={"tag_name": "4.1.0-beta.1"}
        )
        assert ReleaseResolver().resolve_latest() == "4.1.0-beta.1"

    @responses.activate
    @pytest.mark.parametrize("status", [204, 304, 403, 404, 500, 503])
    def test_error_status(self, status):
        responses.add(responses.GET, LATEST_VERSION_URL, status=status)

        with pytest.raises(HttpError, match="failed to get the resource"):
            ReleaseResolver().resolve_latest()

    @responses.activate
    def test_connection_error(self):
        responses.add(
            responses.GET,
            LATEST_VERSION_URL,
            body=requests.exceptions.ConnectionError("Network unreachable"),
        )

        with pytest.raises(HttpError) as exc_info:
            ReleaseResolver().resolve_latest()

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    @responses.activate
    def test_invalid_json(self):
        responses.add(responses.GET, LATEST_VERSION_URL, body="<html>", status=200)

        with pytest.raises(VersionResolutionError, match="Invalid JSON"):
            ReleaseResolver().resolve_latest()

    @responses.activate
    @pytest.mark.parametrize("payload", [{}, {"tag_name": ""}, {"tag_name": 4}, []])
    def test_missing_tag(self, payload):
        responses.add(responses.GET, LATEST_VERSION_URL, json=payload)

        with pytest.raises(VersionResolutionError, match="no tag_name"):
            ReleaseResolver().resolve_latest()

    @responses.activate
    def test_custom_endpoint(self):
        url = "https://mirror.example.com/latest"
        responses.add(responses.GET, url, json={"tag_name": "v3.4.17"})

        assert ReleaseResolver(latest_version_url=url).resolve_latest() == "v3.4.17"

    @responses.activate
    def test_cancelled_before_request(self):
        deadline = Deadline.never()
        deadline.cancel()

        with pytest.raises(DownloadCancelledError):
            ReleaseResolver().resolve_latest(deadline)

        assert len(responses.calls) == 0


@pytest.mark.integration
class TestResolveLatestIntegration:
    """Query the real GitHub API."""

    def test_real_latest(self):
        tag = ReleaseResolver().resolve_latest()
        assert tag.startswith("v")
