"""Shared fixtures for tests."""

import json
import pytest
from unittest.mock import MagicMock
from requests.structures import CaseInsensitiveDict

from imagetransports.docker.reference import RepositoryReference


def make_response(status_code=200, body=None, headers=None, json_error=None):
    """Build a MagicMock shaped like a streamed requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    if isinstance(body, (bytes, str)):
        response.content = body.encode() if isinstance(body, str) else body
    else:
        response.content = json.dumps(body).encode() if body is not None else b""
    return response


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def executor():
    """Request executor whose make_request returns queued responses."""
    mock = MagicMock()
    mock.make_request.side_effect = []
    return mock


@pytest.fixture
def test_ref() -> RepositoryReference:
    return RepositoryReference(domain="docker.io", path="library/test", tag="latest")


@pytest.fixture
def sample_manifest() -> dict:
    return {
        "schemaVersion": 2,
        "mediaType": "application/vnd.docker.distribution.manifest.v2+json",
        "config": {
            "mediaType": "application/vnd.docker.container.image.v1+json",
            "digest": "sha256:" + "a" * 64,
            "size": 1469,
        },
        "layers": [
            {
                "mediaType": "application/vnd.docker.image.rootfs.diff.tar.gzip",
                "digest": "sha256:" + "b" * 64,
                "size": 2811969,
            }
        ],
    }
