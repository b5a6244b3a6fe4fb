"""Unit tests for DockerImageSource and the default image builder."""

import json
import pytest
from unittest.mock import MagicMock, PropertyMock
from requests.exceptions import ChunkedEncodingError, ConnectionError

from imagetransports.config import RegistryConfig
from imagetransports.docker.image_source import DockerImageSource
from imagetransports.exceptions import (
    RegistryConnectionError,
    RegistryStatusError,
    RegistryValidationError,
    ResourceReleaseError,
)
from imagetransports.image.sourced import SourcedImage, from_source

MEDIA_TYPE = "application/vnd.docker.distribution.manifest.v2+json"


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def source(test_ref, client):
    return DockerImageSource(test_ref, RegistryConfig(), client=client)


class TestDockerImageSource:
    def test_get_manifest(self, source, client, response_factory, sample_manifest):
        response = response_factory(
            body=sample_manifest, headers={"Content-Type": f"{MEDIA_TYPE}; charset=utf-8"}
        )
        client.make_request.return_value = response

        blob, media_type = source.get_manifest()

        assert json.loads(blob) == sample_manifest
        assert media_type == MEDIA_TYPE
        args, kwargs = client.make_request.call_args
        assert args == ("GET", "/v2/library/test/manifests/latest")
        assert MEDIA_TYPE in kwargs["headers"]["Accept"]
        response.close.assert_called_once()

    def test_get_manifest_by_digest(self, source, client, response_factory):
        client.make_request.return_value = response_factory(body={})

        source.get_manifest("sha256:" + "f" * 64)

        assert client.make_request.call_args.args[1] == (
            "/v2/library/test/manifests/sha256:" + "f" * 64
        )

    def test_get_manifest_not_found(self, source, client, response_factory):
        response = response_factory(status_code=404)
        client.make_request.return_value = response

        with pytest.raises(RegistryStatusError) as exc_info:
            source.get_manifest()

        assert exc_info.value.status_code == 404
        response.close.assert_called_once()

    def test_get_blob(self, source, client, response_factory):
        client.make_request.return_value = response_factory(body=b"blob-bytes")

        assert source.get_blob("sha256:abc") == b"blob-bytes"
        client.make_request.assert_called_once_with("GET", "/v2/library/test/blobs/sha256:abc")

    def test_get_manifest_connection_lost(self, source, client, response_factory):
        response = response_factory(headers={"Content-Type": MEDIA_TYPE})
        type(response).content = PropertyMock(side_effect=ChunkedEncodingError("conn reset"))
        client.make_request.return_value = response

        with pytest.raises(RegistryConnectionError):
            source.get_manifest()

        response.close.assert_called_once()

    def test_get_blob_connection_lost(self, source, client, response_factory):
        response = response_factory()
        type(response).content = PropertyMock(side_effect=ConnectionError("reset by peer"))
        client.make_request.return_value = response

        with pytest.raises(RegistryConnectionError) as exc_info:
            source.get_blob("sha256:abc")

        assert "/v2/library/test/blobs/sha256:abc" in str(exc_info.value)
        response.close.assert_called_once()

    def test_close(self, source, client):
        source.close()
        client.close.assert_called_once()

    def test_close_failure(self, source, client):
        client.close.side_effect = OSError("boom")

        with pytest.raises(ResourceReleaseError):
            source.close()


class TestSourcedImage:
    def test_from_source(self, test_ref, sample_manifest):
        src = MagicMock()
        src.reference.return_value = test_ref
        blob = json.dumps(sample_manifest).encode()
        src.get_manifest.return_value = (blob, MEDIA_TYPE)

        img = from_source(RegistryConfig(), src)

        assert isinstance(img, SourcedImage)
        assert img.manifest() == (blob, MEDIA_TYPE)
        assert img.digest().startswith("sha256:")
        assert len(img.digest()) == len("sha256:") + 64

    def test_from_source_propagates_errors(self):
        src = MagicMock()
        src.get_manifest.side_effect = RegistryStatusError(404, "/v2/x/manifests/latest")

        with pytest.raises(RegistryStatusError):
            from_source(RegistryConfig(), src)

    def test_config_and_layers(self, sample_manifest):
        src = MagicMock()
        src.get_blob.return_value = b'{"architecture": "amd64"}'
        img = SourcedImage(src, json.dumps(sample_manifest).encode(), MEDIA_TYPE)

        assert img.config_blob() == b'{"architecture": "amd64"}'
        src.get_blob.assert_called_once_with("sha256:" + "a" * 64)
        layers = img.layer_infos()
        assert len(layers) == 1
        assert layers[0].size == 2811969

    def test_invalid_manifest(self, test_ref):
        src = MagicMock()
        src.reference.return_value = test_ref
        img = SourcedImage(src, b'{"layers": []}', MEDIA_TYPE)

        with pytest.raises(RegistryValidationError):
            img.parsed_manifest()

    def test_close_leaves_source_open(self):
        """Test that the image does not release a source it does not own."""
        src = MagicMock()
        img = SourcedImage(src, b"{}", MEDIA_TYPE)

        img.close()

        src.close.assert_not_called()
