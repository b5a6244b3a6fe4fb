"""Unit tests for Docker reference parsing."""

import pytest
from pydantic import ValidationError

from imagetransports.docker.reference import RepositoryReference, parse_reference
from imagetransports.exceptions import InvalidReferenceError

DIGEST = "sha256:" + "0123456789abcdef" * 4


class TestParseReference:
    def test_official_image_short_name(self):
        ref = parse_reference("busybox")
        assert ref.domain == "docker.io"
        assert ref.path == "library/busybox"
        assert ref.tag == "latest"
        assert ref.digest is None

    def test_repository_with_tag(self):
        ref = parse_reference("library/test:1.2")
        assert ref.name() == "docker.io/library/test"
        assert ref.tag == "1.2"

    def test_custom_domain_with_port(self):
        ref = parse_reference("localhost:5000/team/app:v1")
        assert ref.domain == "localhost:5000"
        assert ref.path == "team/app"
        assert ref.tag == "v1"

    def test_localhost_without_port(self):
        ref = parse_reference("localhost/app")
        assert ref.domain == "localhost"
        assert ref.path == "app"

    def test_legacy_docker_hub_domain(self):
        ref = parse_reference("index.docker.io/nginx")
        assert ref.name() == "docker.io/library/nginx"

    def test_digest_only(self):
        ref = parse_reference(f"quay.io/org/app@{DIGEST}")
        assert ref.digest == DIGEST
        assert ref.tag is None
        assert ref.tag_or_digest() == DIGEST

    def test_tag_and_digest(self):
        ref = parse_reference(f"quay.io/org/app:v1@{DIGEST}")
        assert ref.tag == "v1"
        assert ref.digest == DIGEST
        assert str(ref) == f"quay.io/org/app:v1@{DIGEST}"

    def test_no_default_tag(self):
        ref = parse_reference("busybox", default_tag=False)
        assert ref.tag is None
        assert ref.tag_or_digest() == "latest"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "Library/Test",
            "busybox:",
            "busybox:-bad",
            "busybox@sha256:short",
            "quay.io/org//app",
            "a" * 300,
        ],
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidReferenceError):
            parse_reference(value)


class TestRepositoryReference:
    def test_is_immutable(self, test_ref):
        with pytest.raises(ValidationError):
            test_ref.path = "other/repo"

    def test_full_name_excludes_tag(self):
        ref = RepositoryReference(domain="ghcr.io", path="org/app", tag="v2")
        assert ref.name() == "ghcr.io/org/app"
