"""Unit tests for configuration models and YAML loading."""

import pytest
from pydantic import ValidationError

from imagetransports.config import RegistryConfig, TransportsConfig, load_config
from imagetransports.exceptions import ImageTransportError


class TestRegistryConfig:
    def test_defaults(self):
        config = RegistryConfig()
        assert config.timeout == 10
        assert config.max_retries == 3
        assert config.max_pages is None
        assert config.verify_tls is True
        assert config.insecure_registries == []

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            RegistryConfig(timeout=0)

    def test_rejects_non_positive_page_limit(self):
        with pytest.raises(ValidationError):
            RegistryConfig(max_pages=0)


class TestLoadConfig:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            """
registry:
  timeout: 30
  max_pages: 50
  insecure_registries:
    - localhost:5000
disabled_transports:
  - docker
"""
        )

        config = load_config(path)

        assert config.registry.timeout == 30
        assert config.registry.max_pages == 50
        assert config.registry.insecure_registries == ["localhost:5000"]
        assert config.disabled_transports == ["docker"]

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("IMAGETRANSPORTS_DISABLED_TRANSPORTS", raising=False)

        config = load_config(tmp_path / "missing.yaml")

        assert config == TransportsConfig()

    def test_empty_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("IMAGETRANSPORTS_DISABLED_TRANSPORTS", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == TransportsConfig()

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("registry:\n  timeout: 3\n")
        monkeypatch.setenv("IMAGETRANSPORTS_CONFIG", str(path))

        assert load_config().registry.timeout == 3

    def test_disabled_transports_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("disabled_transports: [docker]\n")
        monkeypatch.setenv("IMAGETRANSPORTS_DISABLED_TRANSPORTS", "docker, oci-archive,")

        config = load_config(path)

        assert config.disabled_transports == ["docker", "oci-archive"]

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("registry: [unclosed\n")

        with pytest.raises(ImageTransportError):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("registry:\n  timeout: -1\n")

        with pytest.raises(ImageTransportError):
            load_config(path)
