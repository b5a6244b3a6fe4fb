"""
Generic image built on top of an image source.

from_source() is the default image builder handed to transports. Any
callable taking (config, source) and returning an object with close() can
be used instead.
"""

import hashlib
from typing import List, Optional, Tuple

from pydantic import ValidationError

from imagetransports.config import RegistryConfig
from imagetransports.docker.models import ManifestDescriptor, ManifestResponse
from imagetransports.exceptions import RegistryValidationError
from imagetransports.logging_config import configure_module_logging

logger = configure_module_logging("image")


class SourcedImage:
    """Image whose manifest, config and layers come from a source handle.

    The source stays owned by whoever opened it; close() leaves it open.
    """

    def __init__(self, source, manifest_blob: bytes, media_type: str):
        self.src = source
        self._manifest_blob = manifest_blob
        self._media_type = media_type
        self._parsed: Optional[ManifestResponse] = None

    def reference(self):
        return self.src.reference()

    def manifest(self) -> Tuple[bytes, str]:
        """Raw manifest bytes and media type"""
        return self._manifest_blob, self._media_type

    def parsed_manifest(self) -> ManifestResponse:
        if self._parsed is None:
            try:
                self._parsed = ManifestResponse.model_validate_json(self._manifest_blob)
            except ValidationError as e:
                logger.error(f"Invalid manifest for {self.reference()}: {e}")
                raise RegistryValidationError(f"Invalid manifest format: {e}") from e
        return self._parsed

    def digest(self) -> str:
        """Calculate SHA256 digest of the raw manifest"""
        return f"sha256:{hashlib.sha256(self._manifest_blob).hexdigest()}"

    def config_blob(self) -> Optional[bytes]:
        config = self.parsed_manifest().config
        if config is None:
            return None
        return self.src.get_blob(config.digest)

    def layer_infos(self) -> List[ManifestDescriptor]:
        return list(self.parsed_manifest().layers)

    def close(self):
        self._parsed = None


def from_source(config: RegistryConfig, source) -> SourcedImage:
    """
    Build a generic image from a source handle.

    The manifest is fetched immediately, so this fails if the image does not
    exist. The caller keeps ownership of source when this raises.
    """
    manifest_blob, media_type = source.get_manifest()
    logger.debug(f"Built image for {source.reference()} ({media_type})")
    return SourcedImage(source, manifest_blob, media_type)
