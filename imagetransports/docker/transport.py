from typing import Optional

from imagetransports.config import RegistryConfig
from imagetransports.docker.image import DockerImage, new_image
from imagetransports.docker.image_source import DockerImageSource
from imagetransports.docker.reference import RepositoryReference, parse_reference
from imagetransports.exceptions import InvalidReferenceError
from imagetransports.image.sourced import from_source
from imagetransports.transports.base import ImageTransport


class DockerTransport(ImageTransport):
    """Transport for images on a registry speaking the Docker Registry HTTP API v2"""

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()

    @property
    def name(self) -> str:
        return "docker"

    def parse_reference(self, reference: str) -> RepositoryReference:
        """Parse "//busybox:latest" style references"""
        if not reference.startswith("//"):
            raise InvalidReferenceError(
                f"docker: image reference {reference!r} does not start with '//'"
            )
        return parse_reference(reference[2:])

    def open_source(self, reference: RepositoryReference) -> DockerImageSource:
        return DockerImageSource(reference, self.config)

    def open_image(self, reference: RepositoryReference, image_builder=None) -> DockerImage:
        return new_image(reference, self.config, image_builder or from_source)
