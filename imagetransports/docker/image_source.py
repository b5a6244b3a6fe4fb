from typing import Optional, Tuple

from requests.exceptions import RequestException

from imagetransports.config import RegistryConfig
from imagetransports.docker.client import DockerClient
from imagetransports.docker.reference import RepositoryReference
from imagetransports.exceptions import (
    RegistryConnectionError,
    RegistryStatusError,
    ResourceReleaseError,
)
from imagetransports.logging_config import configure_module_logging

logger = configure_module_logging("docker.image_source")

MANIFEST_MEDIA_TYPES = [
    "application/vnd.oci.image.manifest.v1+json",
    "application/vnd.oci.image.index.v1+json",
    "application/vnd.docker.distribution.manifest.v2+json",
    "application/vnd.docker.distribution.manifest.list.v2+json",
    "application/vnd.docker.distribution.manifest.v1+prettyjws",
]


def _read_body(response, path: str) -> bytes:
    # Body is streamed, so the connection can still fail here
    try:
        return response.content
    except RequestException as e:
        logger.error(f"Reading response for {path} failed: {e}")
        raise RegistryConnectionError(f"Reading response for {path} failed: {e}") from e


class DockerImageSource:
    """Source handle for one image on a registry.

    Owns the DockerClient used for all requests made on its behalf,
    including tag listing.
    """

    def __init__(
        self,
        ref: RepositoryReference,
        config: Optional[RegistryConfig] = None,
        client: Optional[DockerClient] = None,
    ):
        self.ref = ref
        self.config = config or RegistryConfig()
        self.c = client or DockerClient(ref.domain, self.config)

    def reference(self) -> RepositoryReference:
        return self.ref

    def get_manifest(self, instance_digest: Optional[str] = None) -> Tuple[bytes, str]:
        """
        Fetch the raw manifest of this image

        Args:
            instance_digest: Fetch this digest instead of the reference's tag/digest

        Returns:
            (manifest bytes, media type)
        """
        path = f"/v2/{self.ref.path}/manifests/{instance_digest or self.ref.tag_or_digest()}"
        logger.debug(f"Fetching manifest from: {path}")
        headers = {"Accept": ", ".join(MANIFEST_MEDIA_TYPES)}
        response = self.c.make_request("GET", path, headers=headers)
        try:
            if response.status_code != 200:
                logger.error(f"Manifest fetch for {path} returned status {response.status_code}")
                raise RegistryStatusError(response.status_code, path)
            media_type = response.headers.get("Content-Type", "").split(";")[0].strip()
            return _read_body(response, path), media_type
        finally:
            response.close()

    def get_blob(self, digest: str) -> bytes:
        """Get blob content by digest"""
        path = f"/v2/{self.ref.path}/blobs/{digest}"
        logger.debug(f"Fetching blob from: {path}")
        response = self.c.make_request("GET", path)
        try:
            if response.status_code != 200:
                logger.error(f"Blob fetch for {path} returned status {response.status_code}")
                raise RegistryStatusError(response.status_code, path)
            return _read_body(response, path)
        finally:
            response.close()

    def close(self):
        """Release the underlying client session"""
        try:
            self.c.close()
        except Exception as e:
            logger.error(f"Failed to close source for {self.ref}: {e}")
            raise ResourceReleaseError(f"Failed to close source for {self.ref}: {e}") from e
