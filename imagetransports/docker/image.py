import threading
from typing import List, Optional

from imagetransports.config import RegistryConfig
from imagetransports.docker.image_source import DockerImageSource
from imagetransports.docker.reference import RepositoryReference
from imagetransports.docker.tags import get_repository_tags
from imagetransports.exceptions import ImageTransportError, ResourceReleaseError
from imagetransports.image.sourced import from_source
from imagetransports.logging_config import configure_module_logging

logger = configure_module_logging("docker.image")


class DockerImage:
    """Registry-backed image with Docker-specific extras.

    Everything not defined here (manifest(), digest(), config_blob(),
    layer_infos(), ...) is delegated to the wrapped generic image.
    The caller must close() the image, or use it as a context manager.
    """

    def __init__(self, image, src: DockerImageSource):
        self._image = image
        self.src = src
        self._closed = False

    def __getattr__(self, name):
        # Only called for attributes not found on DockerImage itself
        if name.startswith("__") or name == "_image":
            raise AttributeError(name)
        return getattr(self._image, name)

    def source_ref_full_name(self) -> str:
        """Fully expanded name of the repository this image is in."""
        return self.src.ref.name()

    def get_repository_tags(self, cancel: Optional[threading.Event] = None) -> List[str]:
        """
        List all tags available in the repository.

        This has no connection with the tag or digest used to open this image.
        Every call goes to the registry.
        """
        return get_repository_tags(
            self.src.c,
            self.src.ref,
            max_pages=self.src.config.max_pages,
            cancel=cancel,
        )

    def close(self):
        """Release the generic image and its source. Later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        image_error = None
        try:
            self._image.close()
        except Exception as e:
            logger.error(f"Failed to close image {self.src.ref}: {e}")
            image_error = e

        # The source belongs to this handle, not to the generic image
        try:
            self.src.close()
        except ResourceReleaseError as e:
            if image_error is None:
                raise
            logger.warning(f"Ignoring source close failure after image close failure: {e}")

        if isinstance(image_error, ResourceReleaseError):
            raise image_error
        if image_error is not None:
            raise ResourceReleaseError(
                f"Failed to close image {self.src.ref}: {image_error}"
            ) from image_error

    def __enter__(self):
        return self

    def __exit__(self, exec_type, exec_val, exec_tb):
        try:
            self.close()
        except ResourceReleaseError as e:
            if exec_val is None:
                raise
            # Keep the caller's exception
            logger.warning(f"Ignoring close failure after {exec_type.__name__}: {e}")


def new_image(
    ref: RepositoryReference,
    config: Optional[RegistryConfig] = None,
    image_builder=from_source,
) -> DockerImage:
    """
    Open a source for ref and wrap it as a DockerImage.

    Args:
        ref: Image reference
        config: Registry client configuration
        image_builder: Callable (config, source) -> generic image

    Returns:
        DockerImage; the caller must close it

    Raises:
        ImageTransportError: Whatever opening the source or building the image raises
    """
    config = config or RegistryConfig()
    src = DockerImageSource(ref, config)
    try:
        img = image_builder(config, src)
    except Exception:
        try:
            src.close()
        except ImageTransportError as close_error:
            logger.warning(f"Failed to close source for {ref} after build error: {close_error}")
        raise
    return DockerImage(img, src)
