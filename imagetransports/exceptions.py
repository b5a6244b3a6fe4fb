"""
Image transport exceptions

Provides a hierarchy of exceptions for the registry client and the
transport registry, so callers can tell which stage of an operation failed.
"""

from typing import List, Optional


class ImageTransportError(Exception):
    """Base exception for all image transport operations"""

    pass


class RegistryError(ImageTransportError):
    """Base exception for registry HTTP operations"""

    pass


class RegistryConnectionError(RegistryError):
    """Registry connection failed"""

    pass


class RegistryStatusError(RegistryError):
    """Registry answered with an unexpected HTTP status"""

    def __init__(self, status_code: int, path: str, message: Optional[str] = None):
        self.status_code = status_code
        self.path = path
        super().__init__(
            message
            or f"Invalid status code {status_code} returned when fetching {path}"
        )


class RegistryValidationError(RegistryError):
    """Response validation failed"""

    pass


class PaginationLinkError(RegistryError):
    """Continuation link of a paginated response could not be parsed.

    The tags fetched before the bad link are kept on ``partial_tags`` for
    diagnosis; the failing operation itself returns nothing.
    """

    def __init__(self, link: str, reason: str, partial_tags: Optional[List[str]] = None):
        self.link = link
        self.partial_tags = list(partial_tags or [])
        super().__init__(f"Malformed Link header {link!r}: {reason}")


class PaginationLimitError(RegistryError):
    """Pagination chain is longer than the configured page ceiling"""

    def __init__(self, path: str, max_pages: int):
        self.path = path
        self.max_pages = max_pages
        super().__init__(f"Tag listing for {path} exceeded {max_pages} pages")


class OperationCancelledError(RegistryError):
    """Operation was cancelled by the caller"""

    pass


class TransportError(ImageTransportError):
    """Base exception for transport registry operations"""

    pass


class TransportUnsupportedError(TransportError):
    """Transport is registered but not available in this build"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Transport "{name}" is not supported in this build')


class DuplicateSchemeError(TransportError):
    """A transport with the same name is already registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Duplicate image transport name "{name}"')


class UnknownTransportError(TransportError):
    """No transport is registered under the requested name"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Unknown transport "{name}"')


class InvalidReferenceError(ImageTransportError):
    """Image reference string could not be parsed"""

    pass


class ResourceReleaseError(ImageTransportError):
    """Releasing a source handle or session failed"""

    pass
