"""
Name-keyed registry of image transports.

The composition root fills a TransportRegistry once at startup and seals
it; after that it is only read, and reads need no locking.
"""

import threading
from typing import Dict, List

from imagetransports.exceptions import (
    DuplicateSchemeError,
    TransportError,
    UnknownTransportError,
)
from imagetransports.logging_config import configure_module_logging
from imagetransports.transports.base import ImageTransport, TransportDescriptor

logger = configure_module_logging("transports.registry")


class TransportRegistry:
    """Maps transport names to transports.

    Registering a name twice raises DuplicateSchemeError and keeps the
    first binding.
    """

    def __init__(self):
        self._transports: Dict[str, ImageTransport] = {}
        self._lock = threading.Lock()
        self._sealed = False

    def register(self, transport: ImageTransport) -> None:
        """
        Bind transport under its name.

        Raises:
            DuplicateSchemeError: If the name is already bound
            TransportError: If the registry has been sealed
        """
        name = transport.name
        with self._lock:
            if self._sealed:
                raise TransportError(f'Cannot register "{name}": transport registry is sealed')
            if name in self._transports:
                logger.error(f"Duplicate image transport name: {name}")
                raise DuplicateSchemeError(name)
            self._transports[name] = transport
        stub = " (stub)" if transport.descriptor.stub else ""
        logger.debug(f"Registered transport {name}{stub}")

    def get(self, name: str) -> ImageTransport:
        """
        Return the transport bound to name.

        Raises:
            UnknownTransportError: If nothing is bound to name
        """
        if self._sealed:
            transport = self._transports.get(name)
        else:
            with self._lock:
                transport = self._transports.get(name)
        if transport is None:
            raise UnknownTransportError(name)
        return transport

    def seal(self) -> None:
        """Stop accepting registrations."""
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._transports)

    def descriptors(self) -> List[TransportDescriptor]:
        with self._lock:
            return [self._transports[name].descriptor for name in sorted(self._transports)]

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._transports

    def __len__(self) -> int:
        with self._lock:
            return len(self._transports)
