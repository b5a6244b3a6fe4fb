"""
Transport interface and the stub transport.

A transport resolves reference strings under one scheme name (the part
before the first ":" in "docker://busybox:latest") into source handles and
images. StubTransport keeps a scheme name recognized in builds that exclude
its backend, failing every call with TransportUnsupportedError.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from imagetransports.exceptions import TransportUnsupportedError


class TransportDescriptor(BaseModel):
    """Registration record for a transport"""

    model_config = ConfigDict(frozen=True)

    name: str
    stub: bool = False


class ImageTransport(ABC):
    """Abstract base class for image transports."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Scheme name the transport is registered under."""

    @property
    def descriptor(self) -> TransportDescriptor:
        return TransportDescriptor(name=self.name, stub=False)

    @abstractmethod
    def parse_reference(self, reference: str):
        """Parse the scheme-specific part of an image name into a reference."""

    @abstractmethod
    def open_source(self, reference):
        """Open a source handle for reference. The caller must close it."""

    @abstractmethod
    def open_image(self, reference, image_builder=None):
        """Open reference as an image. The caller must close it."""


class StubTransport(ImageTransport):
    """Transport for a backend excluded from this build"""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def descriptor(self) -> TransportDescriptor:
        return TransportDescriptor(name=self._name, stub=True)

    def parse_reference(self, reference: str):
        raise TransportUnsupportedError(self._name)

    def open_source(self, reference):
        raise TransportUnsupportedError(self._name)

    def open_image(self, reference, image_builder=None):
        raise TransportUnsupportedError(self._name)

    def __repr__(self):
        return f"StubTransport({self._name!r})"
