"""
Composition root for the transport registry.

build_registry() decides which transports are real and which are stubs in
this build. default_registry() holds the process-wide instance for callers
that do not pass their own.
"""

import threading
from typing import Optional

from imagetransports.config import TransportsConfig, load_config
from imagetransports.docker.transport import DockerTransport
from imagetransports.exceptions import InvalidReferenceError
from imagetransports.logging_config import configure_module_logging
from imagetransports.transports.base import StubTransport
from imagetransports.transports.registry import TransportRegistry

logger = configure_module_logging("transports")

# Recognized names without a backend in this package
STUB_ONLY_TRANSPORTS = ["ostree"]

_default_registry: Optional[TransportRegistry] = None
_default_lock = threading.Lock()


def build_registry(config: Optional[TransportsConfig] = None) -> TransportRegistry:
    """
    Create and seal a registry with every known transport.

    Transports named in config.disabled_transports are registered as stubs.

    Args:
        config: Configuration (default: built-in defaults)

    Returns:
        Sealed TransportRegistry
    """
    config = config or TransportsConfig()
    disabled = set(config.disabled_transports)
    registry = TransportRegistry()

    if "docker" in disabled:
        registry.register(StubTransport("docker"))
    else:
        registry.register(DockerTransport(config.registry))

    for name in STUB_ONLY_TRANSPORTS:
        registry.register(StubTransport(name))

    for name in sorted(disabled):
        if name not in registry:
            registry.register(StubTransport(name))

    registry.seal()
    logger.debug(f"Transports: {', '.join(registry.names())}")
    return registry


def default_registry() -> TransportRegistry:
    """Return the process-wide registry, building it from load_config() once."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = build_registry(load_config())
    return _default_registry


def parse_image_name(image_name: str, registry: Optional[TransportRegistry] = None):
    """
    Parse "transport:reference" into a transport-specific reference.

    Args:
        image_name: e.g. "docker://library/test:latest"
        registry: Registry to look the transport up in (default: default_registry())

    Returns:
        (transport, reference)

    Raises:
        InvalidReferenceError: If image_name has no transport prefix
        UnknownTransportError: If the transport is not registered
        TransportUnsupportedError: If the transport is a stub
    """
    name, sep, rest = image_name.partition(":")
    if not sep or not name:
        raise InvalidReferenceError(f"Invalid image name {image_name!r}, expected transport:reference")
    registry = registry or default_registry()
    transport = registry.get(name)
    return transport, transport.parse_reference(rest)
