"""
Configuration models and loading.

Configuration is read from a YAML file (``$IMAGETRANSPORTS_CONFIG`` when no
path is given) and validated with Pydantic. Missing files fall back to the
defaults below.

Example config.yaml:

    registry:
      timeout: 30
      max_pages: 500
      insecure_registries: ["localhost:5000"]
    disabled_transports: ["docker"]
"""

import os
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from imagetransports.exceptions import ImageTransportError
from imagetransports.logging_config import configure_module_logging

logger = configure_module_logging("config")

CONFIG_ENV = "IMAGETRANSPORTS_CONFIG"
DISABLED_TRANSPORTS_ENV = "IMAGETRANSPORTS_DISABLED_TRANSPORTS"


class RegistryConfig(BaseModel):
    """Registry client configuration"""

    timeout: int = Field(default=10, gt=0, description="Per-request timeout in seconds")
    max_retries: int = Field(default=3, ge=0)
    max_pages: Optional[int] = Field(
        default=None, gt=0, description="Tag listing page ceiling, unbounded when None"
    )
    verify_tls: bool = True
    insecure_registries: List[str] = Field(
        default_factory=list, description="Registries reached over plain HTTP"
    )
    username: Optional[str] = None
    password: Optional[str] = None
    user_agent: str = "imagetransports/0.1.0"


class TransportsConfig(BaseModel):
    """Top-level configuration"""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    disabled_transports: List[str] = Field(
        default_factory=list, description="Transports registered as stubs"
    )

    @field_validator("disabled_transports")
    @classmethod
    def strip_names(cls, v):
        return [name.strip() for name in v if name.strip()]


def load_config(path: Optional[Union[str, Path]] = None) -> TransportsConfig:
    """
    Load configuration from YAML.

    Args:
        path: Path to YAML file (default: $IMAGETRANSPORTS_CONFIG)

    Returns:
        Validated TransportsConfig

    Raises:
        ImageTransportError: If the file is malformed or fails validation
    """
    if path is None:
        path = os.getenv(CONFIG_ENV)

    data = {}
    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            logger.debug(f"Loading config from {config_path}")
            try:
                with open(config_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.error(f"Malformed config file {config_path}: {e}")
                raise ImageTransportError(f"Malformed config file {config_path}: {e}") from e
        else:
            logger.warning(f"Config file not found: {config_path}, using defaults")

    try:
        config = TransportsConfig.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise ImageTransportError(f"Invalid configuration: {e}") from e

    disabled = os.getenv(DISABLED_TRANSPORTS_ENV)
    if disabled:
        extra = [name.strip() for name in disabled.split(",") if name.strip()]
        config.disabled_transports = config.disabled_transports + [
            name for name in extra if name not in config.disabled_transports
        ]

    return config
