import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from typing import Dict, Optional, Union

from imagetransports.config import RegistryConfig
from imagetransports.exceptions import RegistryConnectionError
from imagetransports.logging_config import TRACE_REQUESTS, configure_module_logging

logger = configure_module_logging("docker.client")

DOCKER_HUB_DOMAIN = "docker.io"
DOCKER_HUB_REGISTRY = "registry-1.docker.io"


def registry_host(domain: str) -> str:
    """Map a reference domain to the host serving its registry API."""
    if domain == DOCKER_HUB_DOMAIN:
        return DOCKER_HUB_REGISTRY
    return domain


class DockerClient:
    """Registry API v2 request executor for a single registry host"""

    def __init__(self, domain: str, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()
        self.domain = domain
        scheme = "http" if domain in self.config.insecure_registries else "https"
        self.url = f"{scheme}://{registry_host(domain)}"
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create configured requests session"""
        session = requests.session()
        session.headers.update({"User-Agent": self.config.user_agent})
        session.verify = self.config.verify_tls
        if self.config.username and self.config.password:
            session.auth = (self.config.username, self.config.password)
        adapter = HTTPAdapter(max_retries=self.config.max_retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def make_request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Union[bytes, str]] = None,
    ) -> requests.Response:
        """
        Issue a request against the registry API.

        The response is streamed; the caller owns it and must close it.

        Args:
            method: HTTP method
            path: Absolute path, optionally with a query string
            headers: Extra request headers
            data: Request body

        Returns:
            requests.Response with any status code

        Raises:
            RegistryConnectionError: On connection, TLS or timeout failures
        """
        url = f"{self.url}{path}"
        if TRACE_REQUESTS:
            logger.debug(f"{method} {url}")
        try:
            return self._session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=self.config.timeout,
                stream=True,
            )
        except RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise RegistryConnectionError(f"Request to {url} failed: {e}") from e

    def is_alive(self) -> bool:
        """Check if registry is alive"""
        try:
            response = self._session.get(f"{self.url}/v2/", timeout=self.config.timeout)
            response.close()
            return response.status_code in (200, 401)
        except RequestException as e:
            logger.debug(f"Registry health check failed: {e}")
            return False

    def close(self):
        """Close the underlying session"""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exec_type, exec_val, exec_tb):
        self.close()
