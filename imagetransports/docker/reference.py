"""
Docker image reference parsing.

Turns strings such as ``library/test:latest``, ``busybox`` or
``quay.io/org/app@sha256:...`` into an immutable RepositoryReference with
Docker Hub normalization applied.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict

from imagetransports.exceptions import InvalidReferenceError

DEFAULT_DOMAIN = "docker.io"
LEGACY_DEFAULT_DOMAIN = "index.docker.io"
OFFICIAL_REPO_PREFIX = "library/"
DEFAULT_TAG = "latest"
NAME_TOTAL_LENGTH_MAX = 255

_PATH_COMPONENT = r"[a-z0-9]+(?:(?:[._]|__|[-]+)[a-z0-9]+)*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"

PATH_RE = re.compile(rf"^{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*$")
DOMAIN_RE = re.compile(rf"^{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?$")
TAG_RE = re.compile(r"^[\w][\w.-]{0,127}$")
DIGEST_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}$")


class RepositoryReference(BaseModel):
    """A parsed, normalized image reference"""

    model_config = ConfigDict(frozen=True)

    domain: str
    path: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    def name(self) -> str:
        """Fully expanded repository name, without tag or digest."""
        return f"{self.domain}/{self.path}"

    def tag_or_digest(self) -> str:
        """The manifest reference used in /v2/<path>/manifests/<ref>."""
        return self.digest or self.tag or DEFAULT_TAG

    def __str__(self):
        ref = self.name()
        if self.tag:
            ref += f":{self.tag}"
        if self.digest:
            ref += f"@{self.digest}"
        return ref


def _split_domain(name: str):
    """Split a repository name into (domain, path) with Docker Hub defaults."""
    first, sep, rest = name.partition("/")
    if not sep or (
        "." not in first and ":" not in first and first != "localhost"
    ):
        domain, path = DEFAULT_DOMAIN, name
    else:
        domain, path = first, rest

    if domain == LEGACY_DEFAULT_DOMAIN:
        domain = DEFAULT_DOMAIN
    if domain == DEFAULT_DOMAIN and "/" not in path:
        path = OFFICIAL_REPO_PREFIX + path
    return domain, path


def parse_reference(value: str, default_tag: bool = True) -> RepositoryReference:
    """
    Parse an image reference string.

    Args:
        value: Reference such as "library/test:latest" or "host:5000/repo@sha256:..."
        default_tag: Apply the "latest" tag when neither tag nor digest is given

    Returns:
        Normalized RepositoryReference

    Raises:
        InvalidReferenceError: If the string is not a valid reference
    """
    if not value:
        raise InvalidReferenceError("Empty image reference")

    name, digest = value, None
    if "@" in value:
        name, digest = value.split("@", 1)
        if not DIGEST_RE.match(digest):
            raise InvalidReferenceError(f"Invalid digest in reference {value!r}")

    tag = None
    last_slash = name.rfind("/")
    colon = name.rfind(":")
    if colon > last_slash:
        name, tag = name[:colon], name[colon + 1:]
        if not TAG_RE.match(tag):
            raise InvalidReferenceError(f"Invalid tag in reference {value!r}")

    domain, path = _split_domain(name)
    if not DOMAIN_RE.match(domain):
        raise InvalidReferenceError(f"Invalid registry domain in reference {value!r}")
    if not PATH_RE.match(path):
        raise InvalidReferenceError(
            f"Invalid repository name in reference {value!r} (must be lowercase)"
        )
    if len(domain) + 1 + len(path) > NAME_TOTAL_LENGTH_MAX:
        raise InvalidReferenceError(
            f"Repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters"
        )

    if default_tag and tag is None and digest is None:
        tag = DEFAULT_TAG

    return RepositoryReference(domain=domain, path=path, tag=tag, digest=digest)
