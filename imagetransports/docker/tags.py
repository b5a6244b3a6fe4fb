"""
Paginated tag listing for the registry API v2.

The registry may split a tag list over several responses, each pointing at
the next one with a ``Link: <url>; rel="next"`` header. The chain is
followed in order and the pages are concatenated as received.
"""

import re
import threading
from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import ValidationError
from requests.exceptions import RequestException

from imagetransports.docker.models import ContinuationDescriptor, TagsPage
from imagetransports.docker.reference import RepositoryReference
from imagetransports.exceptions import (
    OperationCancelledError,
    PaginationLimitError,
    PaginationLinkError,
    RegistryConnectionError,
    RegistryStatusError,
    RegistryValidationError,
)
from imagetransports.logging_config import configure_module_logging

logger = configure_module_logging("docker.tags")

TAGS_PATH = "/v2/{path}/tags/list"

_LINK_TARGET_RE = re.compile(r"^<([^<>]*)>$")


def tags_path(reference: RepositoryReference) -> str:
    return TAGS_PATH.format(path=reference.path)


def parse_link_header(link: str) -> ContinuationDescriptor:
    """
    Parse the first value of a Link header into a next-page target.

    The rel parameter is not checked. Scheme and host of the linked URL are
    dropped so the next request goes to the registry already in use.

    Args:
        link: Header value, e.g. '</v2/library/test/tags/list?last=b>; rel="next"'

    Returns:
        ContinuationDescriptor with the path and optional query

    Raises:
        ValueError: If the header or its URL is malformed
    """
    target = link.split(";", 1)[0].strip()
    match = _LINK_TARGET_RE.match(target)
    if not match:
        raise ValueError("expected a <url> target")

    url = match.group(1)
    if not url or any(c.isspace() for c in url):
        raise ValueError("empty or whitespace-containing URL")

    # urlsplit raises ValueError on things like unbalanced IPv6 brackets
    parts = urlsplit(url)
    if not parts.path.startswith("/"):
        raise ValueError("URL has no absolute path")

    return ContinuationDescriptor(path=parts.path, query=parts.query or None)


def _decode_page(response, path: str) -> TagsPage:
    try:
        return TagsPage.model_validate(response.json())
    except ValueError as e:
        # requests' JSONDecodeError is a ValueError; so is pydantic's ValidationError
        kind = "Invalid tags format" if isinstance(e, ValidationError) else "Malformed JSON"
        logger.error(f"{kind} in tags response for {path}: {e}")
        raise RegistryValidationError(f"{kind} in tags response for {path}: {e}") from e
    except RequestException as e:
        # Body is streamed, so the connection can still fail here
        logger.error(f"Reading tags response for {path} failed: {e}")
        raise RegistryConnectionError(f"Reading tags response for {path} failed: {e}") from e


def get_repository_tags(
    executor,
    reference: RepositoryReference,
    max_pages: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
) -> List[str]:
    """
    List all tags of a repository, following the pagination chain.

    The tag or digest of the reference is ignored; only its path is used.

    Args:
        executor: Object with make_request(method, path) returning a
            requests.Response-like object (status_code, headers, json(), close())
        reference: Repository to list
        max_pages: Optional page ceiling, unbounded when None
        cancel: Event checked before every page request. A request already in
            flight is bounded by the executor timeout, not by cancel

    Returns:
        Tags of all pages, concatenated in the order received

    Raises:
        RegistryConnectionError: Transport failure, while sending a request or
            reading its body
        RegistryStatusError: A page returned a status other than 200
        RegistryValidationError: A page body could not be decoded
        PaginationLinkError: A Link header was malformed; tags fetched so far
            are available on the exception's partial_tags
        PaginationLimitError: The chain is longer than max_pages
        OperationCancelledError: cancel was set before a page request
    """
    path = tags_path(reference)
    tags: List[str] = []
    pages = 0

    while True:
        if cancel is not None and cancel.is_set():
            logger.info(f"Tag listing for {reference.name()} cancelled after {pages} pages")
            raise OperationCancelledError(f"Tag listing for {reference.name()} cancelled")
        if max_pages is not None and pages >= max_pages:
            logger.error(f"Tag listing for {reference.name()} exceeded {max_pages} pages")
            raise PaginationLimitError(path, max_pages)

        logger.debug(f"Fetching tags page {pages + 1} from: {path}")
        response = executor.make_request("GET", path)
        try:
            if response.status_code != 200:
                logger.error(f"Tag listing for {path} returned status {response.status_code}")
                raise RegistryStatusError(response.status_code, path)
            page = _decode_page(response, path)
            link = response.headers.get("Link")
        finally:
            response.close()

        pages += 1
        tags.extend(page.tags)

        if not link:
            logger.debug(f"Fetched {len(tags)} tags for {reference.name()} in {pages} pages")
            return tags

        try:
            path = parse_link_header(link).target()
        except ValueError as e:
            logger.error(f"Malformed Link header after {path}: {link!r}")
            raise PaginationLinkError(link, str(e), tags) from e
