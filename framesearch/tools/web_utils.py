from __future__ import annotations

from typing import Iterable
from urllib.parse import urlparse

from framesearch.config import settings
from framesearch.services.logger import logger


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except ValueError:
        return False


def extract_host(url: str) -> str:
    """Lowercase hostname, or an empty string when the URL does not parse."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_statically_embeddable(url: str, denylist: Iterable[str] | None = None) -> bool:
    """Reject URLs whose host is on the known non-embeddable list.

    Only known-bad hosts are removed; a True result is not a guarantee.
    Unparseable URLs fail closed.
    """
    if not isinstance(url, str) or not is_valid_url(url):
        logger.debug(f"Static filter rejected unparseable URL: {url!r}")
        return False

    host = extract_host(url)
    if not host:
        return False

    domains = settings.non_embeddable_domain_list if denylist is None else denylist
    return not any(domain in host for domain in domains)
