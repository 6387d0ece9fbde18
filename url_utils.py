"""
URL Utilities Module

Provides validation for graph source URLs.
"""

import re
from urllib.parse import urlparse

import config
from error_handler import InvalidSourceURL

WIKIPEDIA_URL_PATTERN = re.compile(r'^https?://(en\.)?wikipedia\.org/.+$')


def is_http_url(url: str) -> bool:
    """Return True if the URL is an absolute http(s) URL with a host.

    Args:
        url: The URL to check

    Returns:
        bool: True if the URL can be fetched over HTTP
    """
    if not url:
        return False

    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False

    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_wikipedia_url(url: str) -> bool:
    """Return True if the URL points at a page on (en.)wikipedia.org."""
    if not is_http_url(url):
        return False
    return bool(WIKIPEDIA_URL_PATTERN.match(url.strip()))


def validate_source_url(url: str, wikipedia_only: bool = False) -> str:
    """Validate a source URL and return it stripped.

    Args:
        url: The URL supplied by the user
        wikipedia_only: Reject anything that is not a Wikipedia page

    Returns:
        The stripped URL

    Raises:
        InvalidSourceURL: If the URL is not acceptable
    """
    if not is_http_url(url):
        raise InvalidSourceURL(config.ERROR_MESSAGES['invalid_url'])
    if wikipedia_only and not is_wikipedia_url(url):
        raise InvalidSourceURL(config.ERROR_MESSAGES['invalid_wikipedia_url'])
    return url.strip()
