"""
URL utilities for htmlsoups.

Domains are the partition key for learned selector patterns.
"""

from urllib.parse import urljoin, urlparse


def get_domain(url: str) -> str:
    """
    Extract the host from a URL, lowercased and without port.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The host portion of the URL, or an empty string if there is none.
    """
    parsed = urlparse(url)
    return (parsed.hostname or "").lower()


def get_path(url: str) -> str:
    """
    Extract the path from a URL.

    Args:
        url: The URL to extract path from.

    Returns:
        The path portion of the URL.
    """
    parsed = urlparse(url)
    return parsed.path or "/"


def get_origin(url: str) -> str:
    """Return scheme://host[:port] for a URL."""
    parsed = urlparse(url)
    return f"{parsed.scheme or 'https'}://{parsed.netloc}"


def resolve_url(base_url: str, relative_url: str) -> str:
    """
    Resolve a relative URL against a base URL.

    Args:
        base_url: The base URL to resolve against.
        relative_url: The relative URL to resolve.

    Returns:
        The resolved absolute URL.
    """
    return urljoin(base_url, relative_url)


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid and has an HTTP(S) scheme.

    Args:
        url: The URL to validate.

    Returns:
        True if URL can be fetched.
    """
    try:
        parsed = urlparse(url)
        return bool(parsed.scheme in ("http", "https") and parsed.hostname)
    except ValueError:
        return False
