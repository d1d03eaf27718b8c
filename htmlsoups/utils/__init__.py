"""Utility modules for htmlsoups."""

from htmlsoups.utils.logging import SoupsLogger, get_logger, setup_logging
from htmlsoups.utils.url_utils import (
    get_domain,
    get_origin,
    get_path,
    is_valid_url,
    resolve_url,
)

__all__ = [
    "SoupsLogger",
    "get_domain",
    "get_logger",
    "get_origin",
    "get_path",
    "is_valid_url",
    "resolve_url",
    "setup_logging",
]
