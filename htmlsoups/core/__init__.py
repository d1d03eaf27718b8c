"""Fetching and adaptive parsing."""

from htmlsoups.core.adaptive_parser import AdaptiveParser
from htmlsoups.core.fetcher import Fetcher
from htmlsoups.core.user_agents import UserAgentRotator

__all__ = [
    "AdaptiveParser",
    "Fetcher",
    "UserAgentRotator",
]
