"""
Browser User-Agent rotation.
"""

import itertools
import random

# Modern desktop browsers
USER_AGENTS = [
    # Chrome on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    # Firefox on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:123.0) Gecko/20100101 Firefox/123.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:122.0) Gecko/20100101 Firefox/122.0",
    # Safari on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.3.1 Safari/605.1.15",
    # Edge on macOS
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36 Edg/122.0.2365.92",
]


class UserAgentRotator:
    """Hands out User-Agent strings in round-robin order."""

    def __init__(self, user_agents: list[str] | None = None):
        self.user_agents = list(USER_AGENTS if user_agents is None else user_agents)
        if not self.user_agents:
            raise ValueError("At least one user agent is required")
        self._cycle = itertools.cycle(self.user_agents)

    def next(self) -> str:
        """The next User-Agent in the rotation."""
        return next(self._cycle)

    def random(self) -> str:
        """A random User-Agent."""
        return random.choice(self.user_agents)
