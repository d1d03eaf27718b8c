"""
In-memory learning state store.

Keeps serialized snapshots so callers never share mutable state with the
store. Nothing survives the process.
"""

from htmlsoups.learning.state import LearningState
from htmlsoups.storage.base import DomainPatterns, patterns_from_dict, patterns_to_dict
from htmlsoups.utils import metrics


class InMemoryLearningStorage:
    """Learning state store backed by process memory."""

    backend = "memory"

    def __init__(self) -> None:
        self._state: dict | None = None
        self._domains: dict[str, dict] = {}

    async def save(self, state: LearningState) -> None:
        self._state = state.to_dict()
        metrics.record_storage(self.backend, "save", True)

    async def load(self) -> LearningState:
        metrics.record_storage(self.backend, "load", True)
        if self._state is None:
            return LearningState()
        return LearningState.from_dict(self._state)

    async def save_domain_patterns(self, domain: str, patterns: DomainPatterns) -> None:
        self._domains[domain] = patterns_to_dict(patterns)
        metrics.record_storage(self.backend, "save_domain", True)

    async def load_domain_patterns(self, domain: str) -> DomainPatterns:
        metrics.record_storage(self.backend, "load_domain", True)
        return patterns_from_dict(self._domains.get(domain, {}))

    async def list_domains(self) -> list[str]:
        domains = set(self._domains)
        if self._state is not None:
            domains.update(self._state.get("domain_patterns", {}))
        return sorted(domains)
