"""
Storage port for learned selectors.

Any object with these coroutines can back a SelectorLearner. Implementations
raise StorageError for I/O, serialization and transport failures. Nothing
stored yet is not a failure.
"""

from typing import Any, Protocol

from htmlsoups.learning.selector_score import SelectorCandidate
from htmlsoups.learning.state import LearningState

# content_type -> candidates, in shortlist order
DomainPatterns = dict[str, list[SelectorCandidate]]


class LearningStorage(Protocol):
    """Protocol defining the common interface for learning state stores."""

    backend: str

    async def save(self, state: LearningState) -> None:
        """Persist the full learning state."""
        ...

    async def load(self) -> LearningState:
        """Load the learning state, empty if nothing is stored."""
        ...

    async def save_domain_patterns(self, domain: str, patterns: DomainPatterns) -> None:
        """Persist one domain's shortlists with their scores."""
        ...

    async def load_domain_patterns(self, domain: str) -> DomainPatterns:
        """Load one domain's shortlists, empty if none are stored."""
        ...

    async def list_domains(self) -> list[str]:
        """Domains with learned patterns."""
        ...


def patterns_to_dict(patterns: DomainPatterns) -> dict[str, Any]:
    """Serialize per-domain patterns."""
    return {
        content_type: [c.to_dict() for c in candidates]
        for content_type, candidates in patterns.items()
    }


def patterns_from_dict(data: dict[str, Any]) -> DomainPatterns:
    """Deserialize per-domain patterns."""
    return {
        content_type: [SelectorCandidate.from_dict(entry) for entry in entries]
        for content_type, entries in data.items()
    }
