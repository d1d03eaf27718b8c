"""
Learning state snapshot.

Holds every learned selector score, the per-domain shortlists and the set of
domains each selector has succeeded on. Write helpers keep every shortlisted
selector present in the scores for its content-type.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from htmlsoups.learning.selector_score import SelectorCandidate


@dataclass
class LearningState:
    """Full persisted snapshot owned by a SelectorLearner."""

    # content_type -> selector -> candidate (insertion ordered)
    selector_scores: dict[str, dict[str, SelectorCandidate]] = field(default_factory=dict)
    # domain -> content_type -> selectors in discovery order
    domain_patterns: dict[str, dict[str, list[str]]] = field(default_factory=dict)
    # selector -> domains it succeeded on
    successful_domains: dict[str, set[str]] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_empty(self) -> bool:
        """True if nothing has been learned."""
        return not (self.selector_scores or self.domain_patterns or self.successful_domains)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_candidate(self, content_type: str, selector: str) -> SelectorCandidate | None:
        """Candidate for a selector under a content-type, if known."""
        return self.selector_scores.get(content_type, {}).get(selector)

    def candidates(self, content_type: str) -> list[SelectorCandidate]:
        """All candidates for a content-type, in insertion order."""
        return list(self.selector_scores.get(content_type, {}).values())

    def domain_shortlist(self, domain: str, content_type: str) -> list[str]:
        """Selectors learned for a domain and content-type."""
        return list(self.domain_patterns.get(domain, {}).get(content_type, []))

    def domain_count(self, selector: str) -> int:
        """Number of distinct domains a selector has succeeded on."""
        return len(self.successful_domains.get(selector, ()))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def ensure_candidate(
        self,
        content_type: str,
        selector: str,
        confidence: float = 1.0,
    ) -> SelectorCandidate:
        """Return the existing candidate or register a new one."""
        scores = self.selector_scores.setdefault(content_type, {})
        if selector not in scores:
            scores[selector] = SelectorCandidate(selector=selector, confidence=confidence)
        return scores[selector]

    def put_candidate(self, content_type: str, candidate: SelectorCandidate) -> None:
        """Store a candidate, replacing any previous version."""
        self.selector_scores.setdefault(content_type, {})[candidate.selector] = candidate

    def add_domain_pattern(self, domain: str, content_type: str, selector: str) -> bool:
        """
        Append a selector to a domain shortlist.

        Registers the selector in the scores when missing. Returns True if the
        shortlist changed.
        """
        self.ensure_candidate(content_type, selector)
        shortlist = self.domain_patterns.setdefault(domain, {}).setdefault(content_type, [])
        if selector in shortlist:
            return False
        shortlist.append(selector)
        return True

    def record_domain_success(self, selector: str, domain: str) -> None:
        """Remember that a selector worked on a domain."""
        self.successful_domains.setdefault(selector, set()).add(domain)

    def remove_candidate(self, content_type: str, selector: str) -> None:
        """Drop a selector from a content-type and from every domain shortlist of it."""
        scores = self.selector_scores.get(content_type, {})
        scores.pop(selector, None)
        if not scores:
            self.selector_scores.pop(content_type, None)

        for domain in list(self.domain_patterns):
            by_type = self.domain_patterns[domain]
            shortlist = by_type.get(content_type)
            if shortlist and selector in shortlist:
                shortlist.remove(selector)
                if not shortlist:
                    del by_type[content_type]
            if not by_type:
                del self.domain_patterns[domain]

        still_used = any(selector in s for s in self.selector_scores.values())
        if not still_used:
            self.successful_domains.pop(selector, None)

    def touch(self) -> None:
        """Stamp the snapshot as written now."""
        self.last_updated = datetime.now(timezone.utc)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "selector_scores": {
                content_type: [c.to_dict() for c in scores.values()]
                for content_type, scores in self.selector_scores.items()
            },
            "domain_patterns": {
                domain: {ct: list(selectors) for ct, selectors in by_type.items()}
                for domain, by_type in self.domain_patterns.items()
            },
            "successful_domains": {
                selector: sorted(domains)
                for selector, domains in self.successful_domains.items()
            },
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LearningState":
        """
        Create from dictionary.

        Raises:
            ValueError: If a section has the wrong shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        last_updated = data.get("last_updated")
        if isinstance(last_updated, str):
            last_updated = datetime.fromisoformat(last_updated)
        else:
            last_updated = datetime.now(timezone.utc)

        selector_scores: dict[str, dict[str, SelectorCandidate]] = {}
        for content_type, entries in _mapping(data, "selector_scores").items():
            selector_scores[content_type] = {}
            for entry in _sequence(entries, f"selector_scores.{content_type}"):
                if not isinstance(entry, dict):
                    raise ValueError(f"selector_scores.{content_type}: expected objects")
                candidate = SelectorCandidate.from_dict(entry)
                selector_scores[content_type][candidate.selector] = candidate

        domain_patterns: dict[str, dict[str, list[str]]] = {}
        for domain, by_type in _mapping(data, "domain_patterns").items():
            if not isinstance(by_type, dict):
                raise ValueError(f"domain_patterns.{domain}: expected an object")
            domain_patterns[domain] = {}
            for content_type, selectors in by_type.items():
                selectors = _sequence(selectors, f"domain_patterns.{domain}.{content_type}")
                # De-duplicate while keeping discovery order
                domain_patterns[domain][content_type] = list(dict.fromkeys(selectors))

        state = cls(
            selector_scores=selector_scores,
            domain_patterns=domain_patterns,
            successful_domains={
                selector: set(_sequence(domains, f"successful_domains.{selector}"))
                for selector, domains in _mapping(data, "successful_domains").items()
            },
            last_updated=last_updated,
        )

        # Repair snapshots written without a score for a shortlisted selector
        for by_type in state.domain_patterns.values():
            for content_type, selectors in by_type.items():
                for selector in selectors:
                    state.ensure_candidate(content_type, selector)

        return state

    def copy(self) -> "LearningState":
        """Deep copy via the serialized form."""
        return LearningState.from_dict(self.to_dict())


def _mapping(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"{key}: expected an object, got {type(value).__name__}")
    return value


def _sequence(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{path}: expected a list, got {type(value).__name__}")
    return value
