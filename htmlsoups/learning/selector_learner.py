"""
Selector learner for adaptive extraction.

Discovers CSS selectors for article fields by replaying what worked before
and, when that fails, by scanning the document for elements that hold known
content. Every selector carries a confidence that moves with reported
outcomes, and selectors that keep working across domains are ranked first.
"""

import asyncio
from typing import Any

import soupsieve
from bs4 import Tag

from htmlsoups.config import LearnerConfig
from htmlsoups.document import (
    element_classes,
    element_id,
    element_text,
    ensure_queryable,
    select,
)
from htmlsoups.exceptions import QueryError, StorageError
from htmlsoups.learning.selector_score import SelectorCandidate
from htmlsoups.learning.state import LearningState
from htmlsoups.models import ContentType, content_type_key
from htmlsoups.storage.base import LearningStorage
from htmlsoups.utils import metrics
from htmlsoups.utils.logging import SoupsLogger


class SelectorLearner:
    """
    Learns, scores and ranks CSS selectors per domain and content-type.

    The learner owns one LearningState. Mutating calls hold a lock for the
    whole update-and-persist cycle, and every mutation is written through to
    storage. Storage failures are logged and never interrupt learning.
    """

    # Element patterns scanned during discovery, with the base confidence
    # given to selectors synthesized from their matches
    DISCOVERY_PATTERNS = [
        ("h1", 1.0),
        ("h2", 0.9),
        ("h3", 0.8),
        ("article", 1.0),
        ("div.article-content", 0.9),
        ("div.content", 0.8),
        ("p", 0.7),
    ]

    # Selectors seen on this many domains are promoted
    COMMON_DOMAIN_THRESHOLD = 2

    def __init__(
        self,
        storage: LearningStorage,
        config: LearnerConfig | None = None,
        logger: SoupsLogger | None = None,
    ):
        """
        Initialize the selector learner.

        Call load() (or use create()) before learning to pick up stored state.

        Args:
            storage: Where the learning state is persisted.
            config: Learner configuration.
            logger: Logger instance.
        """
        self.storage = storage
        self.config = config or LearnerConfig()
        self.logger = logger or SoupsLogger("selector_learner")
        self.state = LearningState()
        self._lock = asyncio.Lock()

    @classmethod
    async def create(
        cls,
        storage: LearningStorage,
        config: LearnerConfig | None = None,
        logger: SoupsLogger | None = None,
    ) -> "SelectorLearner":
        """Build a learner and load its stored state."""
        learner = cls(storage, config=config, logger=logger)
        await learner.load()
        return learner

    async def load(self) -> None:
        """
        Replace the in-memory state with the stored one.

        An unreachable or corrupt store leaves the learner with an empty state.
        """
        async with self._lock:
            try:
                self.state = await self.storage.load()
            except StorageError as e:
                self.logger.storage_error(
                    operation="load",
                    backend=e.backend,
                    error=str(e),
                )
                self.state = LearningState()
                return

        self.logger.info(
            "Loaded learning state",
            backend=self.storage.backend,
            content_types=len(self.state.selector_scores),
            domains=len(self.state.domain_patterns),
        )

    # -------------------------------------------------------------------------
    # Learning
    # -------------------------------------------------------------------------

    async def learn_selectors(
        self,
        document: Tag,
        content_type: ContentType | str,
        domain: str,
        known_content: str | None = None,
        discover: bool = False,
    ) -> list[str]:
        """
        Find the selectors that extract a content-type from a document.

        Args:
            document: Parsed document to learn from.
            content_type: Field the selectors are for.
            domain: Domain the document came from.
            known_content: Text the field is known to contain.
            discover: Scan for new selectors even when replay succeeds.

        Returns:
            Accepted and discovered selectors, best first.

        Raises:
            ParseError: If the document cannot be queried.
        """
        document = ensure_queryable(document)
        ct = content_type_key(content_type)
        needle = _normalize(known_content or "") or None

        async with self._lock:
            accepted: list[str] = []

            # Stage 1: selectors that worked on this domain before
            for selector in self.state.domain_shortlist(domain, ct):
                if self._accepts(document, selector, needle):
                    self._reward(ct, selector, domain, stage="domain")
                    accepted.append(selector)

            # Stage 2: everything learned for this content-type
            general = sorted(
                self.state.candidates(ct),
                key=lambda c: c.confidence,
                reverse=True,
            )
            for candidate in general:
                if candidate.selector in accepted:
                    continue
                if self._accepts(document, candidate.selector, needle):
                    self._reward(ct, candidate.selector, domain, stage="general")
                    accepted.append(candidate.selector)

            # Stage 3: synthesize new selectors from matching elements
            discovered: list[str] = []
            if (needle is not None and not accepted) or discover:
                discovered = self._discover(document, ct, domain, needle)

            result = self._rank(ct, list(dict.fromkeys(accepted + discovered)))
            await self._persist("learn_selectors")

        metrics.record_learning(ct, bool(discovered), len(result))
        return result

    def _accepts(self, document: Tag, selector: str, needle: str | None) -> bool:
        """Check a selector against the document, skipping bad selectors."""
        try:
            elements = select(document, selector)
        except QueryError as e:
            self.logger.debug(
                "Skipping unusable selector",
                selector=selector,
                error=e.message,
            )
            return False

        if not elements:
            return False
        if needle is None:
            return True
        return any(needle in element_text(el) for el in elements)

    def _reward(self, content_type: str, selector: str, domain: str, stage: str) -> None:
        """Apply a successful replay to a selector's score."""
        candidate = self.state.ensure_candidate(content_type, selector).updated(True)
        self.state.put_candidate(content_type, candidate)
        self.state.record_domain_success(selector, domain)

        self.logger.selector_accepted(
            selector=selector,
            content_type=content_type,
            domain=domain,
            stage=stage,
            confidence=candidate.confidence,
        )

    def _discover(
        self,
        document: Tag,
        content_type: str,
        domain: str,
        needle: str | None,
    ) -> list[str]:
        """
        Synthesize selectors from elements matching the discovery patterns.

        With known content only elements whose text contains it are used;
        without it every matching element contributes.
        """
        discovered: list[str] = []

        for pattern, base_confidence in self.DISCOVERY_PATTERNS:
            # The patterns are fixed and valid, so a failure here means the
            # document itself is broken
            for element in select(document, pattern):
                if needle is not None and needle not in element_text(element):
                    continue

                for selector in self._build_selectors(element):
                    if selector in discovered:
                        continue
                    if not self._accepts(document, selector, None):
                        continue

                    self.state.ensure_candidate(
                        content_type, selector, confidence=base_confidence
                    )
                    self.state.add_domain_pattern(domain, content_type, selector)
                    self.state.record_domain_success(selector, domain)
                    discovered.append(selector)

        if discovered:
            self.logger.selectors_discovered(
                content_type=content_type,
                domain=domain,
                selectors=discovered,
            )
        return discovered

    @staticmethod
    def _build_selectors(element: Tag) -> list[str]:
        """Selectors for an element, from most to least specific."""
        tag = element.name
        classes = [soupsieve.escape(c) for c in element_classes(element)]
        raw_id = element_id(element)
        id_part = f"#{soupsieve.escape(raw_id)}" if raw_id else ""

        selectors = []
        if classes and id_part:
            selectors.append(f"{tag}.{'.'.join(classes)}{id_part}")
        for cls in classes:
            selectors.append(f"{tag}.{cls}")
        if id_part:
            selectors.append(f"{tag}{id_part}")
        selectors.append(tag)
        return selectors

    # -------------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------------

    def is_common_pattern(self, selector: str) -> bool:
        """A specific selector that has worked on several domains."""
        return (
            self.state.domain_count(selector) >= self.COMMON_DOMAIN_THRESHOLD
            and ("." in selector or "#" in selector)
        )

    def _rank(self, content_type: str, selectors: list[str]) -> list[str]:
        """
        Order selectors best first.

        Common patterns lead, more domains first among them. Then higher
        confidence, then shorter selectors, then lexicographic order.
        """

        def sort_key(selector: str) -> tuple[Any, ...]:
            common = self.is_common_pattern(selector)
            candidate = self.state.get_candidate(content_type, selector)
            confidence = candidate.confidence if candidate else 0.0
            return (
                not common,
                -self.state.domain_count(selector) if common else 0,
                -confidence,
                len(selector),
                selector,
            )

        return sorted(selectors, key=sort_key)

    # -------------------------------------------------------------------------
    # Feedback
    # -------------------------------------------------------------------------

    async def report_result(
        self,
        selector: str,
        content_type: ContentType | str,
        domain: str,
        success: bool,
    ) -> SelectorCandidate | None:
        """
        Record whether a selector extracted the right content.

        Args:
            selector: Selector that was used.
            content_type: Field it was used for.
            domain: Domain it was used on.
            success: Whether the extraction was correct.

        Returns:
            The updated candidate, or None if pruning removed it.
        """
        ct = content_type_key(content_type)

        async with self._lock:
            candidate = self.state.ensure_candidate(ct, selector).updated(success)
            self.state.put_candidate(ct, candidate)

            if success:
                self.state.record_domain_success(selector, domain)
                self.state.add_domain_pattern(domain, ct, selector)

            self.logger.selector_feedback(
                selector=selector,
                content_type=ct,
                domain=domain,
                success=success,
                confidence=candidate.confidence,
            )

            result: SelectorCandidate | None = candidate
            if not success and self._should_prune(candidate):
                self.state.remove_candidate(ct, selector)
                metrics.SELECTORS_PRUNED.labels(content_type=ct).inc()
                self.logger.info(
                    "Pruned low-confidence selector",
                    selector=selector,
                    content_type=ct,
                    confidence=candidate.confidence,
                    attempts=candidate.total_attempts,
                )
                result = None

            await self._persist("report_result")

        metrics.record_feedback(ct, success)
        return result

    def _should_prune(self, candidate: SelectorCandidate) -> bool:
        threshold = self.config.prune_below
        if threshold is None:
            return False
        return (
            candidate.total_attempts >= self.config.prune_min_attempts
            and candidate.confidence < threshold
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_learned_selectors(
        self,
        content_type: ContentType | str,
        domain: str | None = None,
    ) -> list[str]:
        """
        Everything known for a content-type, best first.

        Includes the domain's shortlist when a domain is given, plus every
        selector learned for the content-type on any domain.
        """
        ct = content_type_key(content_type)
        selectors: list[str] = []
        if domain:
            selectors.extend(self.state.domain_shortlist(domain, ct))
        selectors.extend(c.selector for c in self.state.candidates(ct))
        return self._rank(ct, list(dict.fromkeys(selectors)))

    def get_selector_confidence(
        self,
        selector: str,
        content_type: ContentType | str | None = None,
    ) -> float:
        """
        Current confidence of a selector.

        Without a content-type the highest confidence across all content-types
        is returned. Unknown selectors have confidence 0.0.
        """
        if content_type is not None:
            candidate = self.state.get_candidate(content_type_key(content_type), selector)
            return candidate.confidence if candidate else 0.0

        confidences = [
            scores[selector].confidence
            for scores in self.state.selector_scores.values()
            if selector in scores
        ]
        return max(confidences, default=0.0)

    def get_stats(self) -> dict[str, Any]:
        """Summary counts of the learned state."""
        return {
            "content_types": {
                ct: len(scores) for ct, scores in self.state.selector_scores.items()
            },
            "domains": len(self.state.domain_patterns),
            "common_patterns": sum(
                1 for s in self.state.successful_domains if self.is_common_pattern(s)
            ),
            "last_updated": self.state.last_updated.isoformat(),
        }

    # -------------------------------------------------------------------------
    # Per-domain export/import
    # -------------------------------------------------------------------------

    async def export_domain(self, domain: str) -> dict[str, list[SelectorCandidate]]:
        """
        Write one domain's shortlists, with scores, to storage.

        Raises:
            StorageError: If the patterns cannot be written.
        """
        patterns: dict[str, list[SelectorCandidate]] = {}
        for ct in self.state.domain_patterns.get(domain, {}):
            candidates = (
                self.state.get_candidate(ct, selector)
                for selector in self.state.domain_shortlist(domain, ct)
            )
            patterns[ct] = [c for c in candidates if c is not None]

        await self.storage.save_domain_patterns(domain, patterns)
        self.logger.info(
            "Exported domain patterns",
            domain=domain,
            content_types=sorted(patterns),
        )
        return patterns

    async def import_domain(self, domain: str) -> int:
        """
        Merge a domain's stored patterns into the learned state.

        Selectors already known keep their current scores.

        Returns:
            Number of selectors added to the domain's shortlists.

        Raises:
            StorageError: If the patterns cannot be read.
        """
        patterns = await self.storage.load_domain_patterns(domain)

        async with self._lock:
            added = 0
            for ct, candidates in patterns.items():
                for candidate in candidates:
                    if self.state.get_candidate(ct, candidate.selector) is None:
                        self.state.put_candidate(ct, candidate)
                    if self.state.add_domain_pattern(domain, ct, candidate.selector):
                        added += 1

            if added:
                await self._persist("import_domain")

        return added

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    async def _persist(self, operation: str) -> None:
        """Write the state through to storage; failures are logged only."""
        self.state.touch()
        try:
            await self.storage.save(self.state)
        except StorageError as e:
            self.logger.storage_error(
                operation=operation,
                backend=e.backend,
                error=str(e),
            )


def _normalize(text: str) -> str:
    return " ".join(text.split())
