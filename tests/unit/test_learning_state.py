"""
Tests for the learning state snapshot.
"""

import json

import pytest

from htmlsoups.learning.selector_score import SelectorCandidate
from htmlsoups.learning.state import LearningState


class TestLearningState:
    """Tests for LearningState helpers and serialization."""

    def test_new_state_is_empty(self) -> None:
        assert LearningState().is_empty()

    def test_domain_pattern_registers_score(self) -> None:
        """Shortlisted selectors always have a score for their content-type."""
        state = LearningState()
        state.add_domain_pattern("example.com", "title", "h1.headline")

        assert state.domain_shortlist("example.com", "title") == ["h1.headline"]
        assert state.get_candidate("title", "h1.headline") is not None
        assert not state.is_empty()

    def test_domain_pattern_is_deduplicated(self) -> None:
        state = LearningState()

        assert state.add_domain_pattern("example.com", "title", "h1") is True
        assert state.add_domain_pattern("example.com", "title", "h1") is False
        assert state.domain_shortlist("example.com", "title") == ["h1"]

    def test_ensure_candidate_keeps_existing_score(self) -> None:
        state = LearningState()
        state.ensure_candidate("title", "h2", confidence=0.9)
        state.ensure_candidate("title", "h2", confidence=0.5)

        assert state.get_candidate("title", "h2").confidence == 0.9

    def test_domain_count(self) -> None:
        state = LearningState()
        state.record_domain_success("h1.headline", "site1.com")
        state.record_domain_success("h1.headline", "site2.com")
        state.record_domain_success("h1.headline", "site1.com")

        assert state.domain_count("h1.headline") == 2
        assert state.domain_count("h2") == 0

    def test_remove_candidate_cleans_shortlists(self) -> None:
        state = LearningState()
        state.add_domain_pattern("a.com", "title", "h1.old")
        state.add_domain_pattern("b.com", "title", "h1.old")
        state.add_domain_pattern("b.com", "title", "h1")
        state.record_domain_success("h1.old", "a.com")

        state.remove_candidate("title", "h1.old")

        assert state.get_candidate("title", "h1.old") is None
        assert "a.com" not in state.domain_patterns
        assert state.domain_shortlist("b.com", "title") == ["h1"]
        assert state.domain_count("h1.old") == 0

    def test_remove_keeps_other_content_types(self) -> None:
        state = LearningState()
        state.add_domain_pattern("a.com", "title", "h1")
        state.add_domain_pattern("a.com", "content", "h1")

        state.remove_candidate("title", "h1")

        assert state.domain_shortlist("a.com", "content") == ["h1"]
        assert state.get_candidate("content", "h1") is not None

    def test_to_dict_is_json_serializable(self) -> None:
        state = LearningState()
        state.add_domain_pattern("example.com", "title", "h1")
        state.record_domain_success("h1", "z.com")
        state.record_domain_success("h1", "a.com")

        data = json.loads(json.dumps(state.to_dict()))

        assert set(data) == {
            "selector_scores",
            "domain_patterns",
            "successful_domains",
            "last_updated",
        }
        assert data["successful_domains"]["h1"] == ["a.com", "z.com"]

    def test_round_trip(self) -> None:
        state = LearningState()
        state.put_candidate(
            "content",
            SelectorCandidate("div.article-body", confidence=0.9, success_count=1, total_attempts=2),
        )
        state.add_domain_pattern("example.com", "content", "div.article-body")
        state.record_domain_success("div.article-body", "example.com")

        restored = LearningState.from_dict(state.to_dict())

        assert restored.selector_scores == state.selector_scores
        assert restored.domain_patterns == state.domain_patterns
        assert restored.successful_domains == state.successful_domains
        assert restored.last_updated == state.last_updated

    def test_from_dict_repairs_missing_scores(self) -> None:
        state = LearningState.from_dict(
            {"domain_patterns": {"example.com": {"title": ["h1", "h1"]}}}
        )

        assert state.domain_shortlist("example.com", "title") == ["h1"]
        assert state.get_candidate("title", "h1").confidence == 1.0

    def test_copy_is_independent(self) -> None:
        state = LearningState()
        state.add_domain_pattern("example.com", "title", "h1")

        copied = state.copy()
        copied.add_domain_pattern("example.com", "title", "h2")

        assert state.domain_shortlist("example.com", "title") == ["h1"]

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "an", "object"],
            {"selector_scores": ["oops"]},
            {"selector_scores": {"title": "h1"}},
            {"selector_scores": {"title": ["h1"]}},
            {"domain_patterns": {"a.com": ["h1"]}},
            {"domain_patterns": {"a.com": {"title": "h1"}}},
            {"successful_domains": {"h1": "a.com"}},
        ],
    )
    def test_from_dict_rejects_wrong_shape(self, data) -> None:
        with pytest.raises(ValueError):
            LearningState.from_dict(data)
