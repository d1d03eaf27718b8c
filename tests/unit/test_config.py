"""
Tests for settings, extraction configs and site presets.
"""

import pytest

from htmlsoups.config import (
    FetcherConfig,
    LearnerConfig,
    SoupsSettings,
    StorageBackend,
    StorageConfig,
)
from htmlsoups.models import ContentType, ExtractionConfig
from htmlsoups.presets import FALLBACK_CONFIG, GENERIC_CONFIG, SITE_PRESETS, preset_for_domain


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("HTMLSOUPS_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("HTMLSOUPS_PRUNE_BELOW", raising=False)
        monkeypatch.delenv("HTMLSOUPS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("HTMLSOUPS_LOG_FORMAT", raising=False)
        settings = SoupsSettings(_env_file=None)

        assert settings.storage_backend == StorageBackend.FILE
        assert settings.prune_below is None
        assert settings.max_retries == 3
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("HTMLSOUPS_STORAGE_BACKEND", "redis")
        monkeypatch.setenv("HTMLSOUPS_PRUNE_BELOW", "0.5")
        monkeypatch.setenv("HTMLSOUPS_MAX_RETRIES", "5")

        settings = SoupsSettings(_env_file=None)

        assert settings.storage_backend == StorageBackend.REDIS
        assert settings.prune_below == 0.5
        assert settings.max_retries == 5

    def test_builds_component_configs(self) -> None:
        settings = SoupsSettings(
            _env_file=None,
            storage_backend="memory",
            prune_below=0.4,
            prune_min_attempts=2,
            max_page_size_mb=1.0,
        )

        assert settings.learner_config() == LearnerConfig(prune_below=0.4, prune_min_attempts=2)
        assert settings.fetcher_config().max_content_size == 1024 * 1024
        assert isinstance(settings.fetcher_config(), FetcherConfig)
        storage = settings.storage_config()
        assert isinstance(storage, StorageConfig)
        assert storage.backend == StorageBackend.MEMORY


class TestExtractionConfig:
    """Tests for ExtractionConfig selector access."""

    def test_selectors_for(self) -> None:
        assert GENERIC_CONFIG.selectors_for(ContentType.TITLE) == ["h1"]
        assert GENERIC_CONFIG.selectors_for("image") == [
            "img.article-image",
            "img.featured-image",
        ]

    def test_selectors_for_unset_field(self) -> None:
        config = ExtractionConfig(title="h1", content="article")

        assert config.selectors_for(ContentType.AUTHOR) == []
        assert config.selectors_for(ContentType.TOPIC) == []

    def test_with_selectors_single_field(self) -> None:
        config = GENERIC_CONFIG.with_selectors(ContentType.TITLE, ["h1.story", "h1"])

        assert config.title == "h1.story"
        assert config.source == "learned"
        assert GENERIC_CONFIG.title == "h1"

    def test_with_selectors_list_field(self) -> None:
        config = GENERIC_CONFIG.with_selectors(ContentType.IMAGE, ["figure img", "img"])

        assert config.images == ("figure img",)

    def test_with_no_selectors_is_unchanged(self) -> None:
        assert GENERIC_CONFIG.with_selectors(ContentType.TITLE, []) is GENERIC_CONFIG

    def test_unknown_content_type(self) -> None:
        with pytest.raises(ValueError):
            GENERIC_CONFIG.selectors_for("sidebar")


class TestPresets:
    """Tests for the site presets."""

    @pytest.mark.parametrize(
        "domain,source",
        [
            ("ksl.com", "preset:ksl.com"),
            ("www.ksl.com", "preset:ksl.com"),
            ("WWW.KUTV.COM", "preset:kutv.com"),
            ("www.deseretnews.com", "preset:deseret.com"),
            ("lehifreepress.com.", "preset:lehifreepress.com"),
        ],
    )
    def test_preset_for_domain(self, domain, source) -> None:
        preset = preset_for_domain(domain)

        assert preset is not None
        assert preset.source == source

    @pytest.mark.parametrize("domain", ["example.com", "notksl.com", "ksl.com.evil.org"])
    def test_unknown_domain(self, domain) -> None:
        assert preset_for_domain(domain) is None

    def test_presets_define_required_fields(self) -> None:
        for config in [GENERIC_CONFIG, FALLBACK_CONFIG, *SITE_PRESETS.values()]:
            assert config.title
            assert config.content
