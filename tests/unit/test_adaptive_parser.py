"""
Tests for the AdaptiveParser orchestration.
"""

import pytest

from htmlsoups.core.adaptive_parser import AdaptiveParser
from htmlsoups.exceptions import ElementNotFoundError, InvalidURLError
from htmlsoups.models import ContentType, FetchResult
from htmlsoups.presets import GENERIC_CONFIG

# No <article>, so the generic configuration fails on content
CHANGED_LAYOUT = """
<html><body>
  <h1 class="story-title">Council Approves Budget</h1>
  <div class="content"><p>The city council approved the budget on Tuesday.</p></div>
</body></html>
"""

KSL_PAGE = """
<html><body>
  <h1 class="headline">Snowstorm Hits Wasatch Front</h1>
  <div class="author-block"><a href="/a/1">Jane Reporter</a></div>
  <time class="posted-date" datetime="2024-02-01T08:00:00+00:00">Feb 1</time>
  <div class="article-content"><p>Heavy snow fell overnight.</p></div>
</body></html>
"""


class FakeFetcher:
    """Fetcher returning canned markup."""

    def __init__(self, pages: dict[str, str]):
        self.pages = pages
        self.requested: list[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.requested.append(url)
        return FetchResult(url=url, html=self.pages[url])


class TestAdaptiveParser:
    """Tests for AdaptiveParser."""

    @pytest.fixture
    def parser(self, learner):
        return AdaptiveParser(learner, fetcher=FakeFetcher({}))

    @pytest.mark.asyncio
    async def test_uses_site_preset(self, parser) -> None:
        article = await parser.parse_html("https://www.ksl.com/article/1", KSL_PAGE)

        assert article.title == "Snowstorm Hits Wasatch Front"
        assert article.content == "Heavy snow fell overnight."
        assert article.author == "Jane Reporter"
        assert article.config_source == "preset:ksl.com"
        assert parser.current_config.source == "preset:ksl.com"

    @pytest.mark.asyncio
    async def test_preset_success_does_not_learn(self, parser, learner) -> None:
        await parser.parse_html("https://www.ksl.com/article/1", KSL_PAGE)

        assert learner.state.is_empty()

    @pytest.mark.asyncio
    async def test_learns_when_extraction_fails(self, parser, learner) -> None:
        article = await parser.parse_html(
            "https://news.example.org/budget",
            CHANGED_LAYOUT,
            known_content={
                ContentType.TITLE: "Council Approves Budget",
                "content": "approved the budget",
            },
        )

        assert article.title == "Council Approves Budget"
        assert article.content == "The city council approved the budget on Tuesday."
        assert article.config_source == "learned"
        assert parser.current_config.source == "learned"
        assert "h1.story-title" in learner.get_learned_selectors(
            ContentType.TITLE, "news.example.org"
        )

    @pytest.mark.asyncio
    async def test_reports_selectors_after_learned_retry(self, parser, learner) -> None:
        await parser.parse_html(
            "https://news.example.org/budget",
            CHANGED_LAYOUT,
            known_content={
                ContentType.TITLE: "Council Approves Budget",
                ContentType.CONTENT: "approved the budget",
            },
        )

        title_selector = parser.current_config.title
        candidate = learner.state.get_candidate("title", title_selector)
        assert candidate.success_count == 1
        assert candidate.confidence == pytest.approx(1.1)

    @pytest.mark.asyncio
    async def test_learned_config_reused_for_next_page(self, parser, learner) -> None:
        await parser.parse_html(
            "https://news.example.org/budget",
            CHANGED_LAYOUT,
            known_content={
                ContentType.TITLE: "Council Approves Budget",
                ContentType.CONTENT: "approved the budget",
            },
        )

        next_page = CHANGED_LAYOUT.replace("Council Approves Budget", "Library Reopens")
        article = await parser.parse_html("https://news.example.org/library", next_page)

        assert article.title == "Library Reopens"
        assert article.config_source == "learned"

    @pytest.mark.asyncio
    async def test_fails_without_anything_to_learn(self, parser) -> None:
        with pytest.raises(ElementNotFoundError):
            await parser.parse_html("https://news.example.org/budget", CHANGED_LAYOUT)

        assert parser.current_config == GENERIC_CONFIG

    @pytest.mark.asyncio
    async def test_failed_retry_is_reported(self, learner) -> None:
        # Title is learnable, content is not
        parser = AdaptiveParser(learner, fetcher=FakeFetcher({}))
        await learner.report_result("div.gone", ContentType.CONTENT, "news.example.org", True)

        with pytest.raises(ElementNotFoundError):
            await parser.parse_html(
                "https://news.example.org/budget",
                CHANGED_LAYOUT.replace('class="content"', 'class="body"'),
                known_content={ContentType.TITLE: "Council Approves Budget"},
            )

        # The title was never reported; only the failing field is
        assert learner.state.get_candidate("title", "h1").total_attempts == 0

    @pytest.mark.asyncio
    async def test_parse_and_learn_fetches(self, learner) -> None:
        url = "https://www.ksl.com/article/1"
        fetcher = FakeFetcher({url: KSL_PAGE})
        parser = AdaptiveParser(learner, fetcher=fetcher)

        article = await parser.parse_and_learn(url)

        assert fetcher.requested == [url]
        assert article.title == "Snowstorm Hits Wasatch Front"

    @pytest.mark.asyncio
    async def test_rejects_url_without_host(self, parser) -> None:
        with pytest.raises(InvalidURLError):
            await parser.parse_html("not-a-url", KSL_PAGE)
