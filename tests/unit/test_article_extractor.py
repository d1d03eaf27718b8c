"""
Tests for the ArticleExtractor.

Verifies that extraction configurations are correctly applied to documents
to extract article fields.
"""

import pytest

from htmlsoups.document import parse_document
from htmlsoups.exceptions import ElementNotFoundError, ExtractionError
from htmlsoups.extraction.article_extractor import ArticleExtractor
from htmlsoups.models import ExtractionConfig

URL = "https://example.com/news/story"


class TestArticleExtractor:
    """Test the ArticleExtractor class."""

    @pytest.fixture
    def extractor(self):
        """Create an ArticleExtractor instance."""
        return ArticleExtractor()

    @pytest.fixture
    def document(self, sample_html_article):
        return parse_document(sample_html_article)

    @pytest.fixture
    def config(self):
        """Configuration matching the sample article."""
        return ExtractionConfig(
            title="h1.headline",
            content="div.article-body",
            author="div.author",
            date="time",
            images=("img.article-image",),
            topics=(".tags a",),
            organizations=("div.article-body p strong",),
            locations=("div.article-body p em",),
            source="test",
        )

    def test_extracts_required_fields(self, extractor, document, config) -> None:
        article = extractor.extract(document, URL, config)

        assert article.source_url == URL
        assert article.title == "Breaking News: Test Article"
        assert article.content.startswith("This is the first paragraph of the article.")
        assert "Utah Jazz fans gathered downtown." in article.content
        assert article.config_source == "test"

    def test_extracts_optional_fields(self, extractor, document, config) -> None:
        article = extractor.extract(document, URL, config)

        assert article.author == "By John Doe"
        assert article.publish_date == "2024-01-15T09:30:00+00:00"
        assert article.images == ["https://example.com/images/lead.jpg"]
        assert article.topics == ["Sports", "NBA"]
        assert article.organizations == ["Utah Jazz"]
        assert article.locations == ["SALT LAKE CITY"]

    def test_fields_extracted(self, extractor, document, config) -> None:
        article = extractor.extract(document, URL, config)

        assert article.fields_extracted() == [
            "title",
            "content",
            "author",
            "publish_date",
            "images",
            "topics",
            "organizations",
            "locations",
        ]

    def test_missing_title_raises(self, extractor, document, config) -> None:
        config = ExtractionConfig(title="h1.missing", content=config.content)

        with pytest.raises(ElementNotFoundError) as exc_info:
            extractor.extract(document, URL, config)

        assert exc_info.value.field == "title"
        assert exc_info.value.selector == "h1.missing"

    def test_missing_content_raises(self, extractor, document) -> None:
        config = ExtractionConfig(title="h1", content="div.nothing-here")

        with pytest.raises(ElementNotFoundError) as exc_info:
            extractor.extract(document, URL, config)

        assert exc_info.value.field == "content"

    def test_malformed_required_selector_raises(self, extractor, document) -> None:
        config = ExtractionConfig(title="h1[", content="div.article-body")

        with pytest.raises(ExtractionError):
            extractor.extract(document, URL, config)

    def test_optional_fields_are_best_effort(self, extractor, document) -> None:
        config = ExtractionConfig(
            title="h1",
            content="div.article-body",
            author="div.byline-missing",
            date="time[",
            images=("img[", "img.article-image"),
            topics=("ul.none li",),
        )

        article = extractor.extract(document, URL, config)

        assert article.author is None
        assert article.publish_date is None
        assert article.images == ["https://example.com/images/lead.jpg"]
        assert article.topics == []

    def test_selector_groups(self, extractor, document) -> None:
        config = ExtractionConfig(
            title="h1, .article-title, .entry-title, .headline",
            content="article, .article-content, .entry-content, .article-body",
        )

        article = extractor.extract(document, URL, config)

        assert article.title == "Breaking News: Test Article"
        assert "first paragraph" in article.content

    def test_lazy_images_and_duplicates(self, extractor) -> None:
        document = parse_document(
            "<html><body><h1>T</h1><article>Body</article>"
            '<img class="a" data-src="https://cdn.example.com/1.jpg">'
            '<img class="a" src="https://cdn.example.com/1.jpg">'
            "<img class='a'>"
            "</body></html>"
        )
        config = ExtractionConfig(title="h1", content="article", images=("img.a", "img"))

        article = extractor.extract(document, URL, config)

        assert article.images == ["https://cdn.example.com/1.jpg"]

    def test_unparseable_date_kept_as_text(self, extractor) -> None:
        document = parse_document(
            "<html><body><h1>T</h1><article>Body</article>"
            '<span class="date">Posted recently</span>'
            "</body></html>"
        )
        config = ExtractionConfig(title="h1", content="article", date="span.date")

        article = extractor.extract(document, URL, config)

        assert article.publish_date == "Posted recently"

    def test_to_dict(self, extractor, document, config) -> None:
        data = extractor.extract(document, URL, config).to_dict()

        assert data["title"] == "Breaking News: Test Article"
        assert data["images"] == ["https://example.com/images/lead.jpg"]
        assert isinstance(data["extracted_at"], str)
