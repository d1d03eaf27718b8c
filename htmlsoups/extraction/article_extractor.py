"""
Article extraction engine that applies an ExtractionConfig to a document.

Title and content are required. Every other field is best effort: a selector
that matches nothing, or cannot be run, leaves the field empty.
"""

import re
from datetime import datetime, timezone

from bs4 import Tag
from dateutil import parser as dateutil_parser

from htmlsoups.document import element_text, select
from htmlsoups.exceptions import ElementNotFoundError, ExtractionError, QueryError
from htmlsoups.models import ArticleContent, ExtractionConfig
from htmlsoups.utils.logging import SoupsLogger
from htmlsoups.utils.url_utils import resolve_url


class ArticleExtractor:
    """
    Applies extraction configurations to parsed documents.

    Extracts title, body text, byline, publish date, image URLs and the
    topic, organization and location lists of a news article.
    """

    def __init__(self, logger: SoupsLogger | None = None):
        """
        Initialize the article extractor.

        Args:
            logger: Logger instance.
        """
        self.logger = logger or SoupsLogger("article_extractor")

    def extract(
        self,
        document: Tag,
        url: str,
        config: ExtractionConfig,
    ) -> ArticleContent:
        """
        Extract an article using the provided configuration.

        Args:
            document: Parsed document.
            url: URL of the page being extracted.
            config: Selectors to apply.

        Returns:
            ArticleContent with every field that could be extracted.

        Raises:
            ElementNotFoundError: If title or content matches nothing.
            ExtractionError: If the title or content selector cannot be run.
        """
        title = self._required_text(document, url, "title", config.title)
        content = self._required_text(document, url, "content", config.content)

        author = None
        if config.author:
            author = self._optional_text(document, config.author)

        publish_date = None
        if config.date:
            publish_date = self._extract_date(document, config.date)

        article = ArticleContent(
            source_url=url,
            title=title,
            content=content,
            author=author,
            publish_date=publish_date,
            images=self._extract_images(document, url, config.images),
            topics=self._extract_text_list(document, config.topics),
            organizations=self._extract_text_list(document, config.organizations),
            locations=self._extract_text_list(document, config.locations),
            config_source=config.source,
        )

        self.logger.debug(
            "Article extraction completed",
            url=url,
            title_length=len(title),
            content_length=len(content),
            fields=article.fields_extracted(),
        )
        return article

    def _first_match(self, document: Tag, selector: str) -> Tag | None:
        elements = select(document, selector)
        return elements[0] if elements else None

    def _required_text(
        self,
        document: Tag,
        url: str,
        field: str,
        selector: str,
    ) -> str:
        """Text of the first element matching a required field's selector."""
        try:
            element = self._first_match(document, selector)
        except QueryError as e:
            raise ExtractionError(url, e.message, selector=selector) from e

        text = element_text(element) if element is not None else ""
        if not text:
            raise ElementNotFoundError(url, field, selector)
        return text

    def _optional_text(self, document: Tag, selector: str) -> str | None:
        try:
            element = self._first_match(document, selector)
        except QueryError as e:
            self.logger.warning("Optional selector failed", selector=selector, error=e.message)
            return None

        if element is None:
            return None
        return element_text(element) or None

    def _extract_date(self, document: Tag, selector: str) -> str | None:
        """
        Publish date from the first matching element.

        Prefers a machine-readable datetime attribute over visible text and
        normalizes to ISO 8601 when the value parses. Unparseable values are
        returned as found.
        """
        try:
            element = self._first_match(document, selector)
        except QueryError as e:
            self.logger.warning("Date selector failed", selector=selector, error=e.message)
            return None

        if element is None:
            return None

        raw = element.get("datetime") or element.get("content") or element_text(element)
        if not raw:
            return None
        raw = str(raw)
        return self._parse_date(raw) or raw

    def _parse_date(self, value: str) -> str | None:
        if not value or len(value) < 4:
            return None

        now = datetime.now(timezone.utc)

        def valid(dt: datetime) -> str | None:
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            if dt.astimezone(timezone.utc) <= now:
                return dt.isoformat()
            return None

        try:
            result = valid(dateutil_parser.parse(value, fuzzy=True))
            if result:
                return result
        except (ValueError, OverflowError):
            pass

        # ISO timestamp embedded in other text
        iso = re.search(
            r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})?",
            value,
        )
        if iso:
            try:
                return valid(datetime.fromisoformat(iso.group(0).replace("Z", "+00:00")))
            except ValueError:
                pass

        return None

    def _extract_images(
        self,
        document: Tag,
        url: str,
        selectors: tuple[str, ...],
    ) -> list[str]:
        """
        Image URLs from every selector, resolved against the page URL.
        """
        images: list[str] = []
        for selector in selectors:
            try:
                elements = select(document, selector)
            except QueryError as e:
                self.logger.warning("Image selector failed", selector=selector, error=e.message)
                continue

            for elem in elements:
                src = elem.get("src") or elem.get("data-src")
                if not src:
                    continue
                image_url = resolve_url(url, str(src).strip())
                if image_url and image_url not in images:
                    images.append(image_url)
        return images

    def _extract_text_list(self, document: Tag, selectors: tuple[str, ...]) -> list[str]:
        """De-duplicated element texts from every selector, in document order."""
        values: list[str] = []
        for selector in selectors:
            try:
                elements = select(document, selector)
            except QueryError as e:
                self.logger.warning("List selector failed", selector=selector, error=e.message)
                continue

            for elem in elements:
                text = element_text(elem)
                if text and text not in values:
                    values.append(text)
        return values
