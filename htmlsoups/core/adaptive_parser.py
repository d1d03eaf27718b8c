"""
Adaptive parser: fetch, extract, and learn when extraction fails.

The parser starts from a site preset (or its current configuration) and only
consults the selector learner when that configuration no longer matches the
page. Selectors used on a learned retry are reported back to the learner so
their confidence follows real outcomes.
"""

from bs4 import Tag

from htmlsoups.core.fetcher import Fetcher
from htmlsoups.document import parse_document
from htmlsoups.exceptions import ElementNotFoundError, ExtractionError, InvalidURLError
from htmlsoups.extraction.article_extractor import ArticleExtractor
from htmlsoups.learning.selector_learner import SelectorLearner
from htmlsoups.models import ArticleContent, ContentType, ExtractionConfig, content_type_key
from htmlsoups.presets import GENERIC_CONFIG, preset_for_domain
from htmlsoups.utils import metrics
from htmlsoups.utils.logging import SoupsLogger
from htmlsoups.utils.url_utils import get_domain

# Fields whose selectors are reported back after a learned retry
REPORTED_FIELDS = (ContentType.TITLE, ContentType.CONTENT)


class AdaptiveParser:
    """
    Extracts articles and adapts its selectors to site changes.

    Flow for each page:
    1. Use the site preset when the domain has one
    2. Extract with the current configuration
    3. On failure, learn selectors for every content-type and retry
    4. Report the outcome of the retry to the learner
    """

    def __init__(
        self,
        learner: SelectorLearner,
        fetcher: Fetcher | None = None,
        extractor: ArticleExtractor | None = None,
        default_config: ExtractionConfig | None = None,
        logger: SoupsLogger | None = None,
    ):
        """
        Initialize the adaptive parser.

        Args:
            learner: Selector learner consulted when extraction fails.
            fetcher: HTTP fetcher used by parse_and_learn.
            extractor: Article extractor.
            default_config: Configuration for sites without a preset.
            logger: Logger instance.
        """
        self.learner = learner
        self.fetcher = fetcher or Fetcher()
        self.logger = logger or SoupsLogger("adaptive_parser")
        self.extractor = extractor or ArticleExtractor(logger=self.logger)
        self.current_config = default_config or GENERIC_CONFIG

    async def parse_and_learn(
        self,
        url: str,
        known_content: dict[ContentType | str, str] | None = None,
    ) -> ArticleContent:
        """
        Fetch a page and extract its article, learning selectors if needed.

        Args:
            url: Article URL.
            known_content: Text known to appear in some fields, keyed by
                content-type. Enables discovery of new selectors.

        Returns:
            The extracted article.

        Raises:
            InvalidURLError: If the URL has no host.
            FetchError: If the page cannot be fetched.
            ExtractionError: If extraction fails even after learning.
        """
        result = await self.fetcher.fetch(url)
        return await self.parse_html(url, result.html, known_content)

    async def parse_html(
        self,
        url: str,
        html: str,
        known_content: dict[ContentType | str, str] | None = None,
    ) -> ArticleContent:
        """
        Extract an article from markup already in hand.

        Args:
            url: URL the markup came from; its host selects presets and
                learned patterns.
            html: Page markup.
            known_content: Text known to appear in some fields.

        Returns:
            The extracted article.

        Raises:
            InvalidURLError: If the URL has no host.
            ParseError: If the markup cannot be parsed.
            ExtractionError: If extraction fails even after learning.
        """
        domain = get_domain(url)
        if not domain:
            raise InvalidURLError(url)

        preset = preset_for_domain(domain)
        if preset is not None:
            self.current_config = preset

        document = parse_document(html, url)

        try:
            article = self.extractor.extract(document, url, self.current_config)
        except ExtractionError as e:
            self.logger.info(
                "Extraction failed, learning selectors",
                url=url,
                domain=domain,
                config_source=self.current_config.source,
                error=e.message,
            )
            try:
                article = await self._learn_and_retry(document, url, domain, known_content)
            except ExtractionError:
                metrics.record_extraction(domain, "learned", False)
                self.logger.extraction_result(
                    url=url,
                    success=False,
                    source="learned",
                    fields_extracted=[],
                )
                raise

        metrics.record_extraction(domain, article.config_source, True)
        self.logger.extraction_result(
            url=url,
            success=True,
            source=article.config_source,
            fields_extracted=article.fields_extracted(),
        )
        return article

    async def _learn_and_retry(
        self,
        document: Tag,
        url: str,
        domain: str,
        known_content: dict[ContentType | str, str] | None,
    ) -> ArticleContent:
        known = {content_type_key(k): v for k, v in (known_content or {}).items()}

        config = self.current_config
        for content_type in ContentType:
            selectors = await self.learner.learn_selectors(
                document,
                content_type,
                domain,
                known_content=known.get(content_type.value),
            )
            config = config.with_selectors(content_type, selectors)
        self.current_config = config

        try:
            article = self.extractor.extract(document, url, config)
        except ElementNotFoundError as e:
            await self._report(config, domain, success=False, only_field=e.field)
            raise

        await self._report(config, domain, success=True)
        return article

    async def _report(
        self,
        config: ExtractionConfig,
        domain: str,
        success: bool,
        only_field: str | None = None,
    ) -> None:
        """Feed the outcome of a learned retry back to the learner."""
        for content_type in REPORTED_FIELDS:
            if only_field is not None and content_type.value != only_field:
                continue
            for selector in config.selectors_for(content_type):
                await self.learner.report_result(selector, content_type, domain, success)
