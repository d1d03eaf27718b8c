"""Content extraction from parsed documents."""

from htmlsoups.extraction.article_extractor import ArticleExtractor

__all__ = ["ArticleExtractor"]
