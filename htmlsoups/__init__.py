"""
HTMLSoups - adaptive article extraction with learned CSS selectors.

Extracts news articles with per-site selector presets and, when a site's
markup changes, learns new selectors from the page and remembers them per
domain.
"""

__version__ = "0.1.0"

# The learning package must be imported before storage
from htmlsoups.learning import LearningState, SelectorCandidate, SelectorLearner
from htmlsoups.storage import (
    FileLearningStorage,
    InMemoryLearningStorage,
    LearningStorage,
    RedisLearningStorage,
    create_learning_storage,
)
from htmlsoups.core import AdaptiveParser, Fetcher
from htmlsoups.extraction import ArticleExtractor
from htmlsoups.models import ArticleContent, ContentType, ExtractionConfig

__all__ = [
    "AdaptiveParser",
    "ArticleContent",
    "ArticleExtractor",
    "ContentType",
    "ExtractionConfig",
    "Fetcher",
    "FileLearningStorage",
    "InMemoryLearningStorage",
    "LearningState",
    "LearningStorage",
    "RedisLearningStorage",
    "SelectorCandidate",
    "SelectorLearner",
    "__version__",
]
