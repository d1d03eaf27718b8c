#!/usr/bin/env python3
"""
Demonstration of htmlsoups selector learning across a site redesign.

This script demonstrates:
1. Extraction with the generic configuration (nothing learned yet)
2. Website redesign simulation: the generic selectors stop matching
3. Learning new selectors from known content, then reusing them

Usage:
    python examples/demo_selector_learning.py

Requirements:
    - pip install -e .
"""

import asyncio
import sys

from htmlsoups.core.adaptive_parser import AdaptiveParser
from htmlsoups.exceptions import ExtractionError
from htmlsoups.learning.selector_learner import SelectorLearner
from htmlsoups.models import ArticleContent, ContentType
from htmlsoups.storage.memory_store import InMemoryLearningStorage
from htmlsoups.utils.logging import setup_logging

DOMAIN_URL = "https://news.example.org"


# =============================================================================
# Mock Website HTML - Before and After Redesign
# =============================================================================

INITIAL_HTML = """
<!DOCTYPE html>
<html>
<body>
    <main>
        <article>
            <h1 class="headline">Breaking: Major AI Breakthrough Announced</h1>
            <span class="author">By Sarah Johnson</span>
            <time datetime="2024-01-28">January 28, 2024</time>
            <p>Researchers at TechLab have announced a major breakthrough.</p>
        </article>
    </main>
</body>
</html>
"""

REDESIGNED_HTML = """
<!DOCTYPE html>
<html>
<body>
    <div class="page">
        <h1 class="story-title">City Council Approves New Transit Budget</h1>
        <div class="content">
            <p>The city council approved the transit budget on Tuesday.</p>
            <p>Construction of the new line begins next spring.</p>
        </div>
    </div>
</body>
</html>
"""

FOLLOW_UP_HTML = REDESIGNED_HTML.replace(
    "City Council Approves New Transit Budget",
    "Library Reopens After Renovation",
).replace(
    "The city council approved the transit budget on Tuesday.",
    "The downtown library reopened its doors this weekend.",
)


def print_section(title: str) -> None:
    print(f"\n{'=' * 80}")
    print(f"  {title}")
    print(f"{'=' * 80}\n")


def print_article(article: ArticleContent) -> None:
    print(f"Title:     {article.title}")
    print(f"Content:   {article.content[:70]}...")
    print(f"Author:    {article.author or 'N/A'}")
    print(f"Published: {article.publish_date or 'N/A'}")
    print(f"Selectors: {article.config_source}")


async def main() -> None:
    """Run the demo."""
    setup_logging(level="WARNING", format_type="console")

    learner = await SelectorLearner.create(InMemoryLearningStorage())
    parser = AdaptiveParser(learner)

    print_section("PHASE 1: GENERIC CONFIGURATION")
    print_article(await parser.parse_html(f"{DOMAIN_URL}/ai", INITIAL_HTML))

    print_section("PHASE 2: REDESIGN WITHOUT KNOWN CONTENT")
    try:
        await parser.parse_html(f"{DOMAIN_URL}/budget", REDESIGNED_HTML)
    except ExtractionError as e:
        print(f"Extraction failed as expected: {e.message}")

    print_section("PHASE 3: LEARNING FROM KNOWN CONTENT")
    article = await parser.parse_html(
        f"{DOMAIN_URL}/budget",
        REDESIGNED_HTML,
        known_content={
            ContentType.TITLE: "City Council Approves New Transit Budget",
            ContentType.CONTENT: "approved the transit budget",
        },
    )
    print_article(article)

    domain = "news.example.org"
    for content_type in (ContentType.TITLE, ContentType.CONTENT):
        print(f"\nLearned {content_type.value} selectors:")
        for selector in learner.get_learned_selectors(content_type, domain):
            confidence = learner.get_selector_confidence(selector, content_type)
            print(f"  {selector:<20} confidence {confidence:.2f}")

    print_section("PHASE 4: NEXT PAGE REUSES LEARNED SELECTORS")
    print_article(await parser.parse_html(f"{DOMAIN_URL}/library", FOLLOW_UP_HTML))

    print(f"\nStats: {learner.get_stats()}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\nDemo interrupted by user")
        sys.exit(0)
