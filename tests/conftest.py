"""
Pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import fakeredis.aioredis
import pytest
import pytest_asyncio
from bs4 import BeautifulSoup

from htmlsoups.document import parse_document
from htmlsoups.exceptions import StorageError
from htmlsoups.learning.selector_learner import SelectorLearner
from htmlsoups.learning.state import LearningState
from htmlsoups.storage.memory_store import InMemoryLearningStorage


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# =============================================================================
# Mock Redis
# =============================================================================


@pytest_asyncio.fixture
async def mock_redis() -> AsyncGenerator[Any, None]:
    """Provide a fakeredis client for testing."""
    redis = fakeredis.aioredis.FakeRedis()
    yield redis
    await redis.aclose()


# =============================================================================
# Storage and learner fixtures
# =============================================================================


class FailingStorage:
    """Store whose every operation fails, for non-fatal persistence tests."""

    backend = "failing"

    def __init__(self) -> None:
        self.save_attempts = 0

    async def save(self, state: LearningState) -> None:
        self.save_attempts += 1
        raise StorageError("save", self.backend, "disk on fire")

    async def load(self) -> LearningState:
        raise StorageError("load", self.backend, "unreachable")

    async def save_domain_patterns(self, domain: str, patterns: Any) -> None:
        raise StorageError("save_domain", self.backend, "unreachable")

    async def load_domain_patterns(self, domain: str) -> Any:
        raise StorageError("load_domain", self.backend, "unreachable")

    async def list_domains(self) -> list[str]:
        raise StorageError("list_domains", self.backend, "unreachable")


@pytest.fixture
def memory_storage() -> InMemoryLearningStorage:
    return InMemoryLearningStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest_asyncio.fixture
async def learner(memory_storage: InMemoryLearningStorage) -> SelectorLearner:
    """A learner with an empty in-memory store."""
    return await SelectorLearner.create(memory_storage)


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_html_article() -> str:
    """Sample news article HTML for extraction testing."""
    return """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Sample Article Title</title>
</head>
<body>
    <header>
        <nav>
            <a href="/">Home</a>
            <a href="/about">About</a>
        </nav>
    </header>
    <main>
        <article>
            <h1 class="headline">Breaking News: Test Article</h1>
            <div class="author">By John Doe</div>
            <time datetime="2024-01-15T09:30:00+00:00">January 15, 2024</time>
            <div class="article-body">
                <p>This is the first paragraph of the article.</p>
                <p><strong>Utah Jazz</strong> fans gathered downtown.</p>
                <p><em>SALT LAKE CITY</em> - And a third paragraph.</p>
            </div>
            <img class="article-image" src="/images/lead.jpg" alt="Lead">
            <div class="tags"><a href="/t/sports">Sports</a><a href="/t/nba">NBA</a></div>
        </article>
    </main>
    <footer>
        <p>&copy; 2024 Example Site</p>
    </footer>
</body>
</html>
    """.strip()


@pytest.fixture
def headline_html() -> str:
    """Minimal page with a classed headline."""
    return (
        "<html><body>"
        '<h1 class="headline">Breaking News: Test Article</h1>'
        "<p>Body text.</p>"
        "</body></html>"
    )


@pytest.fixture
def headline_document(headline_html: str) -> BeautifulSoup:
    return parse_document(headline_html)
