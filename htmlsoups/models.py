"""
Core data models for htmlsoups.

These models are used throughout the codebase for type safety and serialization.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# =============================================================================
# Enums
# =============================================================================


class ContentType(str, Enum):
    """Article fields a selector can be learned for."""

    TITLE = "title"
    CONTENT = "content"
    AUTHOR = "author"
    DATE = "date"
    IMAGE = "image"
    TOPIC = "topic"
    ORGANIZATION = "organization"
    LOCATION = "location"


# Fields holding a single selector; the rest hold a list
SINGLE_SELECTOR_FIELDS = {
    ContentType.TITLE: "title",
    ContentType.CONTENT: "content",
    ContentType.AUTHOR: "author",
    ContentType.DATE: "date",
}

MULTI_SELECTOR_FIELDS = {
    ContentType.IMAGE: "images",
    ContentType.TOPIC: "topics",
    ContentType.ORGANIZATION: "organizations",
    ContentType.LOCATION: "locations",
}


# =============================================================================
# Fetch Models
# =============================================================================


@dataclass
class FetchResult:
    """Raw markup returned by the fetcher."""

    url: str
    html: str
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    duration_ms: float = 0.0
    attempts: int = 1
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_bytes(
        cls,
        url: str,
        content: bytes,
        encoding: str | None = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> "FetchResult":
        """Decode a response body, falling back to UTF-8."""
        try:
            html = content.decode(encoding or "utf-8", errors="replace")
        except LookupError:
            html = content.decode("utf-8", errors="replace")
        return cls(
            url=url,
            html=html,
            status_code=status_code,
            headers=headers or {},
        )


# =============================================================================
# Extraction Configuration
# =============================================================================


@dataclass(frozen=True)
class ExtractionConfig:
    """
    CSS selectors per content-type.

    Single-valued fields take one selector string, which may itself be a
    comma-separated selector group. List fields take any number of selectors.
    """

    title: str
    content: str
    author: str | None = None
    date: str | None = None
    images: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    organizations: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    source: str = "default"

    def selectors_for(self, content_type: ContentType | str) -> list[str]:
        """Return the configured selectors for a content-type."""
        content_type = ContentType(content_type)
        if content_type in SINGLE_SELECTOR_FIELDS:
            value = getattr(self, SINGLE_SELECTOR_FIELDS[content_type])
            return [value] if value else []
        return list(getattr(self, MULTI_SELECTOR_FIELDS[content_type]))

    def with_selectors(
        self,
        content_type: ContentType | str,
        selectors: list[str],
        source: str = "learned",
    ) -> "ExtractionConfig":
        """
        Return a copy using the top learned selector for a content-type.

        An empty selector list leaves the field unchanged.
        """
        if not selectors:
            return self

        content_type = ContentType(content_type)
        if content_type in SINGLE_SELECTOR_FIELDS:
            changes: dict[str, Any] = {SINGLE_SELECTOR_FIELDS[content_type]: selectors[0]}
        else:
            changes = {MULTI_SELECTOR_FIELDS[content_type]: (selectors[0],)}
        return replace(self, source=source, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary keyed by content-type."""
        return {ct.value: self.selectors_for(ct) for ct in ContentType}


# =============================================================================
# Extraction Result Models
# =============================================================================


@dataclass
class ArticleContent:
    """Fields extracted from an article page."""

    source_url: str
    title: str
    content: str
    author: str | None = None
    publish_date: str | None = None
    images: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    organizations: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)

    config_source: str = "default"
    extracted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def fields_extracted(self) -> list[str]:
        """Names of the fields that hold a value."""
        names = ["title", "content"]
        for name in ("author", "publish_date", "images", "topics", "organizations", "locations"):
            if getattr(self, name):
                names.append(name)
        return names

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_url": self.source_url,
            "title": self.title,
            "content": self.content,
            "author": self.author,
            "publish_date": self.publish_date,
            "images": self.images,
            "topics": self.topics,
            "organizations": self.organizations,
            "locations": self.locations,
            "config_source": self.config_source,
            "extracted_at": self.extracted_at.isoformat(),
        }


def content_type_key(content_type: ContentType | str) -> str:
    """Storage key for a content-type given as enum member or plain string."""
    if isinstance(content_type, ContentType):
        return content_type.value
    return str(content_type)
