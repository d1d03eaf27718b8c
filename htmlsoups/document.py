"""
Document model helpers.

Thin wrappers around BeautifulSoup so that selector failures surface as
QueryError and element text is normalized the same way everywhere.
"""

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from htmlsoups.exceptions import ParseError, QueryError


def parse_document(html: str, url: str | None = None) -> BeautifulSoup:
    """
    Parse raw markup into a queryable document.

    Args:
        html: HTML content.
        url: Source URL, used in error details.

    Returns:
        Parsed BeautifulSoup document.

    Raises:
        ParseError: If the markup is not a string or cannot be parsed.
    """
    if not isinstance(html, str):
        raise ParseError(f"Expected HTML string, got {type(html).__name__}", url=url)
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as e:
        raise ParseError(f"HTML parsing failed: {e}", url=url) from e


def ensure_queryable(document: object) -> Tag:
    """Raise ParseError unless the document supports CSS queries."""
    if not isinstance(document, Tag):
        raise ParseError(f"Document is not queryable: {type(document).__name__}")
    return document


def select(document: Tag, selector: str) -> list[Tag]:
    """
    Run a CSS selector against a document.

    Raises:
        QueryError: If the selector is malformed or fails to execute.
    """
    try:
        return document.select(selector)
    except SelectorSyntaxError as e:
        raise QueryError(selector, str(e)) from e
    except (ValueError, TypeError, NotImplementedError) as e:
        raise QueryError(selector, str(e)) from e


def element_text(element: Tag) -> str:
    """Element text with whitespace runs collapsed to single spaces."""
    return " ".join(element.get_text().split())


def element_classes(element: Tag) -> list[str]:
    """Class tokens of an element in document order."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return [c for c in classes if c]


def element_id(element: Tag) -> str:
    """The element's id attribute, or an empty string."""
    value = element.get("id") or ""
    return value if isinstance(value, str) else " ".join(value)
