"""
Static extraction presets.

GENERIC_CONFIG is the starting point for unknown sites. FALLBACK_CONFIG uses
broad selector groups and suits one-off extraction. SITE_PRESETS holds
hand-written configurations for known news sites.
"""

from htmlsoups.models import ExtractionConfig

GENERIC_CONFIG = ExtractionConfig(
    title="h1",
    content="article",
    author="div.author, span.author",
    date="time, div.date, span.date",
    images=("img.article-image", "img.featured-image"),
    topics=("div.category", "span.category"),
    organizations=("div.source", "span.source"),
    locations=("div.location", "span.location"),
    source="generic",
)

FALLBACK_CONFIG = ExtractionConfig(
    title="h1, .article-title, .entry-title, .headline",
    content="article, .article-content, .entry-content, .article-body",
    author=".author, .byline, .writer, .meta-author",
    date="time, .published, .post-date",
    images=("img.article-image", ".featured-image img", "article img"),
    topics=(".tags a", ".categories a", ".topics a"),
    organizations=("article p strong", ".article-body strong"),
    locations=(".location", "p em:first-of-type"),
    source="fallback",
)

_KUTV = ExtractionConfig(
    title="h1.article-title",
    content="div.article-content",
    author="div.article-author",
    date="div.article-date",
    images=("img.article-image",),
    topics=("div.article-category",),
    organizations=("div.article-source",),
    locations=("div.article-location",),
    source="preset:kutv.com",
)

_FOX13 = ExtractionConfig(
    title="h1",
    content="article",
    author="div.byline, span.author, .Article-author",
    date="time, .Article-date, .posted-date",
    images=("img.article-image", ".Article-image img"),
    topics=(".category a", ".Article-tags a", ".tags a"),
    organizations=("article p strong", ".Article-body strong", ".article-body strong"),
    locations=(".location", "p em:first-of-type", "dateline", "article p:first-of-type em"),
    source="preset:fox13now.com",
)

_DESERET = ExtractionConfig(
    title="h1.headline",
    content="div.article-body",
    author="div.author-name",
    date="time.published-date",
    images=("div.article-hero img", "div.article-body img"),
    topics=("div.article-tags a", "div.topics a"),
    organizations=("div.article-body p strong",),
    locations=("div.article-location", "div.article-body p em"),
    source="preset:deseret.com",
)

_SLTRIB = ExtractionConfig(
    title="h1.article-title",
    content="div.article-content",
    author="div.byline a",
    date="time.published",
    images=("figure.article-image img",),
    topics=("div.article-topics a",),
    organizations=("div.article-content p strong",),
    locations=("div.article-dateline",),
    source="preset:sltrib.com",
)

_KSL = ExtractionConfig(
    title="h1.headline",
    content="div.article-content",
    author="div.author-block a",
    date="time.posted-date",
    images=("div.article-image img", "div.article-content img"),
    topics=("div.tags a",),
    organizations=("div.article-content p strong",),
    locations=("div.location-tag",),
    source="preset:ksl.com",
)

_LEHI_FREE_PRESS = ExtractionConfig(
    title="h1",
    content=".entry-content, article",
    author="span.meta-author a, .post-author, .byline, article .meta-author",
    date="time.meta-date, span.meta-date, .post-date",
    images=("article img", ".entry-content img"),
    topics=(".category a", ".tags a", ".post-categories a"),
    organizations=(".entry-content p strong", "article p strong"),
    locations=(".entry-content p em:first-of-type", "article p em:first-of-type"),
    source="preset:lehifreepress.com",
)

SITE_PRESETS: dict[str, ExtractionConfig] = {
    "kutv.com": _KUTV,
    "fox13now.com": _FOX13,
    "deseret.com": _DESERET,
    "deseretnews.com": _DESERET,
    "sltrib.com": _SLTRIB,
    "ksl.com": _KSL,
    "lehifreepress.com": _LEHI_FREE_PRESS,
}


def preset_for_domain(domain: str) -> ExtractionConfig | None:
    """
    Find the preset for a host.

    Matches the registered domain itself and any of its subdomains, so
    "www.ksl.com" uses the ksl.com preset.

    Args:
        domain: Host name, e.g. from get_domain().

    Returns:
        The site preset or None for unknown sites.
    """
    host = domain.lower().rstrip(".")
    for site, config in SITE_PRESETS.items():
        if host == site or host.endswith("." + site):
            return config
    return None
