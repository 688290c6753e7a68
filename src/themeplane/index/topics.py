"""Theme topic map.

Maps the words people use for parts of a storefront ("product page",
"cart drawer", "mega menu") to the file path patterns that implement them
in a typical theme. Files matching a topic mentioned in a query get a
score boost in fuzzy search and are pulled into context as priority files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from themeplane.extraction.paths import lookup_key

DEFAULT_TOPIC_BOOST = 8


@dataclass(frozen=True, slots=True)
class ThemeTopic:
    """Trigger keywords and the path globs they boost (``*`` matches anything)."""

    name: str
    keywords: tuple[str, ...]
    patterns: tuple[str, ...]
    boost: int = DEFAULT_TOPIC_BOOST


THEME_TOPICS: tuple[ThemeTopic, ...] = (
    ThemeTopic(
        name="product",
        keywords=(
            "product",
            "pdp",
            "variant",
            "add to cart",
            "buy button",
            "product form",
            "restock",
            "color swatch",
        ),
        patterns=(
            "templates/product*.json",
            "sections/main-product*.liquid",
            "sections/product-*.liquid",
            "snippets/product-*.liquid",
            "snippets/price*.liquid",
            "snippets/buy-buttons*.liquid",
            "assets/product*.js",
            "assets/product*.css",
        ),
    ),
    ThemeTopic(
        name="media",
        keywords=(
            "image",
            "thumbnail",
            "media",
            "gallery",
            "slider",
            "carousel",
            "lazy",
            "srcset",
        ),
        patterns=(
            "snippets/product-thumbnail*.liquid",
            "snippets/product-media*.liquid",
            "sections/main-product*.liquid",
            "assets/lazysizes*.js",
            "assets/media-gallery*.js",
            "assets/slider*.js",
            "assets/flickity*.js",
        ),
        boost=10,
    ),
    ThemeTopic(
        name="collection",
        keywords=("collection", "product grid", "product list", "filter", "facet", "sort"),
        patterns=(
            "templates/collection*.json",
            "sections/main-collection*.liquid",
            "sections/collection-*.liquid",
            "snippets/product-card*.liquid",
            "snippets/card-product*.liquid",
            "assets/collection*.js",
            "assets/facets*.js",
        ),
    ),
    ThemeTopic(
        name="cart",
        keywords=("cart", "checkout", "line item", "mini cart"),
        patterns=(
            "templates/cart*.json",
            "sections/main-cart*.liquid",
            "sections/cart-*.liquid",
            "snippets/cart-*.liquid",
            "assets/cart*.js",
        ),
    ),
    ThemeTopic(
        name="header",
        keywords=("header", "navigation", "nav", "menu", "announcement bar", "logo"),
        patterns=(
            "sections/header*.liquid",
            "sections/announcement*.liquid",
            "snippets/header-*.liquid",
            "snippets/menu-*.liquid",
            "assets/header*.js",
            "assets/menu*.js",
        ),
    ),
    ThemeTopic(
        name="footer",
        keywords=("footer", "newsletter", "subscribe"),
        patterns=("sections/footer*.liquid", "snippets/footer-*.liquid"),
    ),
    ThemeTopic(
        name="layout",
        keywords=("layout", "theme.liquid", "global", "body class", "preloader"),
        patterns=(
            "layout/theme.liquid",
            "layout/password.liquid",
            "config/settings_schema.json",
            "config/settings_data.json",
            "assets/base*.css",
            "assets/global*.js",
            "assets/theme*.js",
            "assets/theme*.css",
        ),
    ),
    ThemeTopic(
        name="blog",
        keywords=("blog", "article", "author"),
        patterns=(
            "templates/blog*.json",
            "templates/article*.json",
            "sections/main-blog*.liquid",
            "sections/main-article*.liquid",
            "sections/blog-*.liquid",
            "sections/article-*.liquid",
        ),
    ),
    ThemeTopic(
        name="search",
        keywords=("search", "predictive search"),
        patterns=(
            "templates/search*.json",
            "sections/main-search*.liquid",
            "sections/predictive-search*.liquid",
            "assets/search*.js",
            "assets/predictive-search*.js",
        ),
    ),
    ThemeTopic(
        name="page",
        keywords=("about", "contact", "faq"),
        patterns=(
            "templates/page*.json",
            "sections/main-page*.liquid",
            "sections/contact-form*.liquid",
        ),
    ),
    ThemeTopic(
        name="styling",
        keywords=("style", "css", "color", "font", "spacing", "animation", "transition"),
        patterns=(
            "assets/base*.css",
            "assets/section-*.css",
            "assets/component-*.css",
            "assets/custom*.css",
            "assets/theme*.css",
        ),
    ),
    ThemeTopic(
        name="scripting",
        keywords=("javascript", "script", "click", "event", "interactive", "ajax"),
        patterns=(
            "assets/global*.js",
            "assets/theme*.js",
            "assets/custom*.js",
            "assets/section-*.js",
        ),
    ),
)


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    body = ".*".join(re.escape(part) for part in pattern.lower().split("*"))
    return re.compile(rf"(^|/){body}$")


def match_glob(pattern: str, path: str) -> bool:
    """Case-insensitive glob match anchored at a segment boundary and the path end."""
    return _compile_glob(pattern).search(lookup_key(path)) is not None


def match_topics(message: str, topics: tuple[ThemeTopic, ...] = THEME_TOPICS) -> list[ThemeTopic]:
    """Every topic with at least one keyword contained in the message."""
    lowered = message.lower()
    return [t for t in topics if any(kw in lowered for kw in t.keywords)]


def topic_matches_path(topic: ThemeTopic, path: str) -> bool:
    return any(match_glob(pattern, path) for pattern in topic.patterns)
