"""Citation source allow-lists and classification.

The visibility prompt asks the model to cite only real review/comparison
domains relevant to the product category; answers are filtered back
against the same lists.
"""

import logging
from typing import Iterable, List

logger = logging.getLogger(__name__)


CATEGORY_SOURCES = {
    # Tech & Software
    'cms': ['g2.com', 'capterra.com', 'trustradius.com', 'softwareadvice.com', 'getapp.com'],
    'crm': ['g2.com', 'capterra.com', 'trustradius.com', 'softwareadvice.com', 'pcmag.com'],
    'marketing': ['g2.com', 'capterra.com', 'martech.org', 'chiefmartech.com', 'marketingland.com'],
    'ecommerce': ['shopify.com/blog', 'bigcommerce.com/blog', 'ecommerceguide.com', 'practicalecommerce.com', 'digitalcommerce360.com'],
    'hosting': ['hostingadvice.com', 'whoishostingthis.com', 'webhostingsecretrevealed.net', 'techradar.com', 'pcmag.com'],
    'cloud': ['gartner.com', 'forrester.com', 'zdnet.com', 'infoworld.com', 'cloudcomputing-news.net'],
    # Hardware & Electronics
    'smartphone': ['gsmarena.com', 'phonearena.com', 'androidauthority.com', 'cnet.com', 'theverge.com'],
    'laptop': ['laptopmag.com', 'notebookcheck.net', 'pcmag.com', 'tomsguide.com', 'techradar.com'],
    'tablet': ['androidcentral.com', 'imore.com', 'pcmag.com', 'cnet.com', 'theverge.com'],
    'wearable': ['wareable.com', 'androidcentral.com', 'imore.com', 'cnet.com', 'theverge.com'],
    # Business & Productivity
    'project management': ['g2.com', 'capterra.com', 'softwareadvice.com', 'projectmanagement.com', 'techradar.com'],
    'collaboration': ['g2.com', 'capterra.com', 'uctoday.com', 'techradar.com', 'pcmag.com'],
    'communication': ['g2.com', 'capterra.com', 'uctoday.com', 'getvoip.com', 'pcmag.com'],
}

DEFAULT_SOURCES = [
    'techcrunch.com', 'theverge.com', 'cnet.com', 'wired.com', 'engadget.com',
    'zdnet.com', 'pcmag.com', 'tomsguide.com', 'digitaltrends.com',
]

GENERAL_SOURCES = [
    'reddit.com', 'producthunt.com', 'forbes.com', 'businessinsider.com',
    'venturebeat.com', 'mashable.com', 'arstechnica.com',
]

PLACEHOLDER_MARKERS = ('example', 'site1', 'site2', 'placeholder', 'test.com')

MAX_SOURCES_PER_PLATFORM = 5


def get_category_sources(category: str) -> List[str]:
    """Most relevant review/comparison domains for a product category."""
    category_lower = (category or '').lower().strip()
    if category_lower:
        for key, sources in CATEGORY_SOURCES.items():
            if key in category_lower or category_lower in key:
                return list(sources)
    return list(DEFAULT_SOURCES)


def allowed_sources(category: str) -> List[str]:
    return get_category_sources(category) + GENERAL_SOURCES


def matches_allowed(source: str, allowed: str) -> bool:
    """Exact domain, a subdomain of it, or a page under an allowed path."""
    host, _, path = source.partition('/')
    allowed_host, _, allowed_path = allowed.partition('/')
    if host != allowed_host and not host.endswith('.' + allowed_host):
        return False
    return not allowed_path or path == allowed_path or path.startswith(allowed_path + '/')


def clean_sources(sources: Iterable[str], category: str) -> List[str]:
    """Drop placeholder and off-list domains, keeping order and uniqueness."""
    allowed = [s.lower() for s in allowed_sources(category)]
    cleaned = []
    for source in sources:
        if not isinstance(source, str) or not source.strip():
            continue
        source_lower = source.strip().lower()
        for prefix in ('https://', 'http://', 'www.'):
            if source_lower.startswith(prefix):
                source_lower = source_lower[len(prefix):]
        source_lower = source_lower.rstrip('/')

        if any(marker in source_lower for marker in PLACEHOLDER_MARKERS):
            logger.warning(f"Removed placeholder source: {source}")
            continue
        if not any(matches_allowed(source_lower, a) for a in allowed):
            logger.warning(f"Removed off-list source: {source}")
            continue
        if source_lower not in cleaned:
            cleaned.append(source_lower)
    return cleaned


def classify_page_type(url: str) -> str:
    url_lower = url.lower()
    if 'review' in url_lower or 'rating' in url_lower:
        return 'Review Site'
    if 'vs' in url_lower or 'compare' in url_lower or 'comparison' in url_lower:
        return 'Comparison Page'
    if 'wiki' in url_lower:
        return 'Knowledge Base'
    if 'news' in url_lower or 'tech' in url_lower:
        return 'News/Tech Site'
    if 'forum' in url_lower or 'reddit' in url_lower or 'stackoverflow' in url_lower:
        return 'Community Forum'
    return 'Blog Article'


def source_weight(index: int) -> float:
    """Display authority weight (0-10 scale) by first-seen rank."""
    return round(9.5 - index * 0.4, 1)
