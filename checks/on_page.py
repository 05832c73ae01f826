"""On-Page SEO Probe - page metadata checks

Title, meta description, H1, image alt text, canonical and Open Graph.
Starts at 100 and subtracts a fixed penalty per issue.
"""

from typing import Any, Dict

import httpx
from bs4 import BeautifulSoup

from fetcher import fetch_page
from models import ProbeOutcome

PENALTIES = {
    'missing_title': 15,
    'title_length': 5,
    'missing_meta_description': 15,
    'meta_description_length': 5,
    'missing_h1': 10,
    'multiple_h1': 5,
    'image_alt_each': 2,
    'image_alt_max': 10,
    'missing_canonical': 5,
    'incomplete_open_graph': 5,
}


def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find('meta', attrs=attrs)
    return str(tag.get('content', '')).strip() if tag else ''


def analyze_on_page(soup: BeautifulSoup) -> ProbeOutcome:
    """Score page metadata from parsed HTML."""
    issues = []
    details: Dict[str, Any] = {}
    score = 100

    # Title
    title_tag = soup.find('title')
    title = title_tag.get_text().strip() if title_tag else ''
    details['title'] = title
    if not title:
        issues.append('Missing page title')
        score -= PENALTIES['missing_title']
    elif len(title) < 30:
        issues.append('Title tag is too short (< 30 characters)')
        score -= PENALTIES['title_length']
    elif len(title) > 60:
        issues.append('Title tag is too long (> 60 characters)')
        score -= PENALTIES['title_length']

    # Meta description
    meta_description = _meta_content(soup, name='description')
    details['metaDescription'] = meta_description
    if not meta_description:
        issues.append('Missing meta description')
        score -= PENALTIES['missing_meta_description']
    elif len(meta_description) < 120:
        issues.append('Meta description is too short (< 120 characters)')
        score -= PENALTIES['meta_description_length']
    elif len(meta_description) > 160:
        issues.append('Meta description is too long (> 160 characters)')
        score -= PENALTIES['meta_description_length']

    # H1
    h1_count = len(soup.find_all('h1'))
    details['h1Count'] = h1_count
    if h1_count == 0:
        issues.append('No H1 heading found')
        score -= PENALTIES['missing_h1']
    elif h1_count > 1:
        issues.append(f'Multiple H1 headings found ({h1_count})')
        score -= PENALTIES['multiple_h1']

    # Images (empty alt counts as missing)
    images = soup.find_all('img')
    without_alt = sum(1 for img in images if not img.get('alt'))
    details['totalImages'] = len(images)
    details['imagesWithoutAlt'] = without_alt
    if without_alt > 0:
        issues.append(f'{without_alt} images missing alt text')
        score -= min(PENALTIES['image_alt_max'], without_alt * PENALTIES['image_alt_each'])

    # Canonical
    canonical_tag = soup.find('link', rel='canonical')
    canonical = canonical_tag.get('href') if canonical_tag else None
    details['canonical'] = canonical
    if not canonical:
        issues.append('Missing canonical tag')
        score -= PENALTIES['missing_canonical']

    # Open Graph
    og_title = _meta_content(soup, property='og:title')
    og_description = _meta_content(soup, property='og:description')
    og_image = _meta_content(soup, property='og:image')
    details['openGraph'] = {'title': og_title, 'description': og_description, 'image': og_image}
    if not og_title or not og_description:
        issues.append('Incomplete Open Graph tags')
        score -= PENALTIES['incomplete_open_graph']

    return ProbeOutcome(score=max(0, score), issues=issues, details=details)


async def run_on_page_probe(client: httpx.AsyncClient, url: str) -> ProbeOutcome:
    page = await fetch_page(client, url)
    soup = BeautifulSoup(page.html, 'lxml')
    return analyze_on_page(soup)
