"""Content Quality Probe

Word count, internal/external linking, heading structure and a naive
duplicate-paragraph check. A small sample of internal links is probed for
broken targets; the count is reported in details only.
"""

import asyncio
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

import config
from fetcher import check_link, fetch_page
from models import ProbeOutcome

PENALTIES = {
    'insufficient_content': 20,
    'low_content': 10,
    'few_internal_links': 10,
    'missing_h2': 10,
    'duplicate_content': 5,
}

MIN_WORDS = 300
TARGET_WORDS = 600
MIN_INTERNAL_LINKS = 3


def _split_links(soup: BeautifulSoup, url: str):
    """Partition anchors into internal and external absolute URLs."""
    host = urlparse(url).netloc
    internal: List[str] = []
    external: List[str] = []
    for anchor in soup.find_all('a', href=True):
        href = anchor['href'].strip()
        if not href or href.startswith(('#', 'mailto:', 'tel:', 'javascript:')):
            continue
        absolute = urljoin(url, href)
        if href.startswith('/') or urlparse(absolute).netloc == host:
            internal.append(absolute)
        elif href.startswith(('http://', 'https://')):
            external.append(absolute)
    return internal, external


def analyze_content(soup: BeautifulSoup, url: str, broken_links: Optional[int] = None) -> ProbeOutcome:
    """Score content depth and structure."""
    issues = []
    details: Dict[str, Any] = {}
    score = 100

    body = soup.find('body') or soup
    body_text = re.sub(r'\s+', ' ', body.get_text(' ')).strip()
    word_count = len(body_text.split()) if body_text else 0
    details['wordCount'] = word_count
    if word_count < MIN_WORDS:
        issues.append(f'Insufficient content (< {MIN_WORDS} words)')
        score -= PENALTIES['insufficient_content']
    elif word_count < TARGET_WORDS:
        issues.append(f'Low content volume (< {TARGET_WORDS} words)')
        score -= PENALTIES['low_content']

    internal, external = _split_links(soup, url)
    details['internalLinks'] = len(internal)
    details['externalLinks'] = len(external)
    if len(internal) < MIN_INTERNAL_LINKS:
        issues.append(f'Few internal links (< {MIN_INTERNAL_LINKS})')
        score -= PENALTIES['few_internal_links']

    h2_count = len(soup.find_all('h2'))
    h3_count = len(soup.find_all('h3'))
    details['headingStructure'] = {'h2': h2_count, 'h3': h3_count}
    if h2_count == 0:
        issues.append('No H2 headings found')
        score -= PENALTIES['missing_h2']

    paragraphs = [p.get_text(strip=True) for p in soup.find_all('p')]
    paragraphs = [p for p in paragraphs if p]
    if len(paragraphs) > len(set(paragraphs)):
        issues.append('Possible duplicate content detected')
        score -= PENALTIES['duplicate_content']

    if broken_links is not None:
        details['brokenLinks'] = broken_links

    return ProbeOutcome(score=max(0, score), issues=issues, details=details)


async def count_broken_links(client: httpx.AsyncClient, links: List[str],
                             sample_size: int = config.BROKEN_LINK_SAMPLE) -> int:
    sample = list(dict.fromkeys(links))[:sample_size]
    if not sample:
        return 0
    results = await asyncio.gather(*[check_link(client, link) for link in sample])
    return sum(1 for ok in results if not ok)


async def run_content_probe(client: httpx.AsyncClient, url: str) -> ProbeOutcome:
    page = await fetch_page(client, url)
    soup = BeautifulSoup(page.html, 'lxml')
    internal, _ = _split_links(soup, page.final_url)
    broken = await count_broken_links(client, internal)
    return analyze_content(soup, page.final_url, broken_links=broken)
