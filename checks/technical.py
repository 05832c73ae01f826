"""Technical SEO Probe - crawlability and baseline hygiene

Checks robots.txt, sitemap.xml, HTTPS, server response time and the mobile
viewport meta tag.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
from bs4 import BeautifulSoup

from fetcher import fetch_page, fetch_robots_txt, fetch_sitemap
from models import ProbeOutcome

PENALTIES = {
    'missing_robots': 10,
    'missing_sitemap': 10,
    'no_https': 20,
    'slow_response': 15,
    'moderate_response': 5,
    'missing_viewport': 15,
}

SLOW_RESPONSE_MS = 3000
MODERATE_RESPONSE_MS = 1500


def analyze_technical(
    url: str,
    soup: BeautifulSoup,
    robots_txt: Optional[str],
    sitemap_found: bool,
    response_time_ms: int,
) -> ProbeOutcome:
    """Score technical SEO signals gathered for `url`."""
    issues = []
    details: Dict[str, Any] = {}
    score = 100

    if robots_txt is None:
        issues.append('robots.txt not found')
        details['robotsTxt'] = 'Not found'
        score -= PENALTIES['missing_robots']
    else:
        details['robotsTxt'] = 'Found'
        details['robotsContent'] = robots_txt[:200]

    if sitemap_found:
        details['sitemap'] = 'Found'
    else:
        issues.append('sitemap.xml not found')
        details['sitemap'] = 'Not found'
        score -= PENALTIES['missing_sitemap']

    details['https'] = url.startswith('https://')
    if not details['https']:
        issues.append('Website not using HTTPS')
        score -= PENALTIES['no_https']

    details['responseTime'] = f'{response_time_ms}ms'
    if response_time_ms > SLOW_RESPONSE_MS:
        issues.append(f'Slow response time ({response_time_ms}ms)')
        score -= PENALTIES['slow_response']
    elif response_time_ms > MODERATE_RESPONSE_MS:
        issues.append(f'Moderate response time ({response_time_ms}ms)')
        score -= PENALTIES['moderate_response']

    viewport_tag = soup.find('meta', attrs={'name': 'viewport'})
    viewport = viewport_tag.get('content') if viewport_tag else None
    details['viewport'] = viewport
    if not viewport:
        issues.append('Missing viewport meta tag (not mobile-friendly)')
        score -= PENALTIES['missing_viewport']

    return ProbeOutcome(score=max(0, score), issues=issues, details=details)


async def run_technical_probe(client: httpx.AsyncClient, url: str) -> ProbeOutcome:
    robots_txt, sitemap_found, page = await asyncio.gather(
        fetch_robots_txt(client, url),
        fetch_sitemap(client, url),
        fetch_page(client, url),
    )
    soup = BeautifulSoup(page.html, 'lxml')
    return analyze_technical(url, soup, robots_txt, sitemap_found, page.elapsed_ms)
