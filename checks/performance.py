"""Performance Probe - load time, payload size, compression, caching."""

from typing import Any, Dict, Optional

import httpx
from bs4 import BeautifulSoup

import config
from fetcher import PageResponse, fetch_page
from models import ProbeOutcome
from scoring import round_half_up

PENALTIES = {
    'slow_load': 20,
    'moderate_load': 10,
    'large_page': 15,
    'moderate_page': 5,
    'no_compression': 10,
    'no_cache_headers': 10,
    'too_many_scripts': 10,
}

SLOW_LOAD_MS = 3000
MODERATE_LOAD_MS = 1500
LARGE_PAGE_KB = 3000
MODERATE_PAGE_KB = 1500
MAX_SCRIPTS = 20
ACCEPTED_ENCODINGS = ('gzip', 'br')


def analyze_performance(page: PageResponse, soup: Optional[BeautifulSoup] = None) -> ProbeOutcome:
    issues = []
    details: Dict[str, Any] = {}
    score = 100

    load_ms = page.elapsed_ms
    details['loadTime'] = f'{load_ms}ms'
    if load_ms > SLOW_LOAD_MS:
        issues.append(f'Slow page load ({load_ms}ms)')
        score -= PENALTIES['slow_load']
    elif load_ms > MODERATE_LOAD_MS:
        issues.append(f'Moderate page load ({load_ms}ms)')
        score -= PENALTIES['moderate_load']

    size_kb = round_half_up(page.size_bytes / 1024)
    details['pageSize'] = f'{size_kb}KB'
    if size_kb > LARGE_PAGE_KB:
        issues.append(f'Large page size ({size_kb}KB)')
        score -= PENALTIES['large_page']
    elif size_kb > MODERATE_PAGE_KB:
        issues.append(f'Moderate page size ({size_kb}KB)')
        score -= PENALTIES['moderate_page']

    encoding = page.header('content-encoding') or ''
    details['compression'] = encoding or 'None'
    if not any(name in encoding.lower() for name in ACCEPTED_ENCODINGS):
        issues.append('No GZIP compression detected')
        score -= PENALTIES['no_compression']

    cache_control = page.header('cache-control')
    details['caching'] = cache_control or 'None'
    if not cache_control:
        issues.append('No cache headers found')
        score -= PENALTIES['no_cache_headers']

    if soup is None:
        soup = BeautifulSoup(page.html, 'lxml')
    scripts = len(soup.find_all('script'))
    details['resources'] = {
        'scripts': scripts,
        'stylesheets': len(soup.find_all('link', rel='stylesheet')),
        'images': len(soup.find_all('img')),
    }
    if scripts > MAX_SCRIPTS:
        issues.append(f'Too many scripts ({scripts})')
        score -= PENALTIES['too_many_scripts']

    return ProbeOutcome(score=max(0, score), issues=issues, details=details)


async def run_performance_probe(client: httpx.AsyncClient, url: str) -> ProbeOutcome:
    page = await fetch_page(client, url, timeout=config.PERFORMANCE_TIMEOUT)
    return analyze_performance(page)
