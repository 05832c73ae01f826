"""Security Probe - HTTPS, response security headers and mixed content."""

from typing import Any, Dict

import httpx
from bs4 import BeautifulSoup

from fetcher import PageResponse, fetch_page
from models import ProbeOutcome

# header -> (penalty, issue)
SECURITY_HEADERS = {
    'x-frame-options': (10, 'Missing X-Frame-Options header'),
    'x-content-type-options': (10, 'Missing X-Content-Type-Options header'),
    'strict-transport-security': (15, 'Missing HSTS header'),
    'content-security-policy': (10, 'Missing Content-Security-Policy header'),
}

NO_HTTPS_PENALTY = 30
MIXED_CONTENT_PENALTY = 15


def count_insecure_resources(soup: BeautifulSoup) -> int:
    """Scripts, links and images loaded over plain http://."""
    count = 0
    for tag_name, attr in (('script', 'src'), ('link', 'href'), ('img', 'src')):
        for tag in soup.find_all(tag_name, attrs={attr: True}):
            if str(tag[attr]).strip().lower().startswith('http://'):
                count += 1
    return count


def analyze_security(url: str, page: PageResponse, soup: BeautifulSoup) -> ProbeOutcome:
    issues = []
    details: Dict[str, Any] = {}
    score = 100

    details['https'] = url.startswith('https://')
    if not details['https']:
        issues.append('Not using HTTPS')
        score -= NO_HTTPS_PENALTY

    header_summary = {}
    for header, (penalty, issue) in SECURITY_HEADERS.items():
        value = page.header(header)
        if not value:
            issues.append(issue)
            score -= penalty
        if header == 'content-security-policy':
            header_summary[header] = 'Present' if value else 'Missing'
        else:
            header_summary[header] = value or 'Missing'
    details['securityHeaders'] = header_summary

    insecure = count_insecure_resources(soup)
    details['mixedContent'] = insecure
    if insecure > 0:
        issues.append(f'{insecure} insecure resources (HTTP) found')
        score -= MIXED_CONTENT_PENALTY

    return ProbeOutcome(score=max(0, score), issues=issues, details=details)


async def run_security_probe(client: httpx.AsyncClient, url: str) -> ProbeOutcome:
    page = await fetch_page(client, url)
    soup = BeautifulSoup(page.html, 'lxml')
    return analyze_security(url, page, soup)
