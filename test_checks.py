"""
Tests for the five SEO health probes.
Run with: pytest test_checks.py -v
"""
import httpx
import pytest
from bs4 import BeautifulSoup

from checks.content import analyze_content, count_broken_links, run_content_probe
from checks.on_page import analyze_on_page
from checks.performance import analyze_performance
from checks.security import analyze_security, count_insecure_resources
from checks.technical import analyze_technical, run_technical_probe
from conftest import GOOD_HEADERS, GOOD_HTML, site_transport
from fetcher import PageResponse

BARE_HTML = "<html><head><title>Hi</title></head><body><p>short</p></body></html>"


def soup_of(html):
    return BeautifulSoup(html, "lxml")


def page_of(html=GOOD_HTML, headers=None, elapsed_ms=200, size_bytes=None):
    return PageResponse(
        url="https://acme.test",
        final_url="https://acme.test/",
        status_code=200,
        html=html,
        headers=dict(GOOD_HEADERS if headers is None else headers),
        elapsed_ms=elapsed_ms,
        size_bytes=len(html) if size_bytes is None else size_bytes,
    )


# ==================== Technical ====================

def test_technical_clean_site():
    outcome = analyze_technical("https://acme.test", soup_of(GOOD_HTML), "User-agent: *", True, 300)
    assert outcome.score == 100
    assert outcome.issues == []
    assert outcome.details["robotsTxt"] == "Found"
    assert outcome.details["https"] is True


def test_technical_penalties_accumulate():
    outcome = analyze_technical("http://acme.test", soup_of(BARE_HTML), None, False, 3500)
    assert outcome.score == 30
    assert outcome.issues == [
        "robots.txt not found",
        "sitemap.xml not found",
        "Website not using HTTPS",
        "Slow response time (3500ms)",
        "Missing viewport meta tag (not mobile-friendly)",
    ]


def test_technical_moderate_response():
    outcome = analyze_technical("https://acme.test", soup_of(GOOD_HTML), "", True, 2000)
    assert outcome.score == 95
    assert outcome.issues == ["Moderate response time (2000ms)"]


@pytest.mark.asyncio
async def test_technical_probe_over_http():
    async with httpx.AsyncClient(transport=site_transport(robots=None, sitemap=False)) as client:
        outcome = await run_technical_probe(client, "https://acme.test")
    assert outcome.details["robotsTxt"] == "Not found"
    assert outcome.details["sitemap"] == "Not found"
    assert outcome.score == 80


# ==================== On-Page ====================

def test_on_page_clean_site():
    outcome = analyze_on_page(soup_of(GOOD_HTML))
    assert outcome.score == 100
    assert outcome.details["h1Count"] == 1
    assert outcome.details["canonical"] == "https://acme.test/"


def test_on_page_bare_site():
    outcome = analyze_on_page(soup_of(BARE_HTML))
    assert outcome.score == 60
    assert "Title tag is too short (< 30 characters)" in outcome.issues
    assert "Missing meta description" in outcome.issues
    assert "No H1 heading found" in outcome.issues


def test_on_page_alt_text_penalty_is_capped():
    images = "".join('<img src="/i.png">' for _ in range(8))
    outcome = analyze_on_page(soup_of(GOOD_HTML.replace("<h1>", images + "<h1>")))
    assert "8 images missing alt text" in outcome.issues
    assert outcome.score == 90


# ==================== Content ====================

def test_content_clean_site():
    outcome = analyze_content(soup_of(GOOD_HTML), "https://acme.test/", broken_links=0)
    assert outcome.score == 100
    assert outcome.details["internalLinks"] == 3
    assert outcome.details["externalLinks"] == 1
    assert outcome.details["headingStructure"] == {"h2": 1, "h3": 0}
    assert outcome.details["brokenLinks"] == 0


def test_content_thin_page():
    html = "<html><body><p>Same text</p><p>Same text</p></body></html>"
    outcome = analyze_content(soup_of(html), "https://acme.test/")
    assert outcome.score == 55
    assert "Possible duplicate content detected" in outcome.issues
    assert "brokenLinks" not in outcome.details


@pytest.mark.asyncio
async def test_broken_links_are_sampled():
    def handler(request):
        return httpx.Response(404 if request.url.path.startswith("/dead") else 200)

    links = [f"https://acme.test/dead{i}" for i in range(3)] + ["https://acme.test/ok"] * 3 + [
        "https://acme.test/dead-late"
    ]
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        broken = await count_broken_links(client, links, sample_size=4)
    # duplicates collapse; the fifth unique link is outside the sample
    assert broken == 3


@pytest.mark.asyncio
async def test_content_probe_reports_broken_links():
    async with httpx.AsyncClient(transport=site_transport()) as client:
        outcome = await run_content_probe(client, "https://acme.test")
    assert outcome.details["brokenLinks"] == 0
    assert outcome.score == 100


# ==================== Performance ====================

def test_performance_clean_page():
    outcome = analyze_performance(page_of())
    assert outcome.score == 100
    assert outcome.details["compression"] == "gzip"
    assert outcome.details["resources"] == {"scripts": 0, "stylesheets": 0, "images": 1}


def test_performance_brotli_counts_as_compressed():
    outcome = analyze_performance(page_of(headers={**GOOD_HEADERS, "content-encoding": "br"}))
    assert "No GZIP compression detected" not in outcome.issues


def test_performance_slow_heavy_page():
    scripts = "".join("<script></script>" for _ in range(21))
    outcome = analyze_performance(
        page_of(html=f"<html><body>{scripts}</body></html>", headers={}, elapsed_ms=3200,
                size_bytes=3100 * 1024)
    )
    assert outcome.issues == [
        "Slow page load (3200ms)",
        "Large page size (3100KB)",
        "No GZIP compression detected",
        "No cache headers found",
        "Too many scripts (21)",
    ]
    assert outcome.score == 35


# ==================== Security ====================

def test_security_clean_site():
    outcome = analyze_security("https://acme.test", page_of(), soup_of(GOOD_HTML))
    assert outcome.score == 100
    assert outcome.details["securityHeaders"]["content-security-policy"] == "Present"
    assert outcome.details["securityHeaders"]["x-frame-options"] == "DENY"


def test_security_plain_http_without_headers():
    html = '<html><body><script src="http://cdn.test/a.js"></script><img src="http://cdn.test/b.png"></body></html>'
    outcome = analyze_security("http://acme.test", page_of(html=html, headers={}), soup_of(html))
    assert outcome.details["mixedContent"] == 2
    assert "2 insecure resources (HTTP) found" in outcome.issues
    # 30 (https) + 45 (headers) + 15 (mixed content)
    assert outcome.score == 10


def test_insecure_resource_count_ignores_https_and_relative():
    html = '<link href="https://x.test/s.css"><img src="/a.png"><script src="HTTP://old.test/x.js"></script>'
    assert count_insecure_resources(soup_of(html)) == 1
