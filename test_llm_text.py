"""
Tests for llm.txt generation.
Run with: pytest test_llm_text.py -v
"""
import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

import llm_text
from ai_client import get_ai_client
from conftest import GOOD_HTML, FakeAIClient, site_transport
from llm_text import (
    build_llm_text,
    crawl_site_content,
    extract_keywords,
    fallback_summary,
    generate_summary,
    parse_site_content,
    top_citation_sources,
)
from models import AnalysisResult, CitationSource, Competitor, Profile, TestQuestion
from profile_store import get_profile_store

SUMMARY = {
    "productSummary": "Acme CRM is a sales pipeline tool.",
    "keyFeatures": ["Pipelines", "Automation"],
    "targetAudience": "Sales teams",
    "useCases": ["Lead tracking"],
    "differentiators": ["Fast setup"],
    "technicalHighlights": ["REST API"],
    "contentThemes": ["Sales"],
}


def make_profile():
    profile = Profile(name="Acme Analysis", website_url="https://acme.test", product_name="Acme CRM",
                      category="CRM", region="us")
    profile.questions = [TestQuestion(text="Which customer platform handles pipelines best?")]
    profile.competitors = [Competitor(name="HubSpot", category="CRM", visibility=70)]
    profile.analysis_result = AnalysisResult(
        overall_score=62,
        total_mentions=90,
        total_citations=26,
        citation_sources=[
            CitationSource(url="g2.com", platform="ChatGPT", weight=9.5, mentions=6),
            CitationSource(url="capterra.com", platform="ChatGPT", weight=8.9, mentions=3),
            CitationSource(url="g2.com", platform="Claude", weight=8.5, mentions=3),
        ],
    )
    return profile


def test_parse_site_content():
    site = parse_site_content("https://acme.test", GOOD_HTML)
    assert site.title == "Acme CRM - Customer relationship software"
    assert site.description.startswith("Acme CRM helps sales teams")
    assert {"level": "h2", "text": "Features"} in site.headings
    assert [link["url"] for link in site.internal_links] == ["/pricing", "/about", "/blog"]
    assert site.word_count > 700


@pytest.mark.asyncio
async def test_crawl_failure_returns_empty_content():
    def handler(request):
        return httpx.Response(500)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        site = await crawl_site_content("https://acme.test", client=client)
    assert site.error
    assert site.title == ""


@pytest.mark.asyncio
async def test_summary_falls_back_on_bad_output():
    profile = make_profile()
    site = parse_site_content("https://acme.test", GOOD_HTML)

    good = await generate_summary(FakeAIClient([json.dumps(SUMMARY)]), profile, site)
    assert good.target_audience == "Sales teams"

    bad = await generate_summary(FakeAIClient(["not json"]), profile, site)
    assert bad == fallback_summary(profile)


def test_citation_sources_are_merged():
    sources = top_citation_sources(make_profile())
    assert sources[0] == {"url": "g2.com", "weight": 9.0, "count": 2}
    assert sources[1]["url"] == "capterra.com"


def test_keywords():
    keywords = extract_keywords(make_profile())
    assert keywords[:4] == ["acme crm", "crm", "us crm", "best crm"]
    assert "customer" in keywords
    assert "pipelines" in keywords
    # short words and stopwords are skipped
    assert "which" not in keywords


def test_build_llm_text_sections():
    profile = make_profile()
    site = parse_site_content("https://acme.test", GOOD_HTML)
    text = build_llm_text(profile, site, llm_text.LLMSummary.model_validate(SUMMARY))

    assert text.startswith("# llm.txt - AI Crawler Instructions\n# Product: Acme CRM")
    assert "https://acme.test/pricing: Pricing" in text
    assert "1. HubSpot (CRM) - Visibility: 70%" in text
    assert "1. g2.com (Authority: 9.0/10, Mentions: 2)" in text
    assert "overall_visibility_score: 62%" in text
    assert f"profile_id: {profile.id}" in text
    assert "@audience: Sales teams" in text


@pytest.mark.asyncio
async def test_generate_endpoint(store, monkeypatch):
    profile = store.create(make_profile())
    llm_text.app.dependency_overrides[get_profile_store] = lambda: store
    llm_text.app.dependency_overrides[get_ai_client] = lambda: FakeAIClient([json.dumps(SUMMARY)])
    monkeypatch.setattr(llm_text, "create_http_client", lambda: httpx.AsyncClient(transport=site_transport()))
    try:
        async with AsyncClient(transport=ASGITransport(app=llm_text.app), base_url="http://test") as client:
            response = await client.post("/generate", json={"profileId": profile.id})
            missing = await client.post("/generate", json={"profileId": "nope"})
            invalid = await client.post("/generate", json={})
    finally:
        llm_text.app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["filename"] == "acme-crm-llm.txt"
    assert "site_title: Acme CRM - Customer relationship software" in data["content"]
    assert missing.status_code == 404
    assert invalid.status_code == 400
