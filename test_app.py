"""
Basic tests for the API gateway and its mounted services.
Run with: pytest test_app.py -v
"""
import json

import pytest
from httpx import ASGITransport, AsyncClient

from ai_client import get_ai_client
from app import app
from conftest import FakeAIClient
from models import AnalysisResult, Profile
from optimization_service import optimization_app, products_app
from profile_store import get_profile_store


@pytest.fixture
def fake_ai(store):
    ai_client = FakeAIClient()
    for sub_app in (products_app, optimization_app):
        sub_app.dependency_overrides[get_ai_client] = lambda: ai_client
        sub_app.dependency_overrides[get_profile_store] = lambda: store
    yield ai_client
    for sub_app in (products_app, optimization_app):
        sub_app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_root_endpoint():
    """Test root endpoint returns the service directory."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "AEO Intelligence"
        assert data["status"] == "ready"
        assert "/api/v1/seo/health-check" in data["endpoints"]


@pytest.mark.asyncio
async def test_status_endpoint():
    """Test status endpoint reports provider configuration."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/status")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert set(data["providers"]) == {"openai", "gemini"}
        assert isinstance(data["models"], list)


@pytest.mark.asyncio
async def test_profiles_are_mounted(store):
    from profile_service import app as profile_app

    profile_app.dependency_overrides[get_profile_store] = lambda: store
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            created = await client.post(
                "/api/v1/profiles/",
                json={"websiteUrl": "https://acme.test", "productName": "Acme CRM", "category": "CRM"},
            )
            listed = await client.get("/api/v1/profiles/")
    finally:
        profile_app.dependency_overrides.clear()

    assert created.status_code == 201
    assert [p["productName"] for p in listed.json()["data"]] == ["Acme CRM"]


@pytest.mark.asyncio
async def test_seo_validation_through_gateway():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/v1/seo/health-check", json={"websiteUrl": ""})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_products_generate(fake_ai):
    fake_ai.responses = [json.dumps({"products": [{"name": "Acme CRM", "category": "CRM Software"}]})]
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/v1/products/generate", json={"websiteUrl": "acme.test"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["products"] == [{"name": "Acme CRM", "category": "CRM Software", "description": ""}]
    assert data["suggestedRegions"] == ["us", "uk", "eu", "asia", "global"]


@pytest.mark.asyncio
async def test_products_generate_errors(fake_ai):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        missing = await client.post("/api/v1/products/generate", json={})
        invalid = await client.post("/api/v1/products/generate", json={"websiteUrl": "mailto://x"})
        failed = await client.post("/api/v1/products/generate", json={"websiteUrl": "acme.test"})
    assert missing.json()["error"]["code"] == "VALIDATION_ERROR"
    assert invalid.json()["error"]["code"] == "INVALID_URL"
    # no scripted response left: the provider call fails
    assert failed.status_code == 500
    assert failed.json()["error"]["code"] == "GENERATION_ERROR"


@pytest.mark.asyncio
async def test_optimization_content(fake_ai, store):
    profile = Profile(name="Acme Analysis", website_url="https://acme.test", product_name="Acme CRM", category="CRM")
    profile.analysis_result = AnalysisResult(overall_score=40, total_mentions=0, total_citations=0)
    store.create(profile)
    fake_ai.responses = ['[{"priority": "high", "title": "Add comparison pages"}]']

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/v1/optimization/content", json={"profileId": profile.id})
        missing = await client.post("/api/v1/optimization/content", json={"profileId": "nope"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["projectedScore"] == 52
    assert data["recommendations"][0]["title"] == "Add comparison pages"
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"
