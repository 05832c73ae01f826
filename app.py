#!/usr/bin/env python3
"""
AEO Intelligence - API Gateway

Mounts the service sub-apps under /api/v1:
1. Profiles - product profiles, generation, visibility analysis, reports
2. Products - product discovery from a website
3. SEO - five-probe website health check
4. Optimization - AI visibility recommendations
5. llm.txt - crawler-facing product summaries

Environment Variables:
- LLM_PROVIDER: openai (default) or gemini
- OPENAI_API_KEY / GEMINI_API_KEY: key for the selected provider
- PDF_SERVICE_URL: HTML to PDF rendering service
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from ai_client import get_ai_client, get_available_models
from health_service import app as health_app
from llm_text import app as llm_text_app
from optimization_service import optimization_app, products_app
from profile_service import app as profile_app

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

SERVICE_NAME = "AEO Intelligence"
VERSION = "1.0.0"

app = FastAPI(
    title=SERVICE_NAME,
    description="AI visibility scoring + SEO health checks for product profiles",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/api/v1/profiles", profile_app)
app.mount("/api/v1/products", products_app)
app.mount("/api/v1/seo", health_app)
app.mount("/api/v1/optimization", optimization_app)
app.mount("/api/v1/llm-text", llm_text_app)


@app.get("/")
async def root():
    """Service directory."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "ready",
        "endpoints": {
            "/api/v1/profiles": "Profiles - CRUD, /generate, /analyze, /questions, /report, /report.pdf",
            "/api/v1/products/generate": "POST - List products from a website",
            "/api/v1/seo/health-check": "POST - SEO health check (5 categories)",
            "/api/v1/optimization/content": "POST - Optimization recommendations for a profile",
            "/api/v1/llm-text/generate": "POST - Generate llm.txt for a profile",
            "/status": "GET - Provider configuration",
            "/": "GET - This info",
        },
    }


@app.get("/status")
async def status():
    """Health status and provider configuration."""
    return {
        "status": "healthy",
        "llm_provider": config.LLM_PROVIDER,
        "providers": get_ai_client().configured_providers(),
        "models": get_available_models(config.LLM_PROVIDER),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
