"""SEO Health Check Service - five-probe website analysis

Runs five independent probes concurrently against a website:
- Technical SEO: robots.txt, sitemap.xml, HTTPS, response time, viewport
- On-Page SEO: title, meta description, headings, alt text, canonical, Open Graph
- Content Quality: word count, linking, heading structure, duplicates
- Performance: load time, page size, compression, caching, script count
- Security: HTTPS, security headers, mixed content

A probe that fails is scored 50 with a single "<Name> check failed" issue;
the other probes are unaffected. Overall score is the rounded mean.

Endpoint: POST /health-check
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import Field

import config
from api_errors import APIError, install_error_handlers, ok
from checks.content import run_content_probe
from checks.on_page import run_on_page_probe
from checks.performance import run_performance_probe
from checks.security import run_security_probe
from checks.technical import run_technical_probe
from fetcher import InvalidURLError, create_http_client, normalize_url
from models import (
    CamelModel,
    HealthCategoryName,
    HealthCheckCategory,
    HealthCheckReport,
    ProbeOutcome,
)
from scoring import (
    CATEGORY_LABELS,
    calculate_overall_score,
    generate_action_items,
    get_status,
)

logger = logging.getLogger(__name__)

Probe = Callable[[httpx.AsyncClient, str], Awaitable[ProbeOutcome]]

DEFAULT_PROBES: Dict[HealthCategoryName, Probe] = {
    HealthCategoryName.TECHNICAL: run_technical_probe,
    HealthCategoryName.ON_PAGE: run_on_page_probe,
    HealthCategoryName.CONTENT: run_content_probe,
    HealthCategoryName.PERFORMANCE: run_performance_probe,
    HealthCategoryName.SECURITY: run_security_probe,
}


def degraded_outcome(category: HealthCategoryName, error: Exception) -> ProbeOutcome:
    return ProbeOutcome(
        score=config.PROBE_FAILURE_SCORE,
        issues=[f"{CATEGORY_LABELS[category]} check failed: {error}"],
        details={},
        degraded=True,
    )


def compose_report(url: str, outcomes: Dict[HealthCategoryName, ProbeOutcome]) -> HealthCheckReport:
    """Combine per-category probe outcomes into a report.

    Categories are emitted in canonical order regardless of dict order.
    """
    categories: List[HealthCheckCategory] = []
    all_issues: List[str] = []
    scores: Dict[HealthCategoryName, int] = {}

    for name in HealthCategoryName:
        outcome = outcomes.get(name)
        if outcome is None:
            continue
        scores[name] = outcome.score
        all_issues.extend(outcome.issues)
        categories.append(HealthCheckCategory(
            name=name,
            score=outcome.score,
            status=get_status(outcome.score),
            issues=outcome.issues,
            details=outcome.details,
        ))

    overall = calculate_overall_score(list(scores.values()))
    return HealthCheckReport(
        url=url,
        overall_score=overall,
        status=get_status(overall),
        categories=categories,
        action_items=generate_action_items(all_issues, scores),
    )


class HealthAggregator:
    """Runs the probes concurrently and composes a HealthCheckReport."""

    def __init__(
        self,
        client_factory: Callable[[], httpx.AsyncClient] = create_http_client,
        probes: Optional[Dict[HealthCategoryName, Probe]] = None,
    ):
        self.client_factory = client_factory
        self.probes = dict(probes) if probes is not None else dict(DEFAULT_PROBES)

    async def _run_probe(self, category: HealthCategoryName, probe: Probe,
                         client: httpx.AsyncClient, url: str) -> ProbeOutcome:
        try:
            return await probe(client, url)
        except Exception as e:
            logger.error(f"{CATEGORY_LABELS[category]} probe failed for {url}: {e}")
            return degraded_outcome(category, e)

    async def check(self, website_url: str) -> HealthCheckReport:
        """Run every probe against `website_url`.

        Raises:
            InvalidURLError: if the URL cannot be normalized.
        """
        url = normalize_url(website_url)
        logger.info(f"Health check requested for: {url}")

        categories = list(self.probes.keys())
        async with self.client_factory() as client:
            results = await asyncio.gather(*[
                self._run_probe(category, self.probes[category], client, url)
                for category in categories
            ])

        report = compose_report(url, dict(zip(categories, results)))
        logger.info(f"Health check complete for {url}: score={report.overall_score} ({report.status})")
        return report


_aggregator: Optional[HealthAggregator] = None


def get_health_aggregator() -> HealthAggregator:
    global _aggregator
    if _aggregator is None:
        _aggregator = HealthAggregator()
    return _aggregator


# === HTTP surface ===

app = FastAPI(
    title="SEO Health Check Service",
    description="Five-probe website health analysis",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)


class HealthCheckRequest(CamelModel):
    website_url: Optional[str] = Field(None, description="Website URL to analyze")


@app.post("/health-check")
async def run_health_check(
    request: HealthCheckRequest,
    aggregator: HealthAggregator = Depends(get_health_aggregator),
):
    if not request.website_url or not request.website_url.strip():
        raise APIError(400, "VALIDATION_ERROR", "websiteUrl is required")

    try:
        report = await aggregator.check(request.website_url)
    except InvalidURLError as e:
        raise APIError(400, "INVALID_URL", str(e))
    except Exception as e:
        logger.error(f"SEO health check failed for {request.website_url}: {e}")
        raise APIError(500, "SEO_CHECK_ERROR", str(e))

    return ok(report)
