"""Profile Service - product profiles, generation, analysis and reports

A profile moves draft -> generating -> ready -> analyzing -> completed.
Generation fills test questions and competitors from the LLM; analysis runs
the visibility scorer and the SEO health check concurrently and writes the
results back onto the profile.

Endpoints (mounted at /api/v1/profiles):
- POST   /                         create profile
- GET    /                         list profiles
- GET    /{id}                     get profile
- PUT    /{id}                     update profile fields
- DELETE /{id}                     delete profile
- POST   /{id}/generate            generate questions + competitors
- POST   /{id}/analyze             run visibility + health analysis
- POST   /{id}/questions           add a manual question
- DELETE /{id}/questions/{qid}     remove a question
- GET    /{id}/report              HTML report
- GET    /{id}/report.pdf          PDF report (external PDF service)
"""

import asyncio
import logging
import re
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response

from ai_client import AIClient, get_ai_client
from api_errors import APIError, install_error_handlers, ok
from fetcher import InvalidURLError, normalize_url
from generation import generate_questions_and_competitors
from health_service import HealthAggregator, get_health_aggregator
from models import (
    AnalysisResult,
    CamelModel,
    HealthCategoryName,
    HealthCheckReport,
    Profile,
    ProfileStatus,
    QuestionCategory,
    QuestionOrigin,
    TestQuestion,
)
from oracle import LLMMentionOracle
from pdf_export import PDFExportError, export_pdf_bytes
from profile_store import InMemoryProfileStore, ProfileNotFoundError, get_profile_store
from reports.html_report import build_profile_report_html
from visibility_scorer import VisibilityScorer

logger = logging.getLogger(__name__)


def get_visibility_scorer(ai_client: AIClient = Depends(get_ai_client)) -> VisibilityScorer:
    return VisibilityScorer(LLMMentionOracle(ai_client))


# === Request models ===

class ProfileCreate(CamelModel):
    website_url: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    name: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    website_url: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None


class QuestionCreate(CamelModel):
    text: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None


# === Helpers ===

def _load(store: InMemoryProfileStore, profile_id: str) -> Profile:
    try:
        return store.get(profile_id)
    except ProfileNotFoundError:
        raise APIError(404, "NOT_FOUND", "Profile not found")


def _normalized_url(url: str) -> str:
    try:
        return normalize_url(url)
    except InvalidURLError as e:
        raise APIError(400, "INVALID_URL", str(e))


def _slug(text: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-') or 'profile'


async def _health_or_none(aggregator: HealthAggregator, url: str) -> Optional[HealthCheckReport]:
    """A failed health check doesn't fail the analysis."""
    try:
        return await aggregator.check(url)
    except Exception as e:
        logger.warning(f"Health check failed during analysis of {url}: {e}")
        return None


def apply_analysis(profile: Profile, analysis: AnalysisResult, health: Optional[HealthCheckReport]) -> Profile:
    """Attach analysis + health results and write per-item numbers back."""
    if health is not None:
        analysis.seo_health = health.overall_score
        content = health.category(HealthCategoryName.CONTENT)
        if content is not None:
            analysis.broken_links = int(content.details.get("brokenLinks", 0) or 0)

    by_question = {r.question_id: r for r in analysis.question_results}
    for question in profile.questions:
        result = by_question.get(question.id)
        if result:
            question.mention_count = result.mention_count
            question.visibility_score = result.visibility_score

    by_competitor = {c.id: c for c in analysis.competitor_breakdown}
    for competitor in profile.competitors:
        visibility = by_competitor.get(competitor.id)
        if visibility:
            competitor.visibility = visibility.visibility
            competitor.mentions = visibility.mentions
            competitor.citations = visibility.citations
            competitor.rank = visibility.rank
    profile.competitors.sort(key=lambda c: c.rank or len(profile.competitors) + 1)

    profile.analysis_result = analysis
    profile.health_report = health
    profile.status = ProfileStatus.COMPLETED
    return profile


# === HTTP surface ===

app = FastAPI(
    title="Profile Service",
    description="Product profiles, AI visibility analysis and reports",
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


@app.post("/", status_code=201)
async def create_profile(request: ProfileCreate, store: InMemoryProfileStore = Depends(get_profile_store)):
    missing = [
        field for field, value in (
            ("websiteUrl", request.website_url),
            ("productName", request.product_name),
            ("category", request.category),
        ) if not value or not value.strip()
    ]
    if missing:
        raise APIError(400, "VALIDATION_ERROR", f"Missing required fields: {', '.join(missing)}")

    product_name = request.product_name.strip()
    profile = Profile(
        name=(request.name or "").strip() or f"{product_name} Analysis",
        website_url=_normalized_url(request.website_url),
        product_name=product_name,
        category=request.category.strip(),
        region=(request.region or "").strip() or "global",
    )
    return ok(store.create(profile))


@app.get("/")
async def list_profiles(store: InMemoryProfileStore = Depends(get_profile_store)):
    return ok(store.list())


@app.get("/{profile_id}")
async def get_profile(profile_id: str, store: InMemoryProfileStore = Depends(get_profile_store)):
    return ok(_load(store, profile_id))


@app.put("/{profile_id}")
async def update_profile(
    profile_id: str,
    request: ProfileUpdate,
    store: InMemoryProfileStore = Depends(get_profile_store),
):
    profile = _load(store, profile_id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if "website_url" in changes:
        changes["website_url"] = _normalized_url(changes["website_url"])
    for field, value in changes.items():
        setattr(profile, field, value)
    return ok(store.update(profile))


@app.delete("/{profile_id}")
async def delete_profile(profile_id: str, store: InMemoryProfileStore = Depends(get_profile_store)):
    try:
        store.delete(profile_id)
    except ProfileNotFoundError:
        raise APIError(404, "NOT_FOUND", "Profile not found")
    return ok({"id": profile_id, "deleted": True})


@app.post("/{profile_id}/generate")
async def generate_profile_content(
    profile_id: str,
    store: InMemoryProfileStore = Depends(get_profile_store),
    ai_client: AIClient = Depends(get_ai_client),
):
    profile = _load(store, profile_id)
    profile.status = ProfileStatus.GENERATING
    store.update(profile)

    try:
        questions, competitors = await generate_questions_and_competitors(
            ai_client,
            profile.product_name,
            profile.category,
            region=profile.region,
            website_url=profile.website_url,
        )
    except Exception as e:
        logger.error(f"Generation failed for profile {profile_id}: {e}")
        profile.status = ProfileStatus.DRAFT
        store.update(profile)
        raise APIError(500, "GENERATION_ERROR", str(e))

    # manual questions survive regeneration
    manual = [q for q in profile.questions if q.origin == QuestionOrigin.MANUAL]
    profile.questions = questions + manual
    profile.competitors = competitors
    profile.status = ProfileStatus.READY
    return ok(store.update(profile))


@app.post("/{profile_id}/analyze")
async def analyze_profile(
    profile_id: str,
    store: InMemoryProfileStore = Depends(get_profile_store),
    scorer: VisibilityScorer = Depends(get_visibility_scorer),
    aggregator: HealthAggregator = Depends(get_health_aggregator),
):
    profile = _load(store, profile_id)
    if not profile.questions or not profile.competitors:
        raise APIError(400, "INVALID_STATE", "Profile must have questions and competitors before analysis")

    profile.status = ProfileStatus.ANALYZING
    store.update(profile)

    try:
        analysis, health = await asyncio.gather(
            scorer.score(profile.as_product(), profile.questions, profile.competitors),
            _health_or_none(aggregator, profile.website_url),
        )
    except Exception as e:
        logger.error(f"Analysis failed for profile {profile_id}: {e}")
        profile.status = ProfileStatus.READY
        store.update(profile)
        raise APIError(500, "ANALYSIS_ERROR", str(e))

    apply_analysis(profile, analysis, health)
    logger.info(
        f"Analysis complete for {profile.product_name}: visibility={analysis.overall_score}%, "
        f"seo_health={analysis.seo_health}"
    )
    return ok(store.update(profile))


@app.post("/{profile_id}/questions", status_code=201)
async def add_question(
    profile_id: str,
    request: QuestionCreate,
    store: InMemoryProfileStore = Depends(get_profile_store),
):
    profile = _load(store, profile_id)
    if not request.text or not request.text.strip():
        raise APIError(400, "VALIDATION_ERROR", "text is required")

    question = TestQuestion(
        text=request.text.strip(),
        category=QuestionCategory.coerce(request.category),
        region=request.region or profile.region,
        origin=QuestionOrigin.MANUAL,
    )
    profile.questions.append(question)
    store.update(profile)
    return ok(question)


@app.delete("/{profile_id}/questions/{question_id}")
async def delete_question(
    profile_id: str,
    question_id: str,
    store: InMemoryProfileStore = Depends(get_profile_store),
):
    profile = _load(store, profile_id)
    remaining = [q for q in profile.questions if q.id != question_id]
    if len(remaining) == len(profile.questions):
        raise APIError(404, "NOT_FOUND", "Question not found")
    profile.questions = remaining
    return ok(store.update(profile))


@app.get("/{profile_id}/report", response_class=HTMLResponse)
async def get_report(
    profile_id: str,
    theme: str = "dark",
    store: InMemoryProfileStore = Depends(get_profile_store),
):
    profile = _load(store, profile_id)
    return HTMLResponse(build_profile_report_html(profile, theme=theme))


@app.get("/{profile_id}/report.pdf")
async def get_report_pdf(
    profile_id: str,
    theme: str = "dark",
    store: InMemoryProfileStore = Depends(get_profile_store),
):
    profile = _load(store, profile_id)
    html = build_profile_report_html(profile, theme=theme)
    try:
        pdf_bytes = await run_in_threadpool(export_pdf_bytes, html, color_scheme=theme)
    except PDFExportError as e:
        raise APIError(502, "PDF_EXPORT_ERROR", str(e))

    filename = f"{_slug(profile.product_name)}-report.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
