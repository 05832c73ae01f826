"""LLM-backed generation: test questions, competitors, products, recommendations.

Every generator degrades to deterministic fallbacks when the model output
cannot be parsed. Transport and configuration failures are raised as
GenerationError so the HTTP layer can report them.
"""

import logging
import re
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from ai_client import AIClient, AIClientError
from fetcher import normalize_url
from json_extract import JSONExtractionError, extract_json
from models import (
    Competitor,
    GeneratedProduct,
    OptimizationPlan,
    ProductSuggestions,
    Profile,
    QuestionCategory,
    QuestionOrigin,
    Recommendation,
    TestQuestion,
)
from prompts import optimization_prompt, products_list_prompt, questions_and_competitors_prompt

logger = logging.getLogger(__name__)

SUGGESTED_REGIONS = ["us", "uk", "eu", "asia", "global"]
DEFAULT_PROJECTION_BASE = 65
PROJECTED_IMPROVEMENT = 12
PROJECTED_SCORE_CAP = 98
MAX_FALLBACK_PRODUCTS = 5


class GenerationError(RuntimeError):
    """LLM call failed before any output could be parsed."""


def fallback_questions(product_name: str, region: str) -> List[TestQuestion]:
    templates = [
        (f"What is {product_name}?", QuestionCategory.PRODUCT_RECOMMENDATION),
        (f"How does {product_name} compare to alternatives?", QuestionCategory.FEATURE_COMPARISON),
        (f"What are the main features of {product_name}?", QuestionCategory.TECHNICAL),
    ]
    return [
        TestQuestion(text=text, category=category, region=region, origin=QuestionOrigin.AUTO)
        for text, category in templates
    ]


def fallback_competitors(product_name: str, category: str) -> List[Competitor]:
    return [Competitor(name="Competitor A", category=category, description=f"Alternative to {product_name}", rank=1)]


def _text(value: Any) -> str:
    """Stripped string value, or "" for missing and non-scalar model output."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _parse_questions(items: Any, region: str) -> List[TestQuestion]:
    questions = []
    if not isinstance(items, list):
        return questions
    for item in items:
        if isinstance(item, str):
            text, category, item_region = item, None, None
        elif isinstance(item, dict):
            text = _text(item.get("question")) or _text(item.get("text"))
            category, item_region = item.get("category"), _text(item.get("region"))
        else:
            continue
        if not _text(text):
            continue
        questions.append(TestQuestion(
            text=_text(text),
            category=QuestionCategory.coerce(category),
            region=item_region or region,
            origin=QuestionOrigin.AUTO,
        ))
    return questions


def _parse_competitors(items: Any, category: str) -> List[Competitor]:
    competitors = []
    if not isinstance(items, list):
        return competitors
    for item in items:
        if isinstance(item, str):
            item = {"name": item}
        if not isinstance(item, dict) or not _text(item.get("name")):
            continue
        competitors.append(Competitor(
            name=_text(item["name"]),
            category=_text(item.get("category")) or category,
            description=_text(item.get("description")) or f"Competitor in {category} category",
            rank=len(competitors) + 1,
        ))
    return competitors


async def _generate(ai_client: AIClient, prompt: str, what: str, **kwargs) -> str:
    try:
        return await ai_client.generate_content(prompt, **kwargs)
    except AIClientError as e:
        raise GenerationError(f"Failed to generate {what}: {e}") from e


async def generate_questions_and_competitors(
    ai_client: AIClient,
    product_name: str,
    category: str,
    region: str = "global",
    website_url: str = "",
) -> Tuple[List[TestQuestion], List[Competitor]]:
    """Generate generic category questions and real competitors for a product."""
    prompt = questions_and_competitors_prompt(product_name, category, region, website_url)
    text = await _generate(ai_client, prompt, "questions and competitors", temperature=0.7, max_tokens=2000)

    questions: List[TestQuestion] = []
    competitors: List[Competitor] = []
    try:
        data = extract_json(text)
        if isinstance(data, dict):
            questions = _parse_questions(data.get("questions"), region)
            competitors = _parse_competitors(data.get("competitors"), category)
        else:
            logger.warning("Questions/competitors response is not a JSON object")
    except JSONExtractionError as e:
        logger.error(f"JSON parsing error for questions/competitors: {e}")
        logger.error(f"Raw response (first 500 chars): {text[:500]}")

    if not questions:
        logger.warning("Using fallback questions (generation returned no questions)")
        questions = fallback_questions(product_name, region)
    if not competitors:
        logger.warning("Using fallback competitors (generation returned no competitors)")
        competitors = fallback_competitors(product_name, category)

    logger.info(f"Generated {len(questions)} questions and {len(competitors)} competitors for {product_name}")
    return questions, competitors


def _products_from_data(data: Any) -> List[GeneratedProduct]:
    items = data.get("products") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise JSONExtractionError("Response does not contain a products array")

    products = []
    for item in items:
        if isinstance(item, str) and item.strip():
            products.append(GeneratedProduct(name=item.strip()))
        elif isinstance(item, dict) and _text(item.get("name")):
            products.append(GeneratedProduct(
                name=_text(item["name"]),
                category=_text(item.get("category")) or "General",
                description=_text(item.get("description")),
            ))
    return products


async def generate_products(ai_client: AIClient, website_url: str) -> ProductSuggestions:
    """List a website owner's products with suggested analysis regions.

    Raises:
        InvalidURLError: if `website_url` is not a usable URL.
    """
    url = normalize_url(website_url)
    text = await _generate(ai_client, products_list_prompt(url), "products", temperature=0.7, max_tokens=2000)

    try:
        products = _products_from_data(extract_json(text))
    except JSONExtractionError as e:
        logger.error(f"JSON parsing error for products: {e}")
        names = re.findall(r'"([^"]+)"', text)[:MAX_FALLBACK_PRODUCTS]
        if names:
            logger.info("Using fallback: extracted product names from text")
            products = [GeneratedProduct(name=name, description="Extracted from website analysis") for name in names]
        else:
            products = []

    if not products:
        logger.info("Using last resort: default product")
        products = [GeneratedProduct(name="Product Analysis", description="Extracted from website analysis")]

    logger.info(f"Extracted {len(products)} products for {url}")
    return ProductSuggestions(products=products, suggested_regions=list(SUGGESTED_REGIONS))


def _parse_recommendations(data: Any) -> List[Recommendation]:
    if isinstance(data, dict):
        data = data.get("recommendations")
    if not isinstance(data, list):
        logger.warning("No recommendations array found in parsed data")
        return []

    recommendations = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            recommendations.append(Recommendation.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed recommendation: {e.errors()[0].get('msg')}")
    return recommendations


async def get_optimization_recommendations(ai_client: AIClient, profile: Profile) -> OptimizationPlan:
    current: Optional[int] = profile.analysis_result.overall_score if profile.analysis_result else None
    prompt = optimization_prompt(profile.product_name, profile.category, profile.website_url, current)
    text = await _generate(ai_client, prompt, "recommendations", temperature=0.7, max_tokens=2000)

    recommendations: List[Recommendation] = []
    summary = "AI-powered analysis completed successfully."
    try:
        recommendations = _parse_recommendations(extract_json(text))
        match = re.search(r'summary[:\s]+([^\n]+)', text, re.IGNORECASE)
        if match:
            summary = match.group(1).strip()
    except JSONExtractionError as e:
        logger.error(f"Recommendations JSON parsing error: {e}")

    base = current if current else DEFAULT_PROJECTION_BASE
    return OptimizationPlan(
        summary=summary,
        projected_score=min(base + PROJECTED_IMPROVEMENT, PROJECTED_SCORE_CAP),
        recommendations=recommendations,
    )
