"""Mention oracle - judges whether a simulated AI assistant would mention a product.

The scorer only depends on the MentionOracle protocol. LLMMentionOracle is
the production implementation: it asks a single shared LLM to role-play
each platform and return a structured verdict.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

import config
from ai_client import AIClient
from citation_sources import GENERAL_SOURCES, get_category_sources
from json_extract import JSONExtractionError, extract_json
from models import Competitor, Product, TestQuestion

logger = logging.getLogger(__name__)


class OracleResponseError(ValueError):
    """Oracle answered but the verdict could not be read."""


@dataclass
class Judgment:
    mentioned: bool
    confidence: int
    sources: List[str] = field(default_factory=list)
    competitors_mentioned: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.confidence = max(0, min(100, int(self.confidence)))


class MentionOracle(Protocol):
    async def judge(self, prompt: str) -> Judgment:
        ...


PLATFORM_BEHAVIORS = {
    'ChatGPT': {
        'style': 'conversational and balanced',
        'focus': 'Popular, well-known products with strong community presence',
    },
    'Claude': {
        'style': 'analytical and detailed',
        'focus': 'Enterprise-grade solutions with strong technical documentation',
    },
    'Gemini': {
        'style': 'comprehensive and data-driven',
        'focus': 'Products with strong online presence and recent updates',
    },
    'Perplexity': {
        'style': 'research-focused with citations',
        'focus': 'Products with strong review presence and comparison data',
    },
}


def build_judgment_prompt(
    product: Product,
    question: TestQuestion,
    platform: str,
    competitors: Sequence[Competitor] = (),
) -> str:
    """Render the simulation prompt for one (platform, question) pair."""
    behavior = PLATFORM_BEHAVIORS.get(platform, PLATFORM_BEHAVIORS['ChatGPT'])
    category = product.category or "software"
    competitor_names = ", ".join(c.name for c in competitors) or "N/A"
    sources = ", ".join(get_category_sources(category) + GENERAL_SOURCES)

    return f"""You are simulating {platform}, an AI assistant answering questions about {category} products.

<llm_personality>
  LLM: {platform}
  Style: {behavior['style']}
  Focus: {behavior['focus']}
</llm_personality>

<context>
  Target Product: {product.name}
  Website: {product.website}
  Category: {category}
  Competitors: {competitor_names}
  Region: {question.region}
</context>

<question>
{question.text}
</question>

<task>
  Decide whether {platform}, answering the question above realistically and objectively,
  would mention {product.name}. Only say yes if {product.name} is genuinely relevant.
  List the competitors from the context that the answer would mention and 1-3 citation
  domains, chosen ONLY from: {sources}
</task>

<output_format>
Return ONLY valid JSON in this exact format:
{{"mentioned": true, "confidence": 0-100, "sources": ["g2.com"], "competitorsMentioned": ["Name"]}}
</output_format>"""


def parse_judgment(text: str) -> Judgment:
    """Read a verdict from model output, falling back to a keyword heuristic."""
    try:
        data = extract_json(text)
    except JSONExtractionError:
        data = None

    if isinstance(data, dict) and "mentioned" in data:
        mentioned = data.get("mentioned")
        if isinstance(mentioned, str):
            mentioned = mentioned.strip().lower() in ("true", "yes")
        try:
            confidence = int(float(data.get("confidence", 0) or 0))
        except (TypeError, ValueError):
            confidence = 0
        sources = data.get("sources") or data.get("citationSources") or []
        competitors = data.get("competitorsMentioned") or data.get("competitors_mentioned") or []
        return Judgment(
            mentioned=bool(mentioned),
            confidence=confidence,
            sources=[s for s in sources if isinstance(s, str)],
            competitors_mentioned=[c for c in competitors if isinstance(c, str)],
        )

    text_lower = (text or "").lower()
    if "not mentioned" in text_lower:
        return Judgment(mentioned=False, confidence=0)
    if "yes" in text_lower or "mentioned" in text_lower:
        return Judgment(mentioned=True, confidence=config.HEURISTIC_CONFIDENCE)

    raise OracleResponseError(f"Unreadable oracle response: {(text or '')[:200]}")


class LLMMentionOracle:
    """MentionOracle backed by AIClient text completion."""

    def __init__(self, ai_client: AIClient, temperature: float = 0.3, max_tokens: int = 400):
        self.ai_client = ai_client
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def judge(self, prompt: str) -> Judgment:
        text = await self.ai_client.generate_content(
            prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return parse_judgment(text)
