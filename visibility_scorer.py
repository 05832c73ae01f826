"""Visibility Scorer - simulated AI assistant visibility for one product.

For each simulated platform and each evaluated question the oracle is asked
whether the platform would mention the product. Counts are combined into
weighted per-platform scores and a capped overall score.

Scoring:
- mention  : mentioned and confidence > 50
- citation : mention and confidence > 70
- platform : min(100, round(mentions / evaluated * 100 * weight))
- overall  : min(95, round(mean(platform scores)))

All rounding is half-up.

Oracle calls run sequentially with a fixed delay between calls to respect
upstream rate limits.
"""

import asyncio
import logging
import math
import random
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

import config
from citation_sources import (
    MAX_SOURCES_PER_PLATFORM,
    classify_page_type,
    clean_sources,
    source_weight,
)
from models import (
    AnalysisResult,
    CitationSource,
    Competitor,
    CompetitorVisibility,
    Platform,
    Product,
    QuestionResult,
    SimulatedPlatformResult,
    TestQuestion,
)
from oracle import Judgment, MentionOracle, build_judgment_prompt
from scoring import round_half_up

logger = logging.getLogger(__name__)


class InvalidProductError(ValueError):
    """Product descriptor is missing a name or website."""


DEFAULT_PLATFORMS = [Platform(name=name, weight=weight) for name, weight in config.PLATFORM_WEIGHTS.items()]


def default_jitter() -> float:
    return random.uniform(0, config.TREND_JITTER_MAX)


def calculate_platform_score(mentions: int, evaluated: int, weight: float) -> int:
    if evaluated <= 0:
        return 0
    return max(0, min(100, round_half_up(mentions / evaluated * 100 * weight)))


def calculate_overall_visibility(platform_scores: Sequence[int]) -> int:
    if not platform_scores:
        return 0
    overall = round_half_up(sum(platform_scores) / len(platform_scores))
    return max(0, min(config.VISIBILITY_SCORE_CAP, overall))


def generate_trend(overall_score: int, jitter: Callable[[], float] = default_jitter) -> List[int]:
    """Synthetic 7-day display series ending near the current score.

    Not a measurement; callers must not treat it as history.
    """
    base = overall_score - config.TREND_OFFSET
    trend = []
    for i in range(config.TREND_POINTS):
        point = round_half_up(base + i * config.TREND_STEP + jitter())
        trend.append(max(0, min(config.VISIBILITY_SCORE_CAP, point)))
    return trend


def _names_match(a: str, b: str) -> bool:
    a, b = a.lower().strip(), b.lower().strip()
    return bool(a) and bool(b) and (a in b or b in a)


class VisibilityScorer:
    """Aggregates oracle judgments into an AnalysisResult."""

    def __init__(
        self,
        oracle: MentionOracle,
        platforms: Optional[Sequence[Platform]] = None,
        call_delay: float = config.ORACLE_CALL_DELAY,
        jitter: Callable[[], float] = default_jitter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        max_questions: int = config.MAX_QUESTIONS_PER_RUN,
    ):
        self.oracle = oracle
        self.platforms = list(platforms) if platforms is not None else list(DEFAULT_PLATFORMS)
        self.call_delay = call_delay
        self.jitter = jitter
        self.sleep = sleep
        self.max_questions = max_questions

    async def _judge(self, product: Product, question: TestQuestion, platform: Platform,
                     competitors: Sequence[Competitor]) -> Optional[Judgment]:
        prompt = build_judgment_prompt(product, question, platform.name, competitors)
        try:
            return await self.oracle.judge(prompt)
        except Exception as e:
            logger.error(f"[{platform.name}] Oracle call failed for question '{question.text[:60]}': {e}")
            return None

    async def score(
        self,
        product: Product,
        questions: Sequence[TestQuestion],
        competitors: Sequence[Competitor] = (),
    ) -> AnalysisResult:
        if not product.name or not product.name.strip() or not product.website or not product.website.strip():
            raise InvalidProductError("Product name and website are required")

        selected = list(questions)[:self.max_questions]
        evaluated = len(selected)
        logger.info(
            f"Starting visibility scoring for {product.name}: "
            f"{evaluated} questions x {len(self.platforms)} platforms"
        )

        platform_results: List[SimulatedPlatformResult] = []
        citation_sources: List[CitationSource] = []
        competitor_mentions: Dict[str, int] = {c.id: 0 for c in competitors}
        question_platforms: Dict[str, List[str]] = {q.id: [] for q in selected}

        first_call = True
        for platform in self.platforms:
            result = SimulatedPlatformResult(platform_name=platform.name, weight=platform.weight)
            cited: Dict[str, int] = {}

            for question in selected:
                if not first_call and self.call_delay > 0:
                    await self.sleep(self.call_delay)
                first_call = False

                judgment = await self._judge(product, question, platform, competitors)
                if judgment is None:
                    result.errors += 1
                    continue

                for competitor in competitors:
                    if any(_names_match(name, competitor.name) for name in judgment.competitors_mentioned):
                        competitor_mentions[competitor.id] += 1

                if not (judgment.mentioned and judgment.confidence > config.MENTION_CONFIDENCE_THRESHOLD):
                    continue

                result.mention_count += 1
                question_platforms[question.id].append(platform.name)
                if judgment.confidence > config.CITATION_CONFIDENCE_THRESHOLD:
                    result.citation_count += 1

                for source in clean_sources(judgment.sources, product.category):
                    cited[source] = cited.get(source, 0) + 1

            result.score = calculate_platform_score(result.mention_count, evaluated, platform.weight)
            platform_results.append(result)

            for idx, (url, count) in enumerate(list(cited.items())[:MAX_SOURCES_PER_PLATFORM]):
                citation_sources.append(CitationSource(
                    url=url,
                    platform=platform.name,
                    weight=source_weight(idx),
                    mentions=count * 3,
                    page_type=classify_page_type(url),
                ))

            logger.info(
                f"[{platform.name}] score={result.score}%, mentions={result.mention_count}/{evaluated}, "
                f"citations={result.citation_count}, errors={result.errors}"
            )

        overall_score = calculate_overall_visibility([r.score for r in platform_results])
        raw_mentions = sum(r.mention_count for r in platform_results)
        raw_citations = sum(r.citation_count for r in platform_results)

        logger.info(f"Visibility scoring complete for {product.name}: overall={overall_score}%")

        return AnalysisResult(
            overall_score=overall_score,
            total_mentions=raw_mentions * config.MENTION_DISPLAY_MULTIPLIER,
            total_citations=round_half_up(raw_citations * config.CITATION_DISPLAY_MULTIPLIER),
            trend=generate_trend(overall_score, self.jitter),
            citation_sources=citation_sources,
            platform_performance=platform_results,
            competitor_breakdown=self._rank_competitors(competitors, competitor_mentions, evaluated),
            question_results=self._question_results(selected, question_platforms),
            questions_evaluated=evaluated,
        )

    def _rank_competitors(
        self,
        competitors: Sequence[Competitor],
        mentions: Dict[str, int],
        evaluated: int,
    ) -> List[CompetitorVisibility]:
        total_calls = evaluated * len(self.platforms)
        breakdown = []
        for competitor in competitors:
            count = mentions.get(competitor.id, 0)
            visibility = round_half_up(count / total_calls * 100) if total_calls else 0
            breakdown.append(CompetitorVisibility(
                id=competitor.id,
                name=competitor.name,
                category=competitor.category,
                visibility=visibility,
                mentions=count,
                citations=math.floor(count * 1.5),
                rank=0,
            ))

        breakdown.sort(key=lambda c: c.visibility, reverse=True)
        for idx, item in enumerate(breakdown):
            item.rank = idx + 1
        return breakdown

    def _question_results(
        self,
        selected: Sequence[TestQuestion],
        question_platforms: Dict[str, List[str]],
    ) -> List[QuestionResult]:
        platform_count = len(self.platforms)
        results = []
        for question in selected:
            mentioned_on = question_platforms.get(question.id, [])
            results.append(QuestionResult(
                question_id=question.id,
                text=question.text,
                mention_count=len(mentioned_on),
                visibility_score=round_half_up(len(mentioned_on) / platform_count * 100) if platform_count else 0,
                platforms_mentioned=mentioned_on,
            ))
        return results
