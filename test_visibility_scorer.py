"""
Tests for VisibilityScorer aggregation.
Run with: pytest test_visibility_scorer.py -v
"""
import pytest

from conftest import FakeOracle
from models import Competitor, Platform, Product, TestQuestion
from oracle import Judgment, OracleResponseError
from visibility_scorer import (
    DEFAULT_PLATFORMS,
    InvalidProductError,
    VisibilityScorer,
    calculate_overall_visibility,
    calculate_platform_score,
    generate_trend,
)

PRODUCT = Product(name="Acme CRM", website="https://acme.test", category="CRM")
PLATFORMS = [Platform(name="Alpha", weight=1.0), Platform(name="Beta", weight=1.2)]


def make_questions():
    return [
        TestQuestion(id="q1", text="Which CRM is best for startups?"),
        TestQuestion(id="q2", text="How do I automate sales follow-ups?"),
    ]


def make_competitors():
    return [
        Competitor(id="c1", name="Pipedrive", category="CRM"),
        Competitor(id="c2", name="HubSpot", category="CRM"),
    ]


def scripted(prompt: str) -> Judgment:
    on_alpha = "You are simulating Alpha" in prompt
    first_question = "Which CRM is best for startups?" in prompt
    if on_alpha:
        return Judgment(mentioned=True, confidence=80, sources=["g2.com", "example.com"],
                        competitors_mentioned=["hubspot"])
    if first_question:
        return Judgment(mentioned=True, confidence=60, sources=["https://www.g2.com/"],
                        competitors_mentioned=["HubSpot CRM"])
    return Judgment(mentioned=False, confidence=90, competitors_mentioned=["HubSpot"])


def make_scorer(decide=scripted, **kwargs):
    return VisibilityScorer(FakeOracle(decide), platforms=PLATFORMS, call_delay=0,
                            jitter=lambda: 0.0, **kwargs)


@pytest.mark.asyncio
async def test_score_aggregates_platforms():
    result = await make_scorer().score(PRODUCT, make_questions(), make_competitors())

    alpha, beta = result.platform_performance
    assert (alpha.mention_count, alpha.citation_count, alpha.score) == (2, 2, 100)
    # confidence 60 counts as a mention but not a citation
    assert (beta.mention_count, beta.citation_count, beta.score) == (1, 0, 60)

    assert result.overall_score == 80
    assert result.total_mentions == 3 * 15
    assert result.total_citations == 13
    assert result.questions_evaluated == 2
    assert result.trend == [70, 72, 74, 76, 78, 80, 82]


@pytest.mark.asyncio
async def test_competitors_ranked_by_visibility():
    result = await make_scorer().score(PRODUCT, make_questions(), make_competitors())

    first, second = result.competitor_breakdown
    assert first.name == "HubSpot"
    assert (first.mentions, first.visibility, first.citations, first.rank) == (4, 100, 6, 1)
    assert second.name == "Pipedrive"
    assert (second.mentions, second.visibility, second.rank) == (0, 0, 2)


@pytest.mark.asyncio
async def test_question_results_and_citation_sources():
    result = await make_scorer().score(PRODUCT, make_questions(), make_competitors())

    by_id = {r.question_id: r for r in result.question_results}
    assert by_id["q1"].platforms_mentioned == ["Alpha", "Beta"]
    assert by_id["q1"].visibility_score == 100
    assert by_id["q2"].platforms_mentioned == ["Alpha"]
    assert by_id["q2"].visibility_score == 50

    # placeholder domains are filtered out
    assert [(s.platform, s.url, s.mentions) for s in result.citation_sources] == [
        ("Alpha", "g2.com", 6),
        ("Beta", "g2.com", 3),
    ]
    assert result.citation_sources[0].weight == 9.5


@pytest.mark.asyncio
async def test_oracle_errors_are_counted_not_fatal():
    def flaky(prompt):
        if "You are simulating Beta" in prompt:
            return OracleResponseError("garbled")
        return Judgment(mentioned=True, confidence=75)

    result = await make_scorer(flaky).score(PRODUCT, make_questions())
    alpha, beta = result.platform_performance
    assert alpha.score == 100
    assert beta.errors == 2
    assert beta.mention_count == 0
    assert beta.score == 0
    assert result.overall_score == 50


@pytest.mark.asyncio
async def test_overall_score_is_capped():
    result = await make_scorer(lambda p: Judgment(mentioned=True, confidence=99)).score(
        PRODUCT, make_questions()
    )
    assert [p.score for p in result.platform_performance] == [100, 100]
    assert result.overall_score == 95


@pytest.mark.asyncio
async def test_questions_are_truncated_and_calls_spaced():
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    oracle = FakeOracle(lambda p: Judgment(mentioned=False, confidence=0))
    scorer = VisibilityScorer(oracle, platforms=PLATFORMS, call_delay=0.25, jitter=lambda: 0.0,
                              sleep=fake_sleep, max_questions=3)
    questions = [TestQuestion(text=f"Question {i}?") for i in range(5)]

    result = await scorer.score(PRODUCT, questions)

    assert result.questions_evaluated == 3
    assert len(oracle.prompts) == 6
    assert delays == [0.25] * 5


@pytest.mark.asyncio
async def test_empty_questions_score_zero():
    result = await make_scorer().score(PRODUCT, [])
    assert result.overall_score == 0
    assert all(p.score == 0 for p in result.platform_performance)


@pytest.mark.asyncio
@pytest.mark.parametrize("product", [
    Product(name="", website="https://acme.test"),
    Product(name="Acme", website="  "),
])
async def test_invalid_product_rejected(product):
    with pytest.raises(InvalidProductError):
        await make_scorer().score(product, make_questions())


def test_score_helpers():
    assert calculate_platform_score(1, 2, 1.1) == 55
    assert calculate_platform_score(3, 3, 1.2) == 100
    assert calculate_platform_score(0, 0, 1.0) == 0
    assert calculate_overall_visibility([]) == 0
    assert calculate_overall_visibility([90, 100]) == 95


def test_trend_stays_in_range():
    assert generate_trend(5, jitter=lambda: 0.0)[0] == 0
    assert max(generate_trend(95, jitter=lambda: 3.0)) == 95
    assert len(generate_trend(50)) == 7


# ==================== Half-up rounding ====================

def test_helpers_round_halves_up():
    assert calculate_platform_score(1, 8, 1.0) == 13
    assert calculate_overall_visibility([0, 0, 0, 90]) == 23
    assert calculate_overall_visibility([2, 3]) == 3
    assert generate_trend(50, jitter=lambda: 0.5) == [41, 43, 45, 47, 49, 51, 53]


def ten_questions():
    return [TestQuestion(id=f"q{i}", text=f"Which CRM suits team {i}?") for i in range(10)]


@pytest.mark.asyncio
async def test_single_citation_rounds_up():
    def one_citation(prompt):
        if "You are simulating ChatGPT" in prompt and "team 0?" in prompt:
            return Judgment(mentioned=True, confidence=80)
        return Judgment(mentioned=False, confidence=0)

    scorer = VisibilityScorer(FakeOracle(one_citation), call_delay=0, jitter=lambda: 0.0)
    result = await scorer.score(PRODUCT, ten_questions())

    assert [p.platform_name for p in result.platform_performance] == [p.name for p in DEFAULT_PLATFORMS]
    # 1 citation x 6.5
    assert result.total_citations == 7


@pytest.mark.asyncio
async def test_mean_of_platform_scores_rounds_up():
    def perplexity_only(prompt):
        if "You are simulating Perplexity" in prompt:
            return Judgment(mentioned=True, confidence=60)
        return Judgment(mentioned=False, confidence=0)

    competitors = [Competitor(id="c1", name="HubSpot")]

    def perplexity_and_some_hubspot(prompt):
        judgment = perplexity_only(prompt)
        if "You are simulating Claude" in prompt and any(f"team {i}?" in prompt for i in range(5)):
            judgment.competitors_mentioned = ["HubSpot"]
        return judgment

    scorer = VisibilityScorer(FakeOracle(perplexity_and_some_hubspot), call_delay=0, jitter=lambda: 0.0)
    result = await scorer.score(PRODUCT, ten_questions(), competitors)

    assert [p.score for p in result.platform_performance] == [0, 0, 0, 90]
    assert result.overall_score == 23
    assert result.trend[0] == 13
    # 5 of 40 calls = 12.5%
    assert result.competitor_breakdown[0].visibility == 13
