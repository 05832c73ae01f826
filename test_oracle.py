"""
Tests for the mention oracle prompt and verdict parsing.
Run with: pytest test_oracle.py -v
"""
import pytest

import config
from conftest import FakeAIClient
from models import Competitor, Product, TestQuestion
from oracle import LLMMentionOracle, OracleResponseError, build_judgment_prompt, parse_judgment


def test_prompt_contains_context():
    product = Product(name="Acme CRM", website="https://acme.test", category="CRM")
    question = TestQuestion(text="What is the best CRM for startups?", region="uk")
    prompt = build_judgment_prompt(product, question, "Perplexity", [Competitor(name="HubSpot")])

    assert "You are simulating Perplexity" in prompt
    assert "Acme CRM" in prompt
    assert "HubSpot" in prompt
    assert "Region: uk" in prompt
    assert "What is the best CRM for startups?" in prompt
    # CRM category sources are offered as citation domains
    assert "g2.com" in prompt


def test_parse_json_verdict():
    judgment = parse_judgment(
        '```json\n{"mentioned": true, "confidence": 85, "sources": ["g2.com", 3], '
        '"competitorsMentioned": ["HubSpot"]}\n```'
    )
    assert judgment.mentioned is True
    assert judgment.confidence == 85
    assert judgment.sources == ["g2.com"]
    assert judgment.competitors_mentioned == ["HubSpot"]


def test_parse_string_booleans_and_clamped_confidence():
    judgment = parse_judgment('{"mentioned": "yes", "confidence": 180}')
    assert judgment.mentioned is True
    assert judgment.confidence == 100


def test_parse_heuristic_yes():
    judgment = parse_judgment("Yes, it would definitely come up.")
    assert judgment.mentioned is True
    assert judgment.confidence == config.HEURISTIC_CONFIDENCE


def test_parse_heuristic_not_mentioned():
    judgment = parse_judgment("The product is not mentioned in this answer.")
    assert judgment.mentioned is False
    assert judgment.confidence == 0


def test_parse_unreadable_raises():
    with pytest.raises(OracleResponseError):
        parse_judgment("I cannot say.")


@pytest.mark.asyncio
async def test_llm_oracle_uses_ai_client():
    ai_client = FakeAIClient(['{"mentioned": false, "confidence": 20}'])
    judgment = await LLMMentionOracle(ai_client).judge("prompt text")
    assert judgment.mentioned is False
    assert judgment.confidence == 20
    assert ai_client.prompts == ["prompt text"]
