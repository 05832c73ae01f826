"""
Tests for health score composition and action items.
Run with: pytest test_scoring.py -v
"""
import pytest

from models import HealthCategoryName as C
from scoring import (
    calculate_overall_score,
    calculate_visibility_band,
    clamp_score,
    generate_action_items,
    get_status,
    round_half_up,
)


@pytest.mark.parametrize("score,status", [
    (100, "excellent"), (90, "excellent"), (89, "good"), (75, "good"),
    (74, "fair"), (60, "fair"), (59, "poor"), (40, "poor"), (39, "critical"), (0, "critical"),
])
def test_status_thresholds(score, status):
    assert get_status(score) == status


def test_overall_score_is_rounded_mean():
    assert calculate_overall_score([80, 90, 70, 60, 51]) == 70
    assert calculate_overall_score([]) == 0


def test_clamp_score():
    assert clamp_score(-5) == 0
    assert clamp_score(104.2) == 100
    assert clamp_score(66.6) == 67


def test_low_categories_come_first():
    scores = {C.TECHNICAL: 90, C.ON_PAGE: 45, C.CONTENT: 80, C.PERFORMANCE: 59, C.SECURITY: 60}
    items = generate_action_items(["Missing meta description"], scores)

    assert [i.title for i in items] == [
        "Improve On-Page SEO",
        "Improve Performance",
        "Optimize Meta Descriptions",
    ]
    assert items[0].priority == "high"
    assert items[0].description == "Score is 45/100 - requires immediate attention"
    assert items[0].category == "onPage"


def test_issue_rules_in_declaration_order():
    issues = [
        "Slow page load (3500ms)",
        "3 images missing alt text",
        "Website not using HTTPS",
        "sitemap.xml not found",
    ]
    items = generate_action_items(issues, {})
    assert [(i.priority, i.title) for i in items] == [
        ("critical", "Enable HTTPS"),
        ("high", "Create XML Sitemap"),
        ("medium", "Add Alt Text to Images"),
        ("medium", "Improve Page Speed"),
    ]


def test_action_items_truncated():
    scores = {name: 10 for name in C}
    items = generate_action_items(["robots.txt not found"], scores)
    assert len(items) == 5
    assert all(i.title.startswith("Improve ") for i in items)


def test_rule_fires_once_for_many_matching_issues():
    items = generate_action_items(["Website not using HTTPS", "Not using HTTPS"], {})
    assert [i.title for i in items] == ["Enable HTTPS"]


def test_visibility_band():
    assert calculate_visibility_band(85)[0] == "Excellent"
    assert calculate_visibility_band(50)[0] == "Moderate"
    assert calculate_visibility_band(10)[0] == "Critical"


def test_round_half_up():
    assert [round_half_up(v) for v in (0.5, 1.5, 2.5, 22.5, 2.49, 0.0)] == [1, 2, 3, 23, 2, 0]
    assert clamp_score(62.5) == 63
