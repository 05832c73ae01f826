"""Scoring Module - health score composition and action items

The five probe scores are combined with an unweighted mean. Each category
gets a status label, and a short prioritized action list is derived from
the low-scoring categories plus a fixed set of issue rules.

Status labels:
- excellent (90+)
- good (75-89)
- fair (60-74)
- poor (40-59)
- critical (<40)
"""

import math
from typing import Dict, List, Sequence, Tuple

import config
from models import ActionItem, HealthCategoryName

CATEGORY_LABELS = {
    HealthCategoryName.TECHNICAL: 'Technical SEO',
    HealthCategoryName.ON_PAGE: 'On-Page SEO',
    HealthCategoryName.CONTENT: 'Content Quality',
    HealthCategoryName.PERFORMANCE: 'Performance',
    HealthCategoryName.SECURITY: 'Security',
}

# Categories scoring below this get an "Improve ..." item
LOW_CATEGORY_THRESHOLD = 60

# (keywords, priority, title, description, category); any keyword match in any issue triggers
ISSUE_RULES: List[Tuple[Tuple[str, ...], str, str, str, str]] = [
    (('HTTPS',), 'critical', 'Enable HTTPS',
     'Install SSL certificate and redirect all HTTP traffic to HTTPS', 'security'),
    (('robots.txt',), 'high', 'Create robots.txt',
     'Add robots.txt file to guide search engine crawlers', 'technical'),
    (('sitemap',), 'high', 'Create XML Sitemap',
     'Generate and submit sitemap.xml to search engines', 'technical'),
    (('meta description',), 'medium', 'Optimize Meta Descriptions',
     'Add or improve meta descriptions (120-160 characters)', 'onPage'),
    (('alt text',), 'medium', 'Add Alt Text to Images',
     'Improve accessibility and SEO by adding descriptive alt text', 'onPage'),
    (('load', 'performance'), 'medium', 'Improve Page Speed',
     'Optimize images, enable compression, and minimize resources', 'performance'),
]


def round_half_up(value: float) -> int:
    """Round halves up: 2.5 -> 3, 22.5 -> 23."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, round_half_up(value))))


def get_status(score: float) -> str:
    """Convert a 0-100 score to a status label."""
    if score >= 90:
        return 'excellent'
    elif score >= 75:
        return 'good'
    elif score >= 60:
        return 'fair'
    elif score >= 40:
        return 'poor'
    else:
        return 'critical'


def calculate_overall_score(scores: Sequence[float]) -> int:
    """Unweighted mean of category scores, rounded."""
    if not scores:
        return 0
    return clamp_score(sum(scores) / len(scores))


def generate_action_items(
    issues: Sequence[str],
    scores: Dict[HealthCategoryName, int],
    limit: int = config.MAX_ACTION_ITEMS,
) -> List[ActionItem]:
    """Build the prioritized action list.

    Low categories come first in fixed category order, followed by the
    issue rules in declaration order. The list is truncated to `limit`.
    """
    items: List[ActionItem] = []

    for category in HealthCategoryName:
        score = scores.get(category)
        if score is not None and score < LOW_CATEGORY_THRESHOLD:
            items.append(ActionItem(
                priority='high',
                title=f'Improve {CATEGORY_LABELS[category]}',
                description=f'Score is {score}/100 - requires immediate attention',
                category=category.value,
            ))

    for keywords, priority, title, description, category in ISSUE_RULES:
        if any(keyword in issue for issue in issues for keyword in keywords):
            items.append(ActionItem(
                priority=priority,
                title=title,
                description=description,
                category=category,
            ))

    return items[:limit]


def calculate_visibility_band(score: float) -> tuple:
    """Convert score to visibility band and color.

    Returns:
        Tuple of (band_name, hex_color)
    """
    if score >= 80:
        return ('Excellent', '#22c55e')  # Green
    elif score >= 65:
        return ('Strong', '#84cc16')     # Lime
    elif score >= 45:
        return ('Moderate', '#eab308')   # Yellow
    elif score >= 25:
        return ('Weak', '#f97316')       # Orange
    else:
        return ('Critical', '#ef4444')   # Red
