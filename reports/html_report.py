"""
Profile Report HTML Generator

Renders a self-contained HTML document for one profile: visibility score
cards, platform breakdown, competitor ranking, citation sources, trend,
SEO health categories and action items. The same HTML is posted to the PDF
service for PDF export.
"""

from datetime import datetime
from typing import Optional

from models import AnalysisResult, HealthCheckReport, Profile
from reports.components import (
    ActionItemRow,
    Badge,
    Card,
    CompetitorRow,
    HEALTH_STATUS_COLORS,
    ProgressBar,
    ScoreCard,
    TrendChart,
)
from reports.design_system import (
    ICONS,
    build_footer,
    escape_html,
    format_number,
    format_percent,
    get_score_class,
    get_styles,
)
from scoring import CATEGORY_LABELS, calculate_visibility_band


def _section(title: str, icon: str, body: str, section_id: str = '') -> str:
    id_attr = f' id="{escape_html(section_id)}"' if section_id else ''
    return f"""
    <div class="section"{id_attr}>
      <h2 class="section-title">
        <span class="icon">{ICONS[icon]}</span>
        {escape_html(title)}
      </h2>
      {body}
    </div>
    """


def build_score_cards(profile: Profile) -> str:
    analysis = profile.analysis_result
    health = profile.health_report
    if not analysis:
        return Card('<div style="color: var(--text-muted);">No analysis has been run for this profile yet.</div>')

    band, _ = calculate_visibility_band(analysis.overall_score)
    seo_health = analysis.seo_health if analysis.seo_health is not None else (health.overall_score if health else None)
    cards = [
        ScoreCard('AI Visibility', format_percent(analysis.overall_score),
                  get_score_class(analysis.overall_score), band),
        ScoreCard('Mentions', format_number(analysis.total_mentions)),
        ScoreCard('Citations', format_number(analysis.total_citations)),
        ScoreCard('SEO Health', format_percent(seo_health) if seo_health is not None else 'N/A',
                  get_score_class(seo_health) if seo_health is not None else '',
                  f'{analysis.broken_links} broken links sampled'),
    ]
    return f'<div class="score-grid">{"".join(cards)}</div>'


def build_platform_breakdown(analysis: AnalysisResult) -> str:
    if not analysis.platform_performance:
        return ''
    rows = ''.join(
        ProgressBar(p.score, label=f'{p.platform_name} ({p.mention_count} mentions, {p.citation_count} citations)')
        for p in analysis.platform_performance
    )
    return _section('Platform Breakdown', 'chartBar', Card(rows), 'section-platforms')


def build_competitor_table(profile: Profile, analysis: AnalysisResult) -> str:
    if not analysis.competitor_breakdown:
        return ''
    # raw counts, comparable with the competitor rows
    own_mentions = sum(p.mention_count for p in analysis.platform_performance)
    own_citations = sum(p.citation_count for p in analysis.platform_performance)
    rows = [CompetitorRow(None, profile.product_name, own_mentions, own_citations,
                          analysis.overall_score, is_client=True)]
    rows += [
        CompetitorRow(c.rank, c.name, c.mentions, c.citations, c.visibility)
        for c in analysis.competitor_breakdown
    ]
    table = f"""
      <table>
        <thead><tr><th>Rank</th><th>Name</th><th style="text-align: center;">Mentions</th>
        <th style="text-align: center;">Citations</th><th style="text-align: right;">Visibility</th></tr></thead>
        <tbody>{''.join(rows)}</tbody>
      </table>
    """
    return _section('Competitor Comparison', 'users', Card(table, padding='sm'), 'section-competitors')


def build_citation_sources(analysis: AnalysisResult) -> str:
    if not analysis.citation_sources:
        return ''
    rows = ''.join(f"""
        <tr>
          <td style="padding: 8px 16px;">{escape_html(s.url)}</td>
          <td style="padding: 8px 16px; color: var(--text-muted);">{escape_html(s.platform)}</td>
          <td style="padding: 8px 16px; color: var(--text-muted);">{escape_html(s.page_type)}</td>
          <td style="padding: 8px 16px; text-align: right;">{s.weight:.1f}</td>
        </tr>""" for s in analysis.citation_sources)
    table = f"""
      <table>
        <thead><tr><th>Source</th><th>Platform</th><th>Page Type</th><th style="text-align: right;">Authority</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    """
    return _section('Citation Sources', 'globe', Card(table, padding='sm'), 'section-citations')


def build_trend(analysis: AnalysisResult) -> str:
    if not analysis.trend:
        return ''
    body = Card(TrendChart(analysis.trend) + '<div style="font-size: 11px; color: var(--text-muted);">Estimated 7-day visibility trend</div>')
    return _section('Visibility Trend', 'arrowTrendingUp', body, 'section-trend')


def build_health_section(health: Optional[HealthCheckReport]) -> str:
    if not health:
        return ''
    blocks = []
    for category in health.categories:
        issues = ''.join(f'<li>{escape_html(issue)}</li>' for issue in category.issues)
        issues_html = f'<ul style="margin: 4px 0 12px 156px; color: var(--text-muted); font-size: 12px;">{issues}</ul>' if issues else ''
        label = CATEGORY_LABELS.get(category.name, str(category.name))
        blocks.append(
            ProgressBar(category.score, label=label)
            + f'<div style="margin-left: 152px;">{Badge(category.status, HEALTH_STATUS_COLORS.get(category.status, "muted"))}</div>'
            + issues_html
        )
    header = f'<div style="margin-bottom: 12px;">Overall: <strong class="{get_score_class(health.overall_score)}">{health.overall_score}/100</strong> {Badge(health.status, HEALTH_STATUS_COLORS.get(health.status, "muted"))}</div>'
    return _section('SEO Health', 'cog', Card(header + ''.join(blocks)), 'section-health')


def build_action_items(health: Optional[HealthCheckReport]) -> str:
    if not health or not health.action_items:
        return ''
    rows = ''.join(
        ActionItemRow(idx, item.title, item.description, item.priority)
        for idx, item in enumerate(health.action_items, 1)
    )
    return _section('Priority Actions', 'lightBulb', Card(rows, variant='action'), 'section-actions')


def build_question_list(profile: Profile) -> str:
    if not profile.questions:
        return ''
    rows = ''.join(f"""
        <tr>
          <td style="padding: 8px 16px;">{escape_html(q.text)}</td>
          <td style="padding: 8px 16px; color: var(--text-muted);">{escape_html(q.category.value)}</td>
          <td style="padding: 8px 16px; text-align: right;">{q.visibility_score}%</td>
        </tr>""" for q in profile.questions)
    table = f"""
      <table>
        <thead><tr><th>Question</th><th>Category</th><th style="text-align: right;">Visibility</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    """
    return _section('Test Questions', 'clipboardList', Card(table, padding='sm'), 'section-questions')


def build_profile_report_html(profile: Profile, theme: str = 'dark', generated_at: Optional[datetime] = None) -> str:
    """Main function to build the complete profile report HTML"""
    generated_at = generated_at or datetime.now()
    analysis = profile.analysis_result

    sections = [build_score_cards(profile)]
    if analysis:
        sections += [
            build_platform_breakdown(analysis),
            build_trend(analysis),
            build_competitor_table(profile, analysis),
            build_citation_sources(analysis),
        ]
    sections += [
        build_health_section(profile.health_report),
        build_action_items(profile.health_report),
        build_question_list(profile),
    ]

    return f"""<!DOCTYPE html>
<html lang="en" data-theme="{escape_html(theme)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape_html(profile.product_name)} - AI Visibility Report</title>
  {get_styles()}
</head>
<body>
  <div class="report">
    <header class="report-header">
      <h1>{escape_html(profile.product_name)}</h1>
      <div class="subtitle">{escape_html(profile.category)} &middot; {escape_html(profile.region)} &middot; {escape_html(profile.website_url)}</div>
      <div class="subtitle">{generated_at.strftime('%B %d, %Y')}</div>
    </header>
    {''.join(s for s in sections if s)}
    {build_footer(client_name=profile.name)}
  </div>
</body>
</html>"""
