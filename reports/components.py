"""
Reusable report components.

Each component is a pure function that returns an HTML string.
"""

from typing import List, Literal, Optional, Tuple

from reports.design_system import escape_html

StatusColor = Literal['success', 'warning', 'danger', 'info', 'muted']
Size = Literal['sm', 'md', 'lg']

PRIORITY_COLORS: dict[str, StatusColor] = {
    'critical': 'danger',
    'high': 'warning',
    'medium': 'info',
    'low': 'muted',
}

HEALTH_STATUS_COLORS: dict[str, StatusColor] = {
    'excellent': 'success',
    'good': 'info',
    'fair': 'warning',
    'poor': 'danger',
    'critical': 'danger',
}


# score floor -> color, highest first
SCORE_COLOR_STEPS: List[Tuple[int, StatusColor]] = [(70, 'success'), (50, 'info'), (30, 'warning')]


def get_status_color(value: float) -> StatusColor:
    for floor, color in SCORE_COLOR_STEPS:
        if value >= floor:
            return color
    return 'danger'


COLOR_HEX: dict[StatusColor, str] = {
    'success': '#4ade80', 'info': '#60a5fa', 'warning': '#fbbf24',
    'danger': '#f87171', 'muted': '#71717a',
}


def _get_color_hex(color: StatusColor) -> str:
    return COLOR_HEX.get(color, COLOR_HEX['muted'])


# ============================================================================
# PROGRESS BAR
# ============================================================================

def ProgressBar(value: float, label: Optional[str] = None, size: Size = 'md', show_value: bool = True) -> str:
    """
    Horizontal progress bar.

    Example:
        ProgressBar(75)
        ProgressBar(30, label='Security')
    """
    color_hex = _get_color_hex(get_status_color(value))
    clamped_value = min(100, max(0, value))
    height = {'sm': '4px', 'md': '8px', 'lg': '12px'}[size]

    label_html = f'<span style="min-width: 140px; font-size: 13px; color: var(--text-secondary);">{escape_html(label)}</span>' if label else ''
    value_html = f'<span style="min-width: 45px; text-align: right; font-size: 13px; font-weight: 500; color: {color_hex};">{round(clamped_value)}%</span>' if show_value else ''

    return f'''
    <div class="ds-progress" style="display: flex; align-items: center; gap: 12px; padding: 4px 0;">
      {label_html}
      <div style="flex: 1; height: {height}; background: var(--gray-800); border-radius: 4px; overflow: hidden;">
        <div style="width: {clamped_value}%; height: 100%; background: {color_hex}; border-radius: 3px;"></div>
      </div>
      {value_html}
    </div>
    '''


# ============================================================================
# BADGE
# ============================================================================

def Badge(text: str, color: StatusColor = 'muted') -> str:
    """Badge('Excellent', color='success')"""
    status_colors: dict[str, dict[str, str]] = {
        'success': {'bg': 'rgba(74, 222, 128, 0.15)', 'text': '#4ade80'},
        'warning': {'bg': 'rgba(251, 191, 36, 0.15)', 'text': '#fbbf24'},
        'danger': {'bg': 'rgba(248, 113, 113, 0.15)', 'text': '#f87171'},
        'info': {'bg': 'rgba(96, 165, 250, 0.15)', 'text': '#60a5fa'},
        'muted': {'bg': 'var(--badge-bg)', 'text': 'var(--text-secondary)'},
    }
    colors = status_colors.get(color, status_colors['muted'])
    return f'<span class="ds-badge" style="display: inline-block; padding: 3px 8px; border-radius: 4px; font-size: 10px; font-weight: 600; text-transform: uppercase; letter-spacing: 0.3px; background: {colors["bg"]}; color: {colors["text"]};">{escape_html(text)}</span>'


# ============================================================================
# CARD
# ============================================================================

def Card(children: str, variant: Literal['default', 'action'] = 'default', padding: Size = 'md') -> str:
    """Bordered container; the action variant adds an accent bar on the left."""
    pad = {'sm': 'var(--space-sm) var(--space-md)', 'md': 'var(--space-md) var(--space-lg)'}.get(padding, 'var(--space-lg) var(--space-xl)')
    accent = ' border-left: 3px solid var(--brand-primary);' if variant == 'action' else ''
    return f'''
    <div class="ds-card ds-card-{variant}" style="background: var(--bg-card); border-radius: var(--border-radius); padding: {pad}; border: 1px solid var(--border-color);{accent}">
      {children}
    </div>
    '''


def ScoreCard(label: str, value: str, score_class: str = '', caption: str = '') -> str:
    caption_html = f'<div style="font-size: 12px; color: var(--text-muted);">{escape_html(caption)}</div>' if caption else ''
    return Card(f'''
      <div class="score-card">
        <div class="label">{escape_html(label)}</div>
        <div class="value {score_class}">{escape_html(value)}</div>
        {caption_html}
      </div>
    ''')


# ============================================================================
# ROWS
# ============================================================================

def ActionItemRow(number: int, title: str, description: str, priority: str = 'medium') -> str:
    return f'''
    <div class="ds-action-item" style="display: flex; gap: 12px; padding: 12px 0; border-bottom: 1px solid var(--border-color);">
      <span style="color: var(--text-muted); font-size: 13px; font-weight: 500; min-width: 20px;">{number}.</span>
      <div style="flex: 1;">
        <div style="font-weight: 500; font-size: 14px; color: var(--text-primary);">{escape_html(title)} {Badge(priority, PRIORITY_COLORS.get(priority, 'muted'))}</div>
        <div style="font-size: 13px; color: var(--text-muted); margin-top: 4px;">{escape_html(description)}</div>
      </div>
    </div>
    '''


def CompetitorRow(rank: Optional[int], name: str, mentions: int, citations: int, visibility: float, is_client: bool = False) -> str:
    color_hex = _get_color_hex(get_status_color(visibility))
    client_label = ' <span style="color: var(--text-muted);">(You)</span>' if is_client else ''
    return f'''
    <tr>
      <td style="padding: 10px 16px; font-size: 13px; color: var(--text-muted);">{rank if rank is not None else "-"}</td>
      <td style="padding: 10px 16px; font-size: 13px; color: var(--text-primary);">{escape_html(name)}{client_label}</td>
      <td style="padding: 10px 16px; text-align: center; font-size: 13px; color: var(--text-muted);">{mentions}</td>
      <td style="padding: 10px 16px; text-align: center; font-size: 13px; color: var(--text-muted);">{citations}</td>
      <td style="padding: 10px 16px; text-align: right; font-size: 12px; color: {color_hex};">{round(visibility)}%</td>
    </tr>
    '''


def TrendChart(points: List[int], width: int = 600, height: int = 120) -> str:
    """Inline SVG polyline for a short score series (0-100)."""
    if not points:
        return '<div style="color: var(--text-muted);">No trend data</div>'
    step = width / max(1, len(points) - 1)
    coords = ' '.join(f'{round(i * step, 1)},{round(height - (p / 100) * height, 1)}' for i, p in enumerate(points))
    labels = ''.join(
        f'<text x="{round(i * step, 1)}" y="{height + 14}" font-size="10" fill="#737373" text-anchor="middle">{p}</text>'
        for i, p in enumerate(points)
    )
    return f'''
    <svg viewBox="-10 -10 {width + 20} {height + 30}" style="width: 100%; height: auto;" xmlns="http://www.w3.org/2000/svg">
      <polyline points="{coords}" fill="none" stroke="#60a5fa" stroke-width="2" />
      {labels}
    </svg>
    '''
