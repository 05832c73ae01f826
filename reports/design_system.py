"""
AEO Intelligence Design System

Shared look for generated profile reports (HTML and the PDF rendered from it).

Design Philosophy:
- Mostly grayscale
- ONE accent color: blue (#60a5fa)
- Status colors only for scores
- Uniform spacing (4/8/16/24/32px)
"""

from datetime import datetime
from typing import Literal, Optional

# ============================================================================
# BRANDING
# ============================================================================

BRAND = {
    'name': 'AEO Intelligence',
    'tagline': 'AI Visibility & SEO Health',
}

# ============================================================================
# ICONS (inline SVG - no external dependencies)
# ============================================================================

ICONS = {
    'chartBar': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M3 13.125C3 12.504 3.504 12 4.125 12h2.25c.621 0 1.125.504 1.125 1.125v6.75C7.5 20.496 6.996 21 6.375 21h-2.25A1.125 1.125 0 0 1 3 19.875v-6.75ZM9.75 8.625c0-.621.504-1.125 1.125-1.125h2.25c.621 0 1.125.504 1.125 1.125v11.25c0 .621-.504 1.125-1.125 1.125h-2.25a1.125 1.125 0 0 1-1.125-1.125V8.625ZM16.5 4.125c0-.621.504-1.125 1.125-1.125h2.25C20.496 3 21 3.504 21 4.125v15.75c0 .621-.504 1.125-1.125 1.125h-2.25a1.125 1.125 0 0 1-1.125-1.125V4.125Z" /></svg>''',
    'users': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M15 19.128a9.38 9.38 0 0 0 2.625.372 9.337 9.337 0 0 0 4.121-.952 4.125 4.125 0 0 0-7.533-2.493M15 19.128v-.003c0-1.113-.285-2.16-.786-3.07M12 6.375a3.375 3.375 0 1 1-6.75 0 3.375 3.375 0 0 1 6.75 0Z" /></svg>''',
    'globe': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M12 21a9.004 9.004 0 0 0 8.716-6.747M12 21a9.004 9.004 0 0 1-8.716-6.747M12 21c2.485 0 4.5-4.03 4.5-9S14.485 3 12 3m0 18c-2.485 0-4.5-4.03-4.5-9S9.515 3 12 3" /></svg>''',
    'arrowTrendingUp': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M2.25 18 9 11.25l4.306 4.306a11.95 11.95 0 0 1 5.814-5.518l2.74-1.22m0 0-5.94-2.281m5.94 2.28-2.28 5.941" /></svg>''',
    'clipboardList': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M9 12h3.75M9 15h3.75M9 18h3.75m3 .75H18a2.25 2.25 0 0 0 2.25-2.25V6.108c0-1.135-.845-2.098-1.976-2.192M8.25 8.25H4.875c-.621 0-1.125.504-1.125 1.125v11.25c0 .621.504 1.125 1.125 1.125h9.75c.621 0 1.125-.504 1.125-1.125V9.375c0-.621-.504-1.125-1.125-1.125H8.25Z" /></svg>''',
    'cog': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M15 12a3 3 0 1 1-6 0 3 3 0 0 1 6 0Z" /><path stroke-linecap="round" stroke-linejoin="round" d="M12 3v2.25M12 18.75V21M3 12h2.25M18.75 12H21" /></svg>''',
    'lightBulb': '''<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke-width="1.5" stroke="currentColor" class="icon-svg"><path stroke-linecap="round" stroke-linejoin="round" d="M12 18v-5.25m0 0a6.01 6.01 0 0 0 1.5-.189m-1.5.189a6.01 6.01 0 0 1-1.5-.189m3.75 7.478a12.06 12.06 0 0 1-4.5 0m3.75 2.383a14.406 14.406 0 0 1-3 0M14.25 18v-.192c0-.983.658-1.823 1.508-2.316a7.5 7.5 0 1 0-7.517 0c.85.493 1.509 1.333 1.509 2.316V18" /></svg>''',
}

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def escape_html(s: str | int | None) -> str:
    """Escape HTML special characters"""
    if s is None:
        return ''
    s = str(s)
    return (s.replace('&', '&amp;')
             .replace('<', '&lt;')
             .replace('>', '&gt;')
             .replace('"', '&quot;'))


def format_percent(value: float | None, decimals: int = 0) -> str:
    """Format number as percentage"""
    if value is None or (isinstance(value, float) and value != value):  # NaN check
        return 'N/A'
    return f'{value:.{decimals}f}%'


def format_number(value: int | float | None) -> str:
    """Format number with thousands separator"""
    if value is None or (isinstance(value, float) and value != value):
        return '0'
    return f'{int(value):,}' if isinstance(value, float) and value.is_integer() else f'{value:,}'


def get_score_class(value: float, excellent: float = 80, good: float = 60, fair: float = 40) -> str:
    """Get CSS class based on score thresholds"""
    if value >= excellent:
        return 'excellent'
    if value >= good:
        return 'good'
    if value >= fair:
        return 'fair'
    return 'poor'


# ============================================================================
# CSS STYLES
# ============================================================================

_BASE_CSS = '''
:root {
  --bg-page: #0a0a0a; --bg-card: #141414; --border-color: #262626;
  --text-primary: #fafafa; --text-secondary: #a3a3a3; --text-muted: #737373;
  --gray-800: #262626; --brand-primary: #60a5fa; --badge-bg: #1f1f1f;
  --color-success: #4ade80; --color-warning: #fbbf24; --color-danger: #f87171;
  --space-sm: 8px; --space-md: 16px; --space-lg: 24px; --space-xl: 32px;
  --border-radius: 8px; --border-radius-lg: 12px;
}
[data-theme="light"] {
  --bg-page: #ffffff; --bg-card: #fafafa; --border-color: #e5e5e5;
  --text-primary: #0a0a0a; --text-secondary: #404040; --text-muted: #737373;
  --gray-800: #e5e5e5; --badge-bg: #f0f0f0;
}
* { box-sizing: border-box; }
body { margin: 0; background: var(--bg-page); color: var(--text-primary);
  font-family: Inter, -apple-system, "Segoe UI", sans-serif; font-size: 14px; line-height: 1.5; }
.report { max-width: 960px; margin: 0 auto; padding: var(--space-xl); }
.report-header h1 { margin: 0 0 4px; font-size: 28px; }
.report-header .subtitle { color: var(--text-muted); }
.section { margin-top: var(--space-xl); }
.section-title { display: flex; align-items: center; gap: 8px; font-size: 18px; margin: 0 0 var(--space-md); }
.icon-svg { width: 20px; height: 20px; }
.score-grid { display: grid; grid-template-columns: repeat(4, 1fr); gap: var(--space-md); }
.score-card .label { color: var(--text-muted); font-size: 12px; text-transform: uppercase; }
.score-card .value { font-size: 28px; font-weight: 600; }
.excellent { color: var(--color-success); } .good { color: var(--brand-primary); }
.fair { color: var(--color-warning); } .poor { color: var(--color-danger); }
table { width: 100%; border-collapse: collapse; }
th { text-align: left; font-size: 11px; text-transform: uppercase; color: var(--text-muted);
  padding: 8px 16px; border-bottom: 1px solid var(--border-color); }
td { border-bottom: 1px solid var(--border-color); }
.report-footer { margin-top: 48px; padding-top: var(--space-md); border-top: 1px solid var(--border-color);
  color: var(--text-muted); font-size: 12px; display: flex; justify-content: space-between; }
'''


def get_styles(theme: Literal['dark', 'light'] = 'dark') -> str:
    """Inline stylesheet; theme switches via the data-theme attribute on <html>."""
    return f'<style type="text/css">{_BASE_CSS}</style>'


def build_footer(client_name: Optional[str] = None, show_timestamp: bool = True) -> str:
    timestamp = datetime.now().strftime('%B %d, %Y')
    date_html = f'<span class="footer-date">Generated {escape_html(timestamp)}</span>' if show_timestamp else ''
    client_html = f' &middot; <span class="footer-client">{escape_html(client_name)}</span>' if client_name else ''
    return f'''
    <footer class="report-footer">
      <div class="footer-brand">{escape_html(BRAND['name'])} &middot; {escape_html(BRAND['tagline'])}</div>
      <div class="footer-meta">{date_html}{client_html}</div>
    </footer>
    '''
