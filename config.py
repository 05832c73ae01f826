"""Runtime configuration and scoring policy constants.

Environment variables are loaded from `.env.local` then `.env`.
Constants below encode product policy and are shared by the scorers,
the HTTP layer and the CLI.
"""

import os

from dotenv import load_dotenv

load_dotenv('.env.local')
load_dotenv()


# === Providers ===

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
PDF_SERVICE_URL = os.getenv("PDF_SERVICE_URL", "http://localhost:8001/pdf/convert")

# === Visibility scoring ===

MAX_QUESTIONS_PER_RUN = 10
MENTION_CONFIDENCE_THRESHOLD = 50   # mentioned only above this
CITATION_CONFIDENCE_THRESHOLD = 70  # cited only above this
HEURISTIC_CONFIDENCE = 60
VISIBILITY_SCORE_CAP = 95
MENTION_DISPLAY_MULTIPLIER = 15
CITATION_DISPLAY_MULTIPLIER = 6.5
ORACLE_CALL_DELAY = float(os.getenv("ORACLE_CALL_DELAY", "0.1"))

TREND_POINTS = 7
TREND_OFFSET = 10
TREND_STEP = 2
TREND_JITTER_MAX = 3.0

# Platform name -> relative authority weight
PLATFORM_WEIGHTS = {
    "ChatGPT": 1.2,
    "Claude": 1.0,
    "Gemini": 1.1,
    "Perplexity": 0.9,
}

# === Health check ===

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
AUX_TIMEOUT = 5.0        # robots.txt / sitemap.xml / link sampling
PERFORMANCE_TIMEOUT = 15.0
PROBE_FAILURE_SCORE = 50
MAX_ACTION_ITEMS = 5
BROKEN_LINK_SAMPLE = 5
