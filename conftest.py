"""Shared test fakes: scripted LLM client, scripted oracle, stub HTTP sites."""
import gzip
from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from ai_client import AIClientError
from oracle import Judgment
from profile_store import InMemoryProfileStore


class FakeAIClient:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: Optional[List[Union[str, Exception]]] = None):
        self.responses = list(responses or [])
        self.prompts: List[str] = []

    def configured_providers(self) -> Dict[str, bool]:
        return {"openai": True, "gemini": False}

    async def generate_content(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AIClientError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeOracle:
    """Answers every prompt through `decide(prompt)`."""

    def __init__(self, decide: Callable[[str], Union[Judgment, Exception]]):
        self.decide = decide
        self.prompts: List[str] = []

    async def judge(self, prompt: str) -> Judgment:
        self.prompts.append(prompt)
        result = self.decide(prompt)
        if isinstance(result, Exception):
            raise result
        return result


GOOD_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Acme CRM - Customer relationship software</title>
  <meta name="description" content="{desc}">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="canonical" href="https://acme.test/">
  <meta property="og:title" content="Acme CRM">
  <meta property="og:description" content="CRM for teams">
</head>
<body>
  <h1>Acme CRM</h1>
  <h2>Features</h2>
  <p>{body}</p>
  <a href="/pricing">Pricing</a>
  <a href="/about">About</a>
  <a href="/blog">Blog</a>
  <a href="https://external.test/">Partner</a>
  <img src="/logo.png" alt="Acme logo">
</body>
</html>""".format(
    desc="Acme CRM helps sales teams track leads, manage pipelines and close deals faster "
         "with automation, reporting and integrations for growing companies.",
    body=" ".join(f"word{i}" for i in range(700)),
)

GOOD_HEADERS = {
    "content-type": "text/html; charset=utf-8",
    "content-encoding": "gzip",
    "cache-control": "max-age=3600",
    "x-frame-options": "DENY",
    "x-content-type-options": "nosniff",
    "strict-transport-security": "max-age=31536000",
    "content-security-policy": "default-src 'self'",
}


def site_transport(html: str = GOOD_HTML, headers: Optional[Dict[str, str]] = None,
                   robots: Optional[str] = "User-agent: *\nAllow: /", sitemap: bool = True) -> httpx.MockTransport:
    """A single-site stub: homepage, robots.txt, sitemap.xml and internal pages."""
    page_headers = dict(GOOD_HEADERS if headers is None else headers)
    body = html.encode("utf-8")
    if page_headers.get("content-encoding") == "gzip":
        body = gzip.compress(body)

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/robots.txt":
            return httpx.Response(200, text=robots) if robots is not None else httpx.Response(404)
        if path == "/sitemap.xml":
            return httpx.Response(200, text="<urlset/>") if sitemap else httpx.Response(404)
        if path in ("/", ""):
            return httpx.Response(200, content=body, headers=page_headers)
        return httpx.Response(200, text="ok")

    return httpx.MockTransport(handler)


@pytest.fixture
def store():
    return InMemoryProfileStore()
