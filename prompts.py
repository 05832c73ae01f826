"""Prompt templates for LLM-backed generation."""

from typing import Optional


def questions_and_competitors_prompt(product_name: str, category: str, region: str, website_url: str = "") -> str:
    return f"""<task>
You are an AEO (Answer Engine Optimization) intelligence assistant.
Generate (1) generic questions users ask AI assistants when researching
{category} products and (2) the top real-world competitors of {product_name}.
</task>

<context>
Product: {product_name}
Category: {category}
Region: {region}
Company Website: {website_url or 'N/A'}
</context>

<instructions>
PART 1 - Generate 15-20 GENERIC questions about the {category} category.
Questions must apply to ANY product in the category, NOT specifically to {product_name}.
Good: "What is the best CRM software for small business?"
Bad: "What is Salesforce?"

Distribute questions evenly across these categories (use the exact labels):
Product Recommendation, Feature Comparison, How-To, Technical,
Price Comparison, Security, Use Case, Compatibility

PART 2 - Identify 5 REAL direct competitors of {product_name} available in the
{region} market: name, category and a one-sentence description.
</instructions>

<output_format>
Return ONLY valid JSON:
{{
  "questions": [
    {{"question": "What is the best CRM software for small business?", "category": "Product Recommendation", "region": "{region}"}}
  ],
  "competitors": [
    {{"name": "HubSpot CRM", "category": "{category}", "description": "All-in-one CRM platform with marketing automation"}}
  ]
}}
</output_format>"""


def products_list_prompt(normalized_url: str) -> str:
    return f"""<task>
You are a product intelligence assistant. Given a website URL, list the key
products, services or solutions of the company that owns the domain, each with
a GENERIC industry category.
</task>

<input>
<url>{normalized_url}</url>
</input>

<instructions>
1. Determine which company owns or operates the website.
2. List its main, most recognizable offerings (max 10).
3. Exclude blog links, careers, documentation and unrelated business info.
4. Categories are generic industry terms of 1-3 words in title case
   (e.g. "CRM Software", "Smartphones", "Cloud Storage"), never company-specific.
</instructions>

<output_format>
Return ONLY valid JSON:
{{
  "products": [
    {{"name": "Salesforce Sales Cloud", "category": "CRM Software"}},
    {{"name": "Salesforce Marketing Cloud", "category": "Marketing Automation"}}
  ]
}}
</output_format>"""


def optimization_prompt(product_name: str, category: str, website_url: str, current_score: Optional[int]) -> str:
    return f"""Analyze this website and product and provide 5 detailed content optimization recommendations to improve AI visibility and citation weight.

Product: {product_name}
Category: {category}
Website: {website_url}
Current Visibility: {current_score or 0}%

Provide recommendations in the following JSON format:
[
  {{
    "priority": "critical|high|medium|low",
    "title": "Recommendation Title",
    "description": "Detailed description",
    "category": "technical|content|seo|citations",
    "difficulty": "easy|moderate|hard",
    "impact": "high|medium|low",
    "improvement": "+X% visibility",
    "actionItems": ["Action 1", "Action 2", "Action 3"]
  }}
]

Focus on:
1. Technical SEO improvements
2. Content quality enhancements
3. Citation building strategies
4. Schema markup and structured data
5. Natural language optimization

Return ONLY valid JSON array."""
