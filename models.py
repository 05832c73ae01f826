"""Pydantic models shared by the scorers, the HTTP layer and reports.

JSON field names are camelCase on the wire (dashboard contract) and
snake_case in Python.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Profile inputs ===

class QuestionCategory(str, Enum):
    PRODUCT_RECOMMENDATION = "Product Recommendation"
    FEATURE_COMPARISON = "Feature Comparison"
    HOW_TO = "How-To"
    TECHNICAL = "Technical"
    PRICE_COMPARISON = "Price Comparison"
    SECURITY = "Security"
    USE_CASE = "Use Case"
    COMPATIBILITY = "Compatibility"

    @classmethod
    def coerce(cls, value: Any) -> "QuestionCategory":
        """Map free-form LLM labels onto the fixed set."""
        if not isinstance(value, str) or not value.strip():
            return cls.PRODUCT_RECOMMENDATION
        normalized = value.strip().lower().replace("_", " ").replace("-", " ")
        for member in cls:
            if member.value.lower().replace("-", " ") == normalized:
                return member
        return cls.PRODUCT_RECOMMENDATION


class QuestionOrigin(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class TestQuestion(CamelModel):
    __test__ = False  # not a pytest class

    id: str = Field(default_factory=lambda: uuid4().hex)
    text: str
    category: QuestionCategory = QuestionCategory.PRODUCT_RECOMMENDATION
    region: str = "global"
    mention_count: int = 0
    visibility_score: int = 0
    origin: QuestionOrigin = QuestionOrigin.AUTO

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value):
        if isinstance(value, QuestionCategory):
            return value
        return QuestionCategory.coerce(value)


class Competitor(CamelModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    category: str = ""
    description: str = ""
    visibility: int = 0
    mentions: int = 0
    citations: int = 0
    rank: int = 0


class Product(CamelModel):
    name: str
    website: str
    category: str = ""


# === Visibility analysis ===

class Platform(CamelModel):
    name: str
    weight: float


class SimulatedPlatformResult(CamelModel):
    platform_name: str
    weight: float
    mention_count: int = 0
    citation_count: int = 0
    score: int = 0
    errors: int = 0


class CitationSource(CamelModel):
    url: str
    platform: str
    weight: float
    mentions: int
    page_type: str = "Blog Article"


class CompetitorVisibility(CamelModel):
    id: str
    name: str
    category: str = ""
    visibility: int
    mentions: int
    citations: int
    rank: int


class QuestionResult(CamelModel):
    question_id: str
    text: str
    mention_count: int
    visibility_score: int
    platforms_mentioned: List[str] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    overall_score: int
    total_mentions: int
    total_citations: int
    seo_health: Optional[int] = None
    broken_links: int = 0
    trend: List[int] = Field(default_factory=list)
    citation_sources: List[CitationSource] = Field(default_factory=list)
    platform_performance: List[SimulatedPlatformResult] = Field(default_factory=list)
    competitor_breakdown: List[CompetitorVisibility] = Field(default_factory=list)
    question_results: List[QuestionResult] = Field(default_factory=list)
    questions_evaluated: int = 0
    last_analyzed: datetime = Field(default_factory=datetime.utcnow)


# === Health check ===

class HealthCategoryName(str, Enum):
    TECHNICAL = "technical"
    ON_PAGE = "onPage"
    CONTENT = "content"
    PERFORMANCE = "performance"
    SECURITY = "security"


class ProbeOutcome(CamelModel):
    score: int
    issues: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)
    degraded: bool = False


class HealthCheckCategory(CamelModel):
    name: HealthCategoryName
    score: int
    status: str
    issues: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class ActionItem(CamelModel):
    priority: str
    title: str
    description: str
    category: str


class HealthCheckReport(CamelModel):
    url: str
    overall_score: int
    status: str
    categories: List[HealthCheckCategory]
    action_items: List[ActionItem] = Field(default_factory=list)
    checked_at: datetime = Field(default_factory=datetime.utcnow)

    def category(self, name: HealthCategoryName) -> Optional[HealthCheckCategory]:
        for category in self.categories:
            if category.name == name:
                return category
        return None


# === Profiles ===

class ProfileStatus(str, Enum):
    DRAFT = "draft"
    GENERATING = "generating"
    READY = "ready"
    ANALYZING = "analyzing"
    COMPLETED = "completed"


class Profile(CamelModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    website_url: str
    product_name: str
    category: str
    region: str = "global"
    status: ProfileStatus = ProfileStatus.DRAFT
    questions: List[TestQuestion] = Field(default_factory=list)
    competitors: List[Competitor] = Field(default_factory=list)
    analysis_result: Optional[AnalysisResult] = None
    health_report: Optional[HealthCheckReport] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def as_product(self) -> Product:
        return Product(name=self.product_name, website=self.website_url, category=self.category)


# === Generation ===

class GeneratedProduct(CamelModel):
    name: str
    category: str = "General"
    description: str = ""


class ProductSuggestions(CamelModel):
    products: List[GeneratedProduct] = Field(default_factory=list)
    suggested_regions: List[str] = Field(default_factory=list)


class Recommendation(CamelModel):
    priority: str = "medium"
    title: str
    description: str = ""
    category: str = "content"
    difficulty: str = "moderate"
    impact: str = "medium"
    improvement: str = ""
    action_items: List[str] = Field(default_factory=list)


class OptimizationPlan(CamelModel):
    summary: str
    projected_score: int
    recommendations: List[Recommendation] = Field(default_factory=list)
