"""Product discovery and optimization recommendations.

Two small sub-apps share this module:
- products_app     (mounted at /api/v1/products):     POST /generate {websiteUrl}
- optimization_app (mounted at /api/v1/optimization): POST /content {profileId}
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ai_client import AIClient, get_ai_client
from api_errors import APIError, install_error_handlers, ok
from fetcher import InvalidURLError
from generation import generate_products, get_optimization_recommendations
from models import CamelModel
from profile_store import InMemoryProfileStore, ProfileNotFoundError, get_profile_store

logger = logging.getLogger(__name__)


def _sub_app(title: str, description: str) -> FastAPI:
    sub_app = FastAPI(title=title, description=description, version="1.0.0")
    sub_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(sub_app)
    return sub_app


products_app = _sub_app("Product Discovery", "List a website's products for profile creation")
optimization_app = _sub_app("Optimization", "AI visibility optimization recommendations")


class ProductsRequest(CamelModel):
    website_url: Optional[str] = None


class OptimizationRequest(CamelModel):
    profile_id: Optional[str] = None


@products_app.post("/generate")
async def generate_product_list(request: ProductsRequest, ai_client: AIClient = Depends(get_ai_client)):
    if not request.website_url or not request.website_url.strip():
        raise APIError(400, "VALIDATION_ERROR", "websiteUrl is required")

    try:
        suggestions = await generate_products(ai_client, request.website_url)
    except InvalidURLError as e:
        raise APIError(400, "INVALID_URL", str(e))
    except Exception as e:
        logger.error(f"Product generation failed for {request.website_url}: {e}")
        raise APIError(500, "GENERATION_ERROR", str(e))

    return ok(suggestions)


@optimization_app.post("/content")
async def optimize_content(
    request: OptimizationRequest,
    store: InMemoryProfileStore = Depends(get_profile_store),
    ai_client: AIClient = Depends(get_ai_client),
):
    if not request.profile_id:
        raise APIError(400, "VALIDATION_ERROR", "profileId is required")
    try:
        profile = store.get(request.profile_id)
    except ProfileNotFoundError:
        raise APIError(404, "NOT_FOUND", "Profile not found")

    try:
        plan = await get_optimization_recommendations(ai_client, profile)
    except Exception as e:
        logger.error(f"Optimization failed for profile {request.profile_id}: {e}")
        raise APIError(500, "OPTIMIZATION_ERROR", str(e))

    return ok(plan)
