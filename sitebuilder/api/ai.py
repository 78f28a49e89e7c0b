# sitebuilder/api/ai.py
"""
AI SEO routes.

``/ai/seo`` and ``/ai/seo-optimize`` are separate contracts with their own
bounds and response shapes; both go through the same provider client.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..auth import authenticate, authorize
from ..db import get_db
from ..errors import ProviderAuthError, ProviderError, ProviderRateLimitError
from ..schemas.ai import SeoOptimizeRequest, SeoSuggestRequest
from ..services.ai import AVAILABLE_MODELS, AIService, get_ai_service
from ..services.audit import log_audit
from ..utils.dates import utcnow
from .parsing import parse_body
from .response_builders import api_boundary, error_response, rate_limit_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

AI_AUTH_FAILED = "AI service authentication failed. Please check OPENAI_API_KEY."
AI_RATE_LIMITED = "AI service rate limit exceeded. Please try again later."


def provider_error_response(exc: ProviderError) -> Optional[Response]:
    """Map the two provider outcomes callers must be able to tell apart"""
    if isinstance(exc, ProviderAuthError):
        logger.error("AI provider authentication failed: %s", exc)
        return error_response(AI_AUTH_FAILED, 500)
    if isinstance(exc, ProviderRateLimitError):
        logger.warning("AI provider rate limited", extra={"retry_after": exc.retry_after})
        return rate_limit_response(AI_RATE_LIMITED, exc.retry_after)
    return None


@router.post("/seo")
@api_boundary("Failed to generate SEO suggestions")
async def generate_seo(request: Request, db: Session = Depends(get_db),
                       ai: AIService = Depends(get_ai_service)):
    body = await parse_body(request, SeoSuggestRequest)
    if isinstance(body, Response):
        return body

    caller = authorize(request, db, body.tenant_id, "write:seo")
    if isinstance(caller, Response):
        return caller

    model = body.model or ai.get_default_model()
    try:
        suggestion = await ai.enhance_seo(
            body.content,
            body.current_title,
            target_keywords=body.target_keywords,
            business_type=body.business_type,
            model=body.model,
        )
    except ProviderError as exc:
        mapped = provider_error_response(exc)
        if mapped is None:
            raise
        return mapped

    log_audit(
        db,
        actor_id=caller.id,
        tenant_id=body.tenant_id,
        action="ai_seo.generate",
        resource_type="seo_metadata",
        metadata={
            "contentLength": len(body.content),
            "currentTitle": body.current_title,
            "suggestedTitle": suggestion.metaTitle,
            "keywordCount": len(suggestion.keywords),
            "model": model,
        },
        request=request,
    )

    return success_response(
        {
            "current": {"title": body.current_title},
            "suggestions": {
                "metaTitle": suggestion.metaTitle,
                "metaDescription": suggestion.metaDescription,
                "keywords": suggestion.keywords,
                "improvements": suggestion.suggestions,
            },
            "metadata": {"model": model},
        },
        message="SEO suggestions generated successfully",
    )


@router.post("/seo-optimize")
@api_boundary("Failed to optimize SEO")
async def optimize_seo(request: Request, db: Session = Depends(get_db),
                       ai: AIService = Depends(get_ai_service)):
    body = await parse_body(request, SeoOptimizeRequest)
    if isinstance(body, Response):
        return body

    caller = authorize(request, db, body.tenant_id, "write:seo")
    if isinstance(caller, Response):
        return caller

    model = body.model or ai.get_default_model()
    try:
        suggestion = await ai.enhance_seo(
            body.content,
            body.title or "",
            target_keywords=body.keywords,
            model=body.model,
        )
    except ProviderError as exc:
        mapped = provider_error_response(exc)
        if mapped is None:
            raise
        return mapped

    log_audit(
        db,
        actor_id=caller.id,
        tenant_id=body.tenant_id,
        action="ai_seo_optimize.generate",
        resource_type="seo",
        metadata={"contentLength": len(body.content), "model": model},
        request=request,
    )

    return success_response(
        {
            "suggestions": {
                "metaTitle": {"current": body.title or "", "suggestions": [suggestion.metaTitle]},
                "metaDescription": {"suggestions": [suggestion.metaDescription]},
                "keywords": {"current": body.keywords or [], "suggestions": suggestion.keywords},
                "improvements": [
                    {"aspect": "general", "recommended": s, "priority": "medium"}
                    for s in suggestion.suggestions
                ],
            },
            "metadata": {
                "contentLength": len(body.content),
                "timestamp": utcnow().isoformat(),
                "model": model,
            },
        },
        message="SEO optimization completed successfully",
    )


@router.get("/models")
@api_boundary("Failed to list AI models")
async def list_models(request: Request, db: Session = Depends(get_db),
                      ai: AIService = Depends(get_ai_service)):
    caller = authenticate(request, db)
    if isinstance(caller, Response):
        return caller

    return success_response({
        "currentModel": ai.get_default_model(),
        "availableModels": ai.get_available_models(),
        "info": dict(AVAILABLE_MODELS),
    })
