"""AI content generation endpoint."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.api.deps import CurrentUser, DbSession
from src.api.seo import ContentOptimizationResponse
from src.core.logging import get_logger
from src.integrations import ai_content
from src.integrations.ai_content import ContentRequest
from src.storage.schemas import ContentOptimizationCreate
from src.storage.seo import ContentOptimizationStorage, WebsiteStorage

logger = get_logger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


class GenerateContentRequest(BaseModel):
    """Content to rewrite plus generation settings."""

    website_id: int = Field(gt=0)
    page_url: str = Field(min_length=1, max_length=500)
    content: str = Field(min_length=1)
    target_keyword: str = Field(min_length=1, max_length=255)
    content_length: int | None = Field(default=None, ge=1, le=3)
    seo_optimization: int | None = Field(default=None, ge=0, le=100)
    readability_level: int | None = Field(default=None, ge=1, le=3)


class GenerateContentResponse(BaseModel):
    success: bool
    optimization: ContentOptimizationResponse


@router.post("/generate-content", response_model=GenerateContentResponse)
async def generate_content(
    payload: GenerateContentRequest,
    db: DbSession,
    user: CurrentUser,
) -> GenerateContentResponse | JSONResponse:
    """Rewrite content for a keyword and store the result.

    Without a configured AI key this answers 400 with placeholder content
    so the front-end can still demonstrate the flow.
    """
    request = ContentRequest(
        target_keyword=payload.target_keyword,
        content=payload.content,
        content_length=payload.content_length,
        seo_optimization=payload.seo_optimization,
        readability_level=payload.readability_level,
    )

    if not ai_content.is_configured():
        logger.info("ai_content_demo_mode", keyword=payload.target_keyword)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "message": "AI API key is not configured",
                "demo_mode": True,
                "demo_content": ai_content.demo_content(request),
            },
        )

    if await WebsiteStorage(db).get_by_id(payload.website_id) is None:
        raise HTTPException(status_code=404, detail="Website not found")

    try:
        generated = await ai_content.generate_content(request)
    except Exception as exc:
        logger.exception("ai_content_generation_failed", website_id=payload.website_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate AI content",
        ) from exc

    optimization = await ContentOptimizationStorage(db).create(
        ContentOptimizationCreate(
            website_id=payload.website_id,
            page_url=payload.page_url,
            target_keyword=payload.target_keyword,
            original_content=payload.content,
            optimized_content=generated.optimized_content,
            seo_score=generated.seo_score,
            readability_score=generated.readability_score,
            optimization_settings={
                "content_length": payload.content_length,
                "seo_optimization": payload.seo_optimization,
                "readability_level": payload.readability_level,
            },
            ai_generation_prompt=ai_content.build_prompt(request),
        )
    )
    return GenerateContentResponse(
        success=True,
        optimization=ContentOptimizationResponse.model_validate(optimization),
    )
