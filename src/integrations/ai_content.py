"""AI content optimization using Claude with Instructor for structured output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from src.core.config import settings
from src.core.logging import get_logger

if TYPE_CHECKING:
    from anthropic import AsyncAnthropic

logger = get_logger(__name__)

CONTENT_LENGTH_LABELS = {1: "short", 2: "medium", 3: "long"}
READABILITY_LABELS = {1: "basic", 2: "intermediate", 3: "advanced"}


class ContentRequest(BaseModel):
    """What to optimize and how."""

    target_keyword: str
    content: str
    content_length: int | None = None
    seo_optimization: int | None = None
    readability_level: int | None = None


class GeneratedContent(BaseModel):
    """Structured result returned by the model."""

    optimized_content: str = Field(description="The rewritten content in Markdown")
    seo_score: int = Field(ge=0, le=100, description="Estimated on-page SEO score")
    readability_score: int = Field(ge=0, le=100, description="Estimated readability score")


def build_prompt(request: ContentRequest) -> str:
    """Prompt text sent to the model; also stored with the optimization."""
    length = CONTENT_LENGTH_LABELS.get(request.content_length or 2, "medium")
    readability = READABILITY_LABELS.get(request.readability_level or 2, "intermediate")
    seo_weight = request.seo_optimization if request.seo_optimization is not None else 70
    return (
        f'Optimize the following content for the keyword "{request.target_keyword}".\n'
        f"Target length: {length}. Readability: {readability}. "
        f"SEO emphasis: {seo_weight}%.\n"
        "Keep the facts, improve structure with headings, and use the keyword "
        "naturally. Score the result for SEO and readability from 0 to 100.\n\n"
        f"Content:\n{request.content}"
    )


def demo_content(request: ContentRequest) -> str:
    """Placeholder content returned when no API key is configured."""
    length = f"Level {request.content_length}" if request.content_length else "Medium"
    seo = f"{request.seo_optimization}%" if request.seo_optimization is not None else "70%"
    readability = (
        f"Level {request.readability_level}" if request.readability_level else "Intermediate"
    )
    return (
        f"# Optimized Content for: {request.target_keyword}\n\n"
        "## Introduction\n"
        f'This is a sample of AI-optimized content for the keyword "{request.target_keyword}". '
        "With an API key configured, this text is generated by the AI service.\n\n"
        "## Main Content\n"
        "The content would be optimized based on your settings:\n"
        f"- Content Length: {length}\n"
        f"- SEO Optimization: {seo}\n"
        f"- Readability Level: {readability}\n\n"
        "## Conclusion\n"
        "Configure the AI API key to get real AI-powered optimization."
    )


def is_configured() -> bool:
    return bool(settings.ai_api_key)


async def generate_content(
    request: ContentRequest,
    client: AsyncAnthropic | None = None,
) -> GeneratedContent:
    """Ask the model for an optimized rewrite.

    Args:
        request: Content and optimization settings.
        client: Optional pre-configured AsyncAnthropic client.

    Returns:
        GeneratedContent validated by Instructor.
    """
    # Import instructor and provider here to keep startup light.
    import instructor
    from anthropic import AsyncAnthropic as AnthropicClient

    if client is None:
        client = AnthropicClient(api_key=settings.ai_api_key)

    instructor_client = instructor.from_anthropic(client)
    result = await instructor_client.messages.create(
        model=settings.ai_model,
        max_tokens=settings.ai_max_tokens,
        messages=[{"role": "user", "content": build_prompt(request)}],
        response_model=GeneratedContent,
    )
    logger.info(
        "ai_content_generated",
        keyword=request.target_keyword,
        seo_score=result.seo_score,
        readability_score=result.readability_score,
    )
    return result
