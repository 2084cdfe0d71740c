"""
Request scoped dependencies.

Each HTTP request gets its own session, unit of work and pipeline; the
cache manager, registry and settings are shared through ``app.state``.
"""

from typing import AsyncGenerator, Optional
from uuid import UUID

import structlog
from fastapi import Depends, Header, Request

from ..core.localization import Localizer
from ..pipeline.context import RequestContext
from ..pipeline.mediator import RequestPipeline

logger = structlog.get_logger()


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> Optional[UUID]:
    """Resolve the caller from the ``X-User-Id`` header; None when absent or malformed."""
    if not x_user_id:
        return None
    try:
        return UUID(x_user_id)
    except ValueError:
        logger.warning("Ignoring malformed X-User-Id header", value=x_user_id[:64])
        return None


def get_localizer(
    request: Request,
    accept_language: Optional[str] = Header(default=None, alias="Accept-Language"),
) -> Localizer:
    default_language = request.app.state.settings.DEFAULT_LANGUAGE
    language = default_language
    if accept_language:
        language = accept_language.split(",")[0].split("-")[0].strip().lower() or default_language
    return Localizer(language=language, default_language=default_language)


async def get_request_context(
    request: Request,
    user_id: Optional[UUID] = Depends(get_current_user_id),
    localizer: Localizer = Depends(get_localizer),
) -> AsyncGenerator[RequestContext, None]:
    state = request.app.state
    async with state.database.session() as session:
        yield RequestContext(
            session=session,
            cache=state.cache_manager,
            settings=state.settings,
            localizer=localizer,
            current_user_id=user_id,
        )


def get_pipeline(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
) -> RequestPipeline:
    return RequestPipeline(request.app.state.registry, ctx)
