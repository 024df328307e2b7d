import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from .schemas import BUSINESS_CATEGORIES, CategoriesResponse, HealthResponse, SearchRequest
from ..core.auth import require_api_key
from ..core.config import settings
from ..core.events import ErrorEvent
from ..core.orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"
SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}

router = APIRouter()
health_router = APIRouter()


def get_orchestrator() -> SearchOrchestrator:
    return SearchOrchestrator.from_settings(settings)


def _describe(exc: ValueError) -> str:
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return "; ".join(parts)
    return str(exc)


async def _event_stream(body: bytes, orchestrator: SearchOrchestrator) -> AsyncIterator[str]:
    try:
        query = SearchRequest.model_validate_json(body or b"{}").to_query()
    except ValueError as exc:
        logger.info("rejected search request: %s", exc)
        yield ErrorEvent(message=f"Invalid search request: {_describe(exc)}").to_sse()
        return

    async for event in orchestrator.stream(query):
        yield event.to_sse()


@router.post("/search", dependencies=[Depends(require_api_key)])
async def search(request: Request, orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    body = await request.body()
    return StreamingResponse(
        _event_stream(body, orchestrator),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/categories", response_model=CategoriesResponse, dependencies=[Depends(require_api_key)])
async def list_categories():
    return CategoriesResponse(categories=BUSINESS_CATEGORIES)


@health_router.get("/healthz", response_model=HealthResponse)
async def healthcheck():
    return HealthResponse(status="ok", version=API_VERSION)
