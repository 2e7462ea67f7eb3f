"""Indexing routes with SSE support."""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from ...errors import CodeAskError
from ...service import CodebaseService
from ..deps import get_service, to_http_exception
from ..schemas import ClearResponse, IndexRequest, IndexResponse, IndexResultModel, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/index")


@router.post("", response_model=IndexResponse)
async def index_codebase(request: IndexRequest, service: CodebaseService = Depends(get_service)):
    """Index a codebase and wait for the run to finish."""
    logger.info(f"Indexing request for: {request.codebase_path}")
    try:
        result = await service.index_codebase(request.codebase_path)
    except CodeAskError as e:
        raise to_http_exception(e)

    return IndexResponse(
        message="Indexing completed successfully",
        result=IndexResultModel(**result.as_dict()),
    )


@router.get("/status", response_model=StatusResponse)
async def index_status(service: CodebaseService = Depends(get_service)):
    return StatusResponse(**service.get_status())


@router.get("/progress")
async def index_progress(service: CodebaseService = Depends(get_service)):
    """SSE endpoint for real-time indexing progress."""

    async def event_generator():
        while True:
            status = service.get_status()
            yield {"event": "progress", "data": json.dumps(status)}
            if not status["is_indexing"]:
                break
            await asyncio.sleep(1)

    return EventSourceResponse(event_generator())


@router.delete("/{codebase_path:path}", response_model=ClearResponse)
async def clear_index(codebase_path: str, service: CodebaseService = Depends(get_service)):
    try:
        await service.clear_index(codebase_path)
    except CodeAskError as e:
        raise to_http_exception(e)
    return ClearResponse(message=f"Index cleared for: {codebase_path}")
