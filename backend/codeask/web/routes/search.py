"""Search routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ...errors import CodeAskError
from ...service import CodebaseService
from ..deps import get_service, to_http_exception
from ..schemas import SearchMetadata, SearchRequest, SearchResponse, SearchResult

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
async def search(request: SearchRequest, service: CodebaseService = Depends(get_service)):
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    logger.info(f"Search request: {request.query!r} codebase={request.codebase_path}")
    try:
        hits = await service.search(request.query, request.codebase_path, request.limit)
    except CodeAskError as e:
        raise to_http_exception(e)

    results = [
        SearchResult(
            score=hit.score,
            file_path=hit.path,
            code_chunk=hit.text,
            start_line=hit.start_line,
            end_line=hit.end_line,
            codebase_path=hit.codebase_path,
        )
        for hit in hits
    ]
    return SearchResponse(
        query=request.query,
        results=results,
        metadata=SearchMetadata(
            codebase_path=request.codebase_path,
            limit=request.limit,
            total_results=len(results),
        ),
    )
