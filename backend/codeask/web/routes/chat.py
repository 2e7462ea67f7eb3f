"""Chat route: question + codebase context -> persona prompt -> LLM."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ...errors import CodeAskError
from ...llm import ChatClient
from ...prompt import build_persona_prompt, count_tokens, resolve_persona
from ...service import CodebaseService
from ..deps import get_chat_client, get_service, to_http_exception
from ..schemas import ChatMetadata, ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def require_prompt(request: ChatRequest) -> ChatRequest:
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    return request


@router.post("/chat", response_model=ChatResponse)
async def chat(
    # resolved before get_chat_client
    request: ChatRequest = Depends(require_prompt),
    service: CodebaseService = Depends(get_service),
    client: ChatClient = Depends(get_chat_client),
):
    codebase_path = request.codebase_path or service.cfg.get("codebase_path")
    persona = resolve_persona(request.persona)
    logger.info(
        f"Chat request: persona={persona} indexed_search={request.use_indexed_search} "
        f"codebase={codebase_path}"
    )

    try:
        context = await service.get_context(request.prompt, codebase_path, request.use_indexed_search)
    except CodeAskError as e:
        raise to_http_exception(e)

    full_prompt = build_persona_prompt(persona, context, request.prompt)
    result = await client.complete(full_prompt)
    if result.error:
        logger.error(f"AI request failed: {result.error}")
        raise HTTPException(status_code=500, detail=f"AI request failed: {result.error}")

    return ChatResponse(
        response=result.content or "",
        metadata=ChatMetadata(
            provider=client.config.provider,
            model=client.config.model,
            persona=persona,
            codebase_path=codebase_path,
            use_indexed_search=request.use_indexed_search,
            prompt_tokens=count_tokens(full_prompt),
            usage=result.usage,
        ),
    )
