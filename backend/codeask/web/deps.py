"""Request dependencies shared by the routes."""

from __future__ import annotations

from fastapi import HTTPException, Request

from ..errors import (
    AlreadyIndexing,
    CodeAskError,
    ConfigurationError,
    InvalidArgument,
    RetrievalFailure,
    VectorStoreError,
)
from ..llm import ChatClient, LLMConfig, create_client
from ..service import CodebaseService


def get_service(request: Request) -> CodebaseService:
    return request.app.state.service


def get_chat_client(request: Request) -> ChatClient:
    service: CodebaseService = request.app.state.service
    try:
        return create_client(LLMConfig.from_dict(service.cfg))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))


def to_http_exception(error: CodeAskError) -> HTTPException:
    if isinstance(error, InvalidArgument):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, AlreadyIndexing):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, (RetrievalFailure, VectorStoreError)):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
