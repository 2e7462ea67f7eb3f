"""Main FastAPI application."""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..service import CodebaseService
from .routes import chat, indexing, search

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("CODEASK_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(service: Optional[CodebaseService] = None) -> FastAPI:
    """Build the app. Without ``service`` one is created from the config at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "service", None) is None
        if owned:
            configure_logging()
            app.state.service = CodebaseService()
            logger.info("codeask service started")
        yield
        if owned:
            await app.state.service.close()
            app.state.service = None

    app = FastAPI(title="codeask", lifespan=lifespan)
    app.state.service = service

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router)
    app.include_router(indexing.router)
    app.include_router(search.router)

    @app.get("/")
    async def root():
        return {
            "message": "codeask server with codebase indexing",
            "features": {
                "chat": "AI-powered chat with persona support",
                "indexing": "Vector-based codebase indexing for faster, more accurate queries",
                "search": "Semantic search through indexed codebases",
            },
            "endpoints": {
                "chat": {
                    "method": "POST",
                    "path": "/chat",
                    "body": {
                        "prompt": "Your question or prompt",
                        "persona": "technical|salesperson|executive|developer|demo (optional, default: technical)",
                        "codebase_path": "Path to codebase (optional)",
                        "use_indexed_search": "Use indexed search for better context (optional, default: false)",
                    },
                },
                "index": {"method": "POST", "path": "/index", "body": {"codebase_path": "Path to codebase to index"}},
                "search": {
                    "method": "POST",
                    "path": "/search",
                    "body": {
                        "query": "Search query",
                        "codebase_path": "Limit search to this codebase (optional)",
                        "limit": "Maximum number of results (optional, default: 10)",
                    },
                },
                "status": {"method": "GET", "path": "/index/status"},
                "progress": {"method": "GET", "path": "/index/progress"},
                "clear": {"method": "DELETE", "path": "/index/{codebase_path}"},
                "health": {"method": "GET", "path": "/health"},
            },
        }

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
