from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class ChatRequest(BaseModel):
    prompt: str
    persona: str = "technical"
    codebase_path: Optional[str] = None
    use_indexed_search: bool = False


class ChatMetadata(BaseModel):
    provider: str
    model: str
    persona: str
    codebase_path: Optional[str]
    use_indexed_search: bool
    prompt_tokens: Optional[int] = None
    usage: Optional[Dict[str, int]] = None


class ChatResponse(BaseModel):
    success: bool = True
    response: str
    metadata: ChatMetadata


class IndexRequest(BaseModel):
    codebase_path: str


class IndexResultModel(BaseModel):
    total_chunks: int
    processed_files: int
    failed_chunks: int
    skipped_files: int
    total_files: int


class IndexResponse(BaseModel):
    success: bool = True
    message: str
    result: IndexResultModel


class SearchRequest(BaseModel):
    query: str
    codebase_path: Optional[str] = None
    limit: int = Field(default=10, gt=0, le=100)


class SearchResult(BaseModel):
    score: float
    file_path: str
    code_chunk: str
    start_line: int
    end_line: int
    codebase_path: str


class SearchMetadata(BaseModel):
    codebase_path: Optional[str]
    limit: int
    total_results: int


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    results: List[SearchResult]
    metadata: SearchMetadata


class IndexProgressModel(BaseModel):
    root: Optional[str] = None
    processed_files: int = 0
    total_files: int = 0
    total_chunks: int = 0


class StatusResponse(BaseModel):
    success: bool = True
    is_indexing: bool
    indexed_roots: List[str]
    embedding_configured: bool
    progress: IndexProgressModel


class ClearResponse(BaseModel):
    success: bool = True
    message: str
