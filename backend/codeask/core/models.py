"""Data models for codeask."""

from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional


@dataclasses.dataclass
class ChunkRecord:
    """Represents a code chunk with metadata and embedding."""

    chunk_id: str
    path: str
    start_line: int
    end_line: int
    text: str
    codebase_path: str
    timestamp: str
    emb: List[float] = dataclasses.field(default_factory=list)

    def to_payload(self) -> Dict:
        return {
            "chunkId": self.chunk_id,
            "filePath": self.path,
            "codeChunk": self.text,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "codebasePath": self.codebase_path,
            "timestamp": self.timestamp,
        }


@dataclasses.dataclass
class SearchHit:
    """A single retrieval result, as returned by the vector store."""

    score: float
    path: str
    text: str
    start_line: int
    end_line: int
    codebase_path: str

    @classmethod
    def from_payload(cls, score: float, payload: Dict) -> "SearchHit":
        return cls(
            score=score,
            path=payload["filePath"],
            text=payload["codeChunk"],
            start_line=payload["startLine"],
            end_line=payload["endLine"],
            codebase_path=payload["codebasePath"],
        )


@dataclasses.dataclass
class IndexResult:
    """Outcome of one indexing run.

    ``failed_chunks`` and ``skipped_files`` make partial indexing visible:
    a run that reports success may still have lost chunks along the way.
    """

    total_chunks: int = 0
    processed_files: int = 0
    failed_chunks: int = 0
    skipped_files: int = 0
    total_files: int = 0

    def as_dict(self) -> Dict[str, int]:
        return dataclasses.asdict(self)


@dataclasses.dataclass
class IndexProgress:
    root: Optional[str] = None
    processed_files: int = 0
    total_files: int = 0
    total_chunks: int = 0
