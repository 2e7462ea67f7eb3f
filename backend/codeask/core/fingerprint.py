"""Content-addressed identifiers for chunks."""

from __future__ import annotations

import hashlib
import json
import uuid


def chunk_fingerprint(rel_path: str, start_line: int, text: str) -> str:
    """SHA-256 hex digest of (relative path, start line, chunk text).

    The fields are serialised as a JSON array so no field value can run
    into its neighbour.
    """
    payload = json.dumps([rel_path, int(start_line), text], ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def fingerprint_to_point_id(codebase_path: str, fingerprint: str) -> str:
    """Qdrant point id for a chunk of one codebase.

    The same file can live under several roots, so the id hashes the root
    together with the fingerprint. Qdrant wants a UUID: the first 128 bits
    of that digest are used.
    """
    payload = json.dumps([codebase_path, fingerprint], ensure_ascii=False)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return str(uuid.UUID(hex=digest[:32]))
