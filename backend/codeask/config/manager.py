"""Configuration management for codeask."""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


CONFIG_FILE = Path.home() / ".codeask-config.json"

CODE_EXTENSIONS: List[str] = [
    ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".cpp", ".c", ".cs", ".php",
    ".rb", ".go", ".rs", ".swift", ".kt", ".scala", ".html", ".css", ".scss",
    ".json", ".yaml", ".yml", ".toml", ".md", ".txt", ".sh", ".bash", ".zsh",
]

KEY_FILES: List[str] = [
    "package.json", "README.md", "requirements.txt", "Cargo.toml", "go.mod",
    "pom.xml", "build.gradle", "Gemfile", "composer.json", "pyproject.toml",
]

DEFAULT_MODELS: Dict[str, str] = {
    "anthropic": "claude-3-5-sonnet-20241022",
    "openai": "gpt-4o",
    "openrouter": "anthropic/claude-3-5-sonnet-20241022",
}

DEFAULT_CONFIG: Dict = {
    "provider": "anthropic",
    "api_key": None,
    "model": DEFAULT_MODELS["anthropic"],
    "temperature": 0.7,
    "max_tokens": 4096,
    "codebase_path": None,
    "embedding": {
        "backend": "openai",
        "api_key": None,
        "model": "text-embedding-3-small",
        "dimension": 1536,
        "sentence_transformers_model": "sentence-transformers/all-MiniLM-L6-v2",
    },
    "vector_store": {
        "backend": "qdrant",
        "collection_name": "codeask-codebase",
        "qdrant": {
            "url": "http://localhost:6333",
            "api_key": None,
            # ":memory:" runs qdrant in-process
            "location": None,
        },
    },
    "indexing": {
        "max_file_size": 1024 * 1024,
        "chunk_size": 1000,
        "chunk_overlap": 200,
        "batch_size": 10,
        "embedding_batch_size": 100,
        "chars_per_line": 50,
    },
    "search": {
        "score_threshold": 0.7,
        "default_limit": 10,
        "context_limit": 5,
    },
    "context": {
        "max_depth": 3,
        "max_items_per_dir": 20,
        "key_file_chars": 1000,
        "max_code_files": 10,
        "code_file_chars": 2000,
    },
}


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge ``override`` into ``base`` in place."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def _read_config_file(path: Path) -> Dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug(f"No config file at {path}, using defaults")
        return {}
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: top-level value is not an object")
        return {}
    return data


def load_config(path: Optional[Path] = None) -> Dict:
    """Load configuration.

    Defaults, then the JSON config file, then environment overrides.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is None:
        path = Path(os.getenv("CODEASK_CONFIG", str(CONFIG_FILE)))
    file_cfg = _read_config_file(path)
    _merge(config, file_cfg)

    # Chat model follows the provider unless set explicitly
    if "model" not in file_cfg:
        config["model"] = DEFAULT_MODELS.get(config["provider"], config["model"])

    # Override from environment
    if os.getenv("CODEASK_PROVIDER"):
        config["provider"] = os.environ["CODEASK_PROVIDER"]
        if not os.getenv("CODEASK_MODEL") and "model" not in file_cfg:
            config["model"] = DEFAULT_MODELS.get(config["provider"], config["model"])
    if os.getenv("CODEASK_MODEL"):
        config["model"] = os.environ["CODEASK_MODEL"]
    if os.getenv("CODEASK_API_KEY"):
        config["api_key"] = os.environ["CODEASK_API_KEY"]
    if os.getenv("OPENAI_API_KEY"):
        config["embedding"]["api_key"] = os.environ["OPENAI_API_KEY"]
    if os.getenv("QDRANT_URL"):
        config["vector_store"]["qdrant"]["url"] = os.environ["QDRANT_URL"]
    if os.getenv("QDRANT_API_KEY"):
        config["vector_store"]["qdrant"]["api_key"] = os.environ["QDRANT_API_KEY"]

    return config


def validate_config(cfg: Dict) -> None:
    """Reject settings the indexing pipeline cannot run with.

    Raises:
        ConfigurationError: on an invalid chunk window, batch size or threshold.
    """
    indexing = cfg.get("indexing", {})
    chunk_size = int(indexing.get("chunk_size", 0))
    overlap = int(indexing.get("chunk_overlap", 0))

    if chunk_size <= 0:
        raise ConfigurationError(f"indexing.chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"indexing.chunk_overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"indexing.chunk_overlap ({overlap}) must be smaller than "
            f"indexing.chunk_size ({chunk_size})"
        )
    if int(indexing.get("batch_size", 0)) <= 0:
        raise ConfigurationError("indexing.batch_size must be positive")
    if int(indexing.get("embedding_batch_size", 1)) <= 0:
        raise ConfigurationError("indexing.embedding_batch_size must be positive")
    if int(indexing.get("chars_per_line", 0)) <= 0:
        raise ConfigurationError("indexing.chars_per_line must be positive")

    threshold = float(cfg.get("search", {}).get("score_threshold", 0.0))
    if not -1.0 <= threshold <= 1.0:
        raise ConfigurationError(f"search.score_threshold must be within [-1, 1], got {threshold}")
