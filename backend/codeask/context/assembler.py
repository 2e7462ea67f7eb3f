"""Raw-file context assembly, used when indexed search has nothing to offer."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..config import CODE_EXTENSIONS, KEY_FILES
from ..indexing.walker import iter_code_files
from ..utils import language_for, read_text

logger = logging.getLogger(__name__)


def _truncate(content: str, limit: int) -> str:
    if len(content) > limit:
        return content[:limit] + "\n..."
    return content


class ContextAssembler:
    """Build a context block straight from the filesystem.

    Three independent sections: directory tree, key manifest files and a
    sample of code files. A section that fails is left out; the others are
    still returned.
    """

    def __init__(self, cfg: Optional[Dict] = None, extensions: Optional[Iterable[str]] = None):
        context_cfg = (cfg or {}).get("context", {})
        self.extensions = set(extensions if extensions is not None else CODE_EXTENSIONS)
        self.max_depth = int(context_cfg.get("max_depth", 3))
        self.max_items_per_dir = int(context_cfg.get("max_items_per_dir", 20))
        self.key_file_chars = int(context_cfg.get("key_file_chars", 1000))
        self.max_code_files = int(context_cfg.get("max_code_files", 10))
        self.code_file_chars = int(context_cfg.get("code_file_chars", 2000))

    def directory_structure(self, root: str, current_depth: int = 0) -> str:
        if current_depth > self.max_depth:
            return ""
        try:
            items = sorted(os.listdir(root))
        except OSError:
            return ""

        structure: List[str] = []
        indent = "  " * current_depth
        for item in items[: self.max_items_per_dir]:
            item_path = os.path.join(root, item)
            if os.path.isdir(item_path):
                if item.startswith(".") or item.startswith("node_modules"):
                    continue
                structure.append(f"{indent}📁 {item}/")
                sub_structure = self.directory_structure(item_path, current_depth + 1)
                if sub_structure:
                    structure.append(sub_structure)
            elif os.path.isfile(item_path):
                ext = os.path.splitext(item)[1]
                if ext in self.extensions or item in ("package.json", "README.md"):
                    structure.append(f"{indent}📄 {item}")
        return "\n".join(structure)

    def key_files(self, root: str) -> List[str]:
        sections: List[str] = []
        try:
            items = sorted(os.listdir(root))
        except OSError:
            return sections

        for item in items:
            if item not in KEY_FILES:
                continue
            try:
                content = read_text(Path(root) / item)
            except OSError:
                continue
            sections.append(f"### {item}:\n```\n{_truncate(content, self.key_file_chars)}\n```")
        return sections

    def code_files(self, root: str) -> List[str]:
        sections: List[str] = []
        for file_path in iter_code_files(root, self.extensions)[: self.max_code_files]:
            try:
                content = read_text(Path(file_path))
            except OSError:
                continue
            rel = os.path.relpath(file_path, root)
            sections.append(
                f"### {rel}:\n```{language_for(file_path)}\n{_truncate(content, self.code_file_chars)}\n```"
            )
        return sections

    def assemble(self, root: Optional[str]) -> str:
        if not root or not os.path.isdir(root):
            return ""

        context: List[str] = []
        structure = self.directory_structure(root)
        context.append(f"## Directory Structure:\n{structure}\n")

        key_files = self.key_files(root)
        if key_files:
            context.append("## Key Files:\n" + "\n\n".join(key_files) + "\n")

        code_files = self.code_files(root)
        if code_files:
            context.append("## Code Files:\n" + "\n\n".join(code_files) + "\n")

        return "\n".join(context)

    async def assemble_async(self, root: Optional[str]) -> str:
        return await asyncio.to_thread(self.assemble, root)
