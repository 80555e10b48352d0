"""Local file collaborators: directory walks, JSON manifests, repository URLs."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Iterator, List, Tuple

from .logging import get_logger
from .models import SourceFile

logger = get_logger("sources")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".ipynb_checkpoints",
    ".idea",
    ".tox",
}

_REPO_URL = re.compile(r"github\.com[/:](?P<owner>[^/\s]+)/(?P<repo>[^/\s#?]+)")


def load_directory(root: Path) -> List[SourceFile]:
    """Read every text file under ``root`` in a stable, sorted walk order."""
    root = root.expanduser().resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory not found: {root}")
    files: List[SourceFile] = []
    for path in _walk(root):
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping non-text file %s", path)
            continue
        except OSError as exc:
            logger.warning("Unable to read %s: %s", path, exc)
            continue
        files.append(
            SourceFile(
                name=path.name,
                path=path.relative_to(root).as_posix(),
                content=content,
                size=path.stat().st_size,
            )
        )
    logger.debug("Loaded %d files from %s", len(files), root)
    return files


def load_manifest(path: Path) -> List[SourceFile]:
    """Load an already-assembled ``[{name, path, content, size}, ...]`` list."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError(f"{path.name} must contain a JSON array of files")
    files: List[SourceFile] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Entry {index} in {path.name} is not an object")
        content = entry.get("content")
        if not isinstance(content, str):
            raise ValueError(f"Entry {index} in {path.name} has no text content")
        file_path = str(entry.get("path") or entry.get("name") or "")
        name = str(entry.get("name") or Path(file_path).name)
        size = entry.get("size")
        files.append(
            SourceFile(
                name=name,
                path=file_path or name,
                content=content,
                size=size if isinstance(size, int) else len(content.encode("utf-8")),
            )
        )
    return files


def is_repo_url(value: str) -> bool:
    """True for remote repository references rather than local paths."""
    value = value.strip()
    return "://" in value or value.startswith("git@")


def parse_repo_url(url: str) -> Tuple[str, str]:
    """Return ``(owner, repo)`` for a GitHub repository URL."""
    match = _REPO_URL.search(url.strip())
    if not match:
        raise ValueError("Invalid GitHub URL")
    repo = match.group("repo")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return match.group("owner"), repo


def _walk(root: Path) -> Iterator[Path]:
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        for filename in sorted(filenames):
            path = Path(current) / filename
            if path.is_file():
                yield path


__all__ = ["is_repo_url", "load_directory", "load_manifest", "parse_repo_url"]
