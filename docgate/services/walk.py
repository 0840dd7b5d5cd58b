# docgate/services/walk.py
"""
Traversal policy shared by the tree listing and the project search:
which names are skipped, how siblings are ordered, and how a directory is
keyed for cycle detection.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, List, Tuple

IGNORED_NAMES: FrozenSet[str] = frozenset({"node_modules", "target"})

TEXT_EXTENSIONS: FrozenSet[str] = frozenset({
    "md", "markdown", "txt", "text", "json", "yaml", "yml", "toml", "xml",
    "html", "css", "js", "ts", "jsx", "tsx", "rs", "py", "rb", "go", "swift",
    "c", "cpp", "h", "hpp", "java", "kt", "sh", "bash", "zsh", "fish",
})

EXHIBIT_EXTENSIONS: FrozenSet[str] = frozenset({
    "pdf",
    "doc", "docx", "odt", "rtf", "txt",
    "xls", "xlsx", "ods", "csv",
    "jpg", "jpeg", "png", "gif", "tiff", "bmp", "webp",
    "eml", "msg",
})


@dataclass(frozen=True)
class Entry:
    name: str
    path: Path
    is_dir: bool
    is_file: bool


def is_ignored(name: str) -> bool:
    return name.startswith(".") or name in IGNORED_NAMES


def extension_of(name: str) -> str:
    """Lower-cased extension without the dot ("" when there is none)."""
    return Path(name).suffix[1:].lower()


def normalize_extensions(extensions: Iterable[str]) -> FrozenSet[str]:
    # accept "md", ".md", ".MD" alike
    return frozenset(e.strip().lstrip(".").lower() for e in extensions if e.strip().lstrip("."))


def order_key(entry: Entry) -> Tuple[int, str, str]:
    # folders first, then case-insensitive name; exact name breaks ties
    return (0 if entry.is_dir else 1, entry.name.lower(), entry.name)


def scan_dir(directory: Path) -> List[Entry]:
    """
    Non-ignored entries of `directory`, in sibling order.
    OSError from opening or iterating the directory propagates.
    """
    entries: List[Entry] = []
    with os.scandir(directory) as it:
        for de in it:
            if is_ignored(de.name):
                continue
            # follows symlinks, like the listing shown to the user
            is_dir = _safe_is(de.is_dir)
            is_file = not is_dir and _safe_is(de.is_file)
            entries.append(Entry(name=de.name, path=Path(de.path), is_dir=is_dir, is_file=is_file))
    entries.sort(key=order_key)
    return entries


def dir_key(directory: Path) -> Path:
    """Canonical identity of a directory for cycle detection."""
    try:
        return directory.resolve(strict=True)
    except (OSError, RuntimeError):
        return directory


def _safe_is(check) -> bool:
    try:
        return check()
    except OSError:
        return False
