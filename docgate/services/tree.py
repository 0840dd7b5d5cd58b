# docgate/services/tree.py
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from docgate.errors import FileIOError, NotADirectory
from docgate.models import NodeKind, TreeNode, ValidatedPath
from docgate.services.walk import TEXT_EXTENSIONS, Entry, dir_key, extension_of, scan_dir

logger = logging.getLogger(__name__)


def node_id(path: str) -> str:
    """Stable 64-bit id for a tree entry, derived from its absolute path."""
    return hashlib.blake2b(path.encode("utf-8", "surrogatepass"), digest_size=8).hexdigest()


@dataclass
class _Walk:
    max_depth: int
    budget: int
    visited: Set[Path] = field(default_factory=set)
    truncated: bool = False


class TreeEnumerator:
    """
    Filtered, deterministically ordered directory tree for the sidebar.

    Only text-like files are shown. Recursion is depth-first and always
    terminates: each real directory is expanded at most once per call
    (symlink cycles end up with no children), depth is capped, and the total
    number of nodes is capped.
    """

    def __init__(self, max_depth: int = 64, max_nodes: int = 50_000):
        self.max_depth = max_depth
        self.max_nodes = max_nodes

    def list(self, root: ValidatedPath, recursive: bool = False) -> List[TreeNode]:
        directory = root.path
        if not directory.is_dir():
            raise NotADirectory("Path is not a directory")

        walk = _Walk(max_depth=self.max_depth, budget=self.max_nodes)
        walk.visited.add(dir_key(directory))
        try:
            entries = scan_dir(directory)
        except OSError as e:
            raise FileIOError.from_os_error("read directory", e) from e

        nodes = self._build_level(entries, recursive, depth=1, walk=walk)
        if walk.truncated:
            logger.warning("tree listing of %s truncated at %d nodes", directory, self.max_nodes)
        return nodes

    # ---------- Internals ----------

    def _build_level(self, entries: List[Entry], recursive: bool, depth: int,
                     walk: _Walk) -> List[TreeNode]:
        nodes: List[TreeNode] = []
        for entry in entries:
            if not entry.is_dir and extension_of(entry.name) not in TEXT_EXTENSIONS:
                continue
            if walk.budget <= 0:
                walk.truncated = True
                break
            walk.budget -= 1

            children = None
            if recursive and entry.is_dir:
                children = self._subtree(entry.path, depth, walk)

            path_str = str(entry.path)
            nodes.append(TreeNode(
                id=node_id(path_str),
                name=entry.name,
                path=path_str,
                kind=NodeKind.DIRECTORY if entry.is_dir else NodeKind.FILE,
                children=children,
            ))
        return nodes

    def _subtree(self, directory: Path, depth: int, walk: _Walk) -> Optional[List[TreeNode]]:
        if depth >= walk.max_depth:
            logger.debug("max depth reached at %s", directory)
            return None
        key = dir_key(directory)
        if key in walk.visited:
            logger.warning("directory cycle skipped: %s -> %s", directory, key)
            return None
        walk.visited.add(key)

        try:
            entries = scan_dir(directory)
        except OSError as e:
            # one unreadable folder must not sink the whole tree
            logger.debug("cannot read %s: %s", directory, e)
            return None
        return self._build_level(entries, True, depth + 1, walk)
