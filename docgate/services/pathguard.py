# docgate/services/pathguard.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

from docgate.errors import AccessDenied, InvalidPath, PathTraversal
from docgate.models import AllowedRootSet, ValidatedPath

logger = logging.getLogger(__name__)


class PathGuard:
    """
    Turn caller-supplied path strings into paths confined to the allowed roots.

    Order of checks:
      1. literal ".." anywhere in the raw string -> PathTraversal (no fs access)
      2. empty / NUL / relative                 -> InvalidPath
      3. canonicalize: the path itself if it exists, else its parent + name,
         else the longest existing ancestor (non-strict resolve)
      4. candidate must sit under a root, component-wise -> else AccessDenied

    There is a window between validation and use; mutating callers call
    `revalidate` right before touching the disk.
    """

    def __init__(self, roots: AllowedRootSet, home: Path | None = None):
        self.roots = roots
        self.home = home

    def validate(self, raw_path: str) -> ValidatedPath:
        if ".." in raw_path:
            logger.warning("path traversal rejected: %r", raw_path)
            raise PathTraversal("Access denied: path traversal detected")
        if not raw_path or "\x00" in raw_path:
            raise InvalidPath("Access denied: invalid path")

        path = self._expand(raw_path)
        if not path.is_absolute():
            raise InvalidPath(f"Invalid path: '{raw_path}' is not absolute")

        try:
            candidate = self._canonical(path)
        except (OSError, RuntimeError) as e:
            raise InvalidPath(f"Invalid path: {e}") from e

        root = self.roots.root_for(candidate)
        if root is None:
            logger.warning("path outside sandbox rejected: %r -> %s", raw_path, candidate)
            raise AccessDenied(f"Access denied: path '{raw_path}' is outside allowed directories")
        return ValidatedPath(path=candidate, raw=raw_path, root=root)

    def validate_two(self, raw1: str, raw2: str) -> Tuple[ValidatedPath, ValidatedPath]:
        # first failure short-circuits; raw2 is never inspected
        first = self.validate(raw1)
        second = self.validate(raw2)
        return first, second

    def revalidate(self, validated: ValidatedPath) -> ValidatedPath:
        """Re-run validation and insist the canonical target did not move."""
        fresh = self.validate(validated.raw)
        if fresh.path != validated.path:
            logger.warning("path changed since validation: %s -> %s", validated.path, fresh.path)
            raise AccessDenied(f"Access denied: path '{validated.raw}' changed since validation")
        return fresh

    # ---------- Internals ----------

    def _expand(self, raw_path: str) -> Path:
        if self.home is not None and (raw_path == "~" or raw_path.startswith("~/")):
            return self.home / raw_path[2:]
        return Path(raw_path).expanduser()

    def _canonical(self, path: Path) -> Path:
        if path.exists():
            return path.resolve(strict=True)
        if path.is_symlink():
            # dangling link: judge the place a write would actually land
            return path.resolve(strict=False)
        parent = path.parent
        if parent.exists():
            return parent.resolve(strict=True) / path.name
        # deep non-existent path: existing ancestors resolved, rest verbatim
        return path.resolve(strict=False)
