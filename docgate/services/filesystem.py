# docgate/services/filesystem.py
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Sequence

from docgate.errors import AccessDenied, FileIOError, NotADirectory
from docgate.models import ExhibitFile, SearchHit, TreeNode, ValidatedPath
from docgate.services.pathguard import PathGuard
from docgate.services.search import SearchEngine
from docgate.services.tree import TreeEnumerator
from docgate.services.walk import EXHIBIT_EXTENSIONS, extension_of, is_ignored

logger = logging.getLogger(__name__)


class FileSystemService:
    """
    The file gateway used by the editor frontend.

    Every path argument goes through PathGuard before the disk is touched;
    a rejection aborts the call with no side effects. Mutating operations
    re-validate right before the write/rename/delete happens.
    """

    def __init__(self, guard: PathGuard, tree: TreeEnumerator, search: SearchEngine):
        self.guard = guard
        self.tree = tree
        self.engine = search

    # ---------- Validation ----------

    def validate_path(self, raw_path: str) -> str:
        return str(self.guard.validate(raw_path).path)

    def _guarded(self, validated: ValidatedPath) -> Path:
        return self.guard.revalidate(validated).path

    # ---------- Text / binary I/O ----------

    def read_text(self, raw_path: str) -> str:
        p = self.guard.validate(raw_path).path
        try:
            return p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError.from_os_error("read file", e) from e

    def write_text(self, raw_path: str, content: str) -> str:
        vp = self.guard.validate(raw_path)
        try:
            vp.path.parent.mkdir(parents=True, exist_ok=True)
            self._guarded(vp).write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileIOError.from_os_error("write file", e) from e
        return "OK"

    def read_bytes(self, raw_path: str) -> bytes:
        p = self.guard.validate(raw_path).path
        try:
            return p.read_bytes()
        except OSError as e:
            raise FileIOError.from_os_error("read binary file", e) from e

    def write_bytes(self, raw_path: str, content: bytes) -> str:
        vp = self.guard.validate(raw_path)
        try:
            vp.path.parent.mkdir(parents=True, exist_ok=True)
            self._guarded(vp).write_bytes(content)
        except OSError as e:
            raise FileIOError.from_os_error("write binary file", e) from e
        return "OK"

    def file_exists(self, raw_path: str) -> bool:
        return self.guard.validate(raw_path).path.exists()

    # ---------- Two-path operations ----------

    def copy_file(self, source: str, destination: str) -> str:
        src, dst = self.guard.validate_two(source, destination)
        try:
            dst.path.parent.mkdir(parents=True, exist_ok=True)
            # copyfile refuses a directory destination instead of copying into it
            target = self._guarded(dst)
            shutil.copyfile(src.path, target)
            shutil.copymode(src.path, target)
        except OSError as e:
            raise FileIOError.from_os_error("copy file", e) from e
        return "OK"

    def move_item(self, source: str, destination: str) -> str:
        return self._rename(source, destination, "move")

    def rename_item(self, old_path: str, new_path: str) -> str:
        return self._rename(old_path, new_path, "rename")

    def _rename(self, source: str, destination: str, action: str) -> str:
        src, dst = self.guard.validate_two(source, destination)
        self._refuse_root(src)
        try:
            self._guarded(src).rename(self._guarded(dst))
        except OSError as e:
            raise FileIOError.from_os_error(action, e) from e
        return "OK"

    # ---------- Folders ----------

    def create_folder(self, raw_path: str) -> str:
        vp = self.guard.validate(raw_path)
        try:
            self._guarded(vp).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileIOError.from_os_error("create folder", e) from e
        return "OK"

    def delete_item(self, raw_path: str) -> str:
        vp = self.guard.validate(raw_path)
        self._refuse_root(vp)
        p = self._guarded(vp)
        try:
            if p.is_dir():
                shutil.rmtree(p)
            else:
                p.unlink()
        except OSError as e:
            kind = "delete folder" if p.is_dir() else "delete file"
            raise FileIOError.from_os_error(kind, e) from e
        logger.info("deleted %s", p)
        return "OK"

    def _refuse_root(self, vp: ValidatedPath) -> None:
        if vp.path in self.guard.roots:
            raise AccessDenied(f"Access denied: '{vp.raw}' is a sandbox root")

    # ---------- Listing / search ----------

    def list_directory(self, raw_path: str, recursive: bool = False) -> List[TreeNode]:
        return self.tree.list(self.guard.validate(raw_path), recursive)

    def search_in_project(self, root_path: str, query: str,
                          extensions: Sequence[str]) -> List[SearchHit]:
        # an empty query never reaches the disk, not even for validation
        if not query.strip():
            return []
        return self.engine.search(self.guard.validate(root_path), query, extensions)

    def list_exhibit_files(self, raw_path: str) -> List[ExhibitFile]:
        """Files in a folder that can be attached as exhibits (no recursion)."""
        directory = self.guard.validate(raw_path).path
        if not directory.is_dir():
            raise NotADirectory("Path is not a directory")
        try:
            children = list(directory.iterdir())
        except OSError as e:
            raise FileIOError.from_os_error("read directory", e) from e

        files = [
            ExhibitFile(name=p.name, path=str(p))
            for p in children
            if not is_ignored(p.name) and extension_of(p.name) in EXHIBIT_EXTENSIONS and p.is_file()
        ]
        files.sort(key=lambda f: (f.name.lower(), f.name))
        return files
