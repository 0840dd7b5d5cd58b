# docgate/services/search.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterator, List, Sequence, Set, Tuple

from docgate.errors import FileIOError, NotADirectory
from docgate.models import SearchHit, ValidatedPath
from docgate.services.walk import dir_key, extension_of, normalize_extensions, scan_dir

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class _CapReached(Exception):
    pass


def split_lines(content: str) -> List[str]:
    """
    Split on "\\n" only, dropping one trailing "\\r" per line. A final newline
    does not open an extra empty line.
    """
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def fold_char(ch: str) -> str:
    return ch.casefold()


def fold_text(text: str) -> str:
    """
    Case-fold one character at a time, so a query and a line fold the same
    way (whole-string lowering turns a word-final "Σ" into "ς", not "σ").
    """
    return "".join(fold_char(ch) for ch in text)


def fold_line(line: str) -> Tuple[str, List[int]]:
    """
    Case-fold `line` and map every folded character back to the index of the
    original character it came from. Folding can grow a character
    ("İ" -> "i̇", "ß" -> "ss"), so folded offsets are not original offsets.
    """
    folded: List[str] = []
    origin: List[int] = []
    for i, ch in enumerate(line):
        low = fold_char(ch)
        folded.append(low)
        origin.extend([i] * len(low))
    return "".join(folded), origin


def find_matches(line: str, query: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (start, end) character spans of `query` in `line`, case-insensitive
    and non-overlapping: scanning resumes at the end of each match, so "aa"
    occurs once in "aaa".
    """
    needle = fold_text(query)
    if not needle:
        return
    folded, origin = fold_line(line)
    pos = 0
    while True:
        hit = folded.find(needle, pos)
        if hit < 0:
            return
        end = hit + len(needle)
        yield origin[hit], origin[end - 1] + 1
        pos = end


def build_context(line: str, start: int, end: int, radius: int = 30) -> str:
    lo = max(0, start - radius)
    hi = min(len(line), end + radius)
    context = line[lo:hi].strip()
    if lo > 0:
        context = ELLIPSIS + context
    if hi < len(line):
        context = context + ELLIPSIS
    return context


class SearchEngine:
    """
    Case-insensitive text search across a project folder.

    Files are chosen by the caller's extension list. Results come back in
    depth-first discovery order (sibling order shared with the tree view)
    and the walk stops once `max_hits` results exist.

    Unreadable or non-UTF-8 files are skipped; an unreadable directory aborts
    the search with FileIOError.
    """

    def __init__(self, max_hits: int = 500, context_chars: int = 30):
        self.max_hits = max_hits
        self.context_chars = context_chars

    def search(self, root: ValidatedPath, query: str, extensions: Sequence[str]) -> List[SearchHit]:
        if not query.strip():
            return []
        directory = root.path
        if not directory.is_dir():
            raise NotADirectory("Path is not a directory")

        wanted = normalize_extensions(extensions)
        results: List[SearchHit] = []
        try:
            self._walk(directory, query, wanted, results, visited=set())
        except _CapReached:
            logger.info("search for %r in %s stopped at %d hits", query, directory, self.max_hits)
        return results

    def search_file(self, file_path: Path, query: str) -> List[SearchHit]:
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            content = f.read()

        name = file_path.name
        path_str = str(file_path)
        hits: List[SearchHit] = []
        for line_no, line in enumerate(split_lines(content), start=1):
            for start, end in find_matches(line, query):
                hits.append(SearchHit(
                    document_path=path_str,
                    document_name=name,
                    line=line_no,
                    column=start + 1,
                    match_text=line[start:end],
                    context=build_context(line, start, end, self.context_chars),
                ))
        return hits

    # ---------- Internals ----------

    def _walk(self, directory: Path, query: str, wanted: FrozenSet[str],
              results: List[SearchHit], visited: Set[Path]) -> None:
        key = dir_key(directory)
        if key in visited:
            logger.debug("directory cycle skipped: %s", directory)
            return
        visited.add(key)

        try:
            entries = scan_dir(directory)
        except OSError as e:
            raise FileIOError.from_os_error(f"read directory {directory}", e) from e

        for entry in entries:
            if entry.is_dir:
                self._walk(entry.path, query, wanted, results, visited)
            elif entry.is_file and extension_of(entry.name) in wanted:
                try:
                    hits = self.search_file(entry.path, query)
                except (OSError, UnicodeDecodeError) as e:
                    logger.debug("skipping %s: %s", entry.path, e)
                    continue
                results.extend(hits[: self.max_hits - len(results)])
                if len(results) >= self.max_hits:
                    raise _CapReached()
