# docgate/models.py
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class AllowedRootSet:
    """
    Ordered, immutable set of canonical sandbox roots.
    Build it once at startup and hand it to PathGuard.
    """
    roots: Tuple[Path, ...]

    @classmethod
    def from_dirs(cls, *dirs: Path) -> "AllowedRootSet":
        seen: List[Path] = []
        for d in dirs:
            canonical = Path(d).expanduser().resolve()
            if canonical not in seen:
                seen.append(canonical)
        return cls(tuple(seen))

    def root_for(self, candidate: Path) -> Optional[Path]:
        # component-wise: /home/bob does not contain /home/bobby
        for root in self.roots:
            if candidate.is_relative_to(root):
                return root
        return None

    def __contains__(self, candidate: object) -> bool:
        return isinstance(candidate, Path) and candidate in self.roots

    def __iter__(self):
        return iter(self.roots)


@dataclass(frozen=True)
class ValidatedPath:
    """A canonical path proven to live under one of the allowed roots."""
    path: Path
    raw: str
    root: Path

    def __fspath__(self) -> str:
        return os.fspath(self.path)

    def __str__(self) -> str:
        return str(self.path)


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "folder"


class TreeNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    path: str = Field(..., description="Absolute path of the entry")
    kind: NodeKind = Field(..., alias="type")
    children: Optional[List["TreeNode"]] = None


class SearchHit(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    document_path: str
    document_name: str
    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)
    match_text: str
    context: str


class ExhibitFile(BaseModel):
    name: str
    path: str


TreeNode.model_rebuild()
