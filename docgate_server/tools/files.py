# docgate_server/tools/files.py
from typing import Any, Dict, List

from pydantic import Base64Bytes, BaseModel, Field



class FsPathIn(BaseModel):
    path: str = Field(..., description="Absolute path under an allowed root (~ expands to home)")


class FsWriteIn(BaseModel):
    path: str = Field(..., description="Absolute path under an allowed root")
    content: str = Field(..., description="UTF-8 text content to write")


class FsWriteBinaryIn(BaseModel):
    path: str = Field(..., description="Absolute path under an allowed root")
    content: Base64Bytes = Field(..., description="Base64-encoded file content")


class FsCopyIn(BaseModel):
    source: str = Field(..., description="Existing file to copy or move")
    destination: str = Field(..., description="Target path (parent folders are created on copy)")


class FsRenameIn(BaseModel):
    old_path: str = Field(..., description="Current path of the item")
    new_path: str = Field(..., description="New path of the item")


class FsListIn(BaseModel):
    path: str = Field(..., description="Folder to list")
    recursive: bool = Field(False, description="Include the full subtree of every folder")


def dump_all(items) -> List[Dict[str, Any]]:
    return [i.model_dump(by_alias=True, mode="json") for i in items]
