# docgate_server/tools/search.py
from __future__ import annotations
from typing import List
from pydantic import BaseModel, Field


class SearchIn(BaseModel):
    root_path: str = Field(..., description="Project folder to search")
    query: str = Field(..., description="Case-insensitive text to find; blank returns nothing")
    extensions: List[str] = Field(
        ..., description="File extensions to search, with or without the dot",
    )
