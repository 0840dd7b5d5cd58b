# docgate_server/registry.py
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type, List
from pydantic import BaseModel

from docgate.di import Container, build_container
from docgate.logging import log_tool_call

# Import only the Pydantic input models from existing tool modules.
from docgate_server.tools.files import (
    FsCopyIn, FsListIn, FsPathIn, FsRenameIn, FsWriteBinaryIn, FsWriteIn, dump_all,
)
from docgate_server.tools.search import SearchIn
from docgate_server.tools.userdata import NoArgsIn
from docgate_server.tools.common import call_gateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]


class ToolHandlers:
    """
    Named handlers for each tool (no lambdas).
    Keeps all cross-cutting logic and observability in one place.
    """
    def __init__(self, container: Container | None = None):
        self.container = container or build_container()

    @property
    def fs(self):
        return self.container.fs_service

    # ---- Path guard
    def validate_path(self, args: FsPathIn) -> str:
        return self.fs.validate_path(args.path)

    # ---- File I/O
    def read_file(self, args: FsPathIn) -> str:
        return self.fs.read_text(args.path)

    def write_file(self, args: FsWriteIn) -> str:
        return self.fs.write_text(args.path, args.content)

    def read_binary_file(self, args: FsPathIn) -> str:
        return base64.b64encode(self.fs.read_bytes(args.path)).decode("ascii")

    def write_binary_file(self, args: FsWriteBinaryIn) -> str:
        return self.fs.write_bytes(args.path, args.content)

    def file_exists(self, args: FsPathIn) -> bool:
        return self.fs.file_exists(args.path)

    # ---- Two-path operations
    def copy_file(self, args: FsCopyIn) -> str:
        return self.fs.copy_file(args.source, args.destination)

    def move_item(self, args: FsCopyIn) -> str:
        return self.fs.move_item(args.source, args.destination)

    def rename_item(self, args: FsRenameIn) -> str:
        return self.fs.rename_item(args.old_path, args.new_path)

    # ---- Folders
    def create_folder(self, args: FsPathIn) -> str:
        return self.fs.create_folder(args.path)

    def delete_item(self, args: FsPathIn) -> str:
        return self.fs.delete_item(args.path)

    # ---- Listing / search
    def list_directory(self, args: FsListIn) -> List[Dict[str, Any]]:
        return dump_all(self.fs.list_directory(args.path, args.recursive))

    def list_exhibit_files(self, args: FsPathIn) -> List[Dict[str, Any]]:
        return dump_all(self.fs.list_exhibit_files(args.path))

    def search_in_project(self, args: SearchIn) -> List[Dict[str, Any]]:
        return dump_all(self.fs.search_in_project(args.root_path, args.query, args.extensions))

    # ---- User data
    def get_user_data_path(self, args: NoArgsIn) -> str:
        return self.container.user_data_service.path()

    def init_user_data_dir(self, args: NoArgsIn) -> str:
        return self.container.user_data_service.init()


_TOOLS = [
    # name, description, input model
    ("validate_path", "Return the canonical form of a path if it is inside the sandbox", FsPathIn),
    ("read_file", "Read a UTF-8 text file", FsPathIn),
    ("write_file", "Write a UTF-8 text file", FsWriteIn),
    ("read_binary_file", "Read a file and return its bytes as base64", FsPathIn),
    ("write_binary_file", "Write base64-encoded bytes to a file", FsWriteBinaryIn),
    ("file_exists", "Check whether a sandboxed path exists", FsPathIn),
    ("copy_file", "Copy a file inside the sandbox", FsCopyIn),
    ("move_item", "Move a file or folder inside the sandbox", FsCopyIn),
    ("rename_item", "Rename a file or folder", FsRenameIn),
    ("create_folder", "Create a folder (and missing parents)", FsPathIn),
    ("delete_item", "Delete a file, or a folder with its contents", FsPathIn),
    ("list_directory", "List text documents and folders, folders first", FsListIn),
    ("list_exhibit_files", "List attachable files (pdf, office, images, mail) in a folder", FsPathIn),
    ("search_in_project", "Find text across a project folder (max 500 hits, depth-first order).", SearchIn),
    ("get_user_data_path", "Path of the application data directory", NoArgsIn),
    ("init_user_data_dir", "Create the application data directory layout", NoArgsIn),
]


def _schema_from_model(model: Type[BaseModel]) -> Dict[str, Any]:
    return model.model_json_schema()


def build_tool_registry(container: Container | None = None) -> Dict[str, ToolSpec]:
    """
    Build a registry once at startup using DI.
    Transport layers (stdio/HTTP) read from this registry to expose tools.
    """
    handlers = ToolHandlers(container)
    return {
        name: ToolSpec(
            name=name,
            description=description,
            input_model=model,
            handler=getattr(handlers, name),
        )
        for name, description, model in _TOOLS
    }


def list_tools_payload(registry: Dict[str, ToolSpec]) -> Dict[str, Any]:
    """
    Produce the `tools/list` payload body as per MCP Tools spec.
    """
    tools = []
    for spec in registry.values():
        tools.append({
            "name": spec.name,
            "description": spec.description,
            "inputSchema": _schema_from_model(spec.input_model),
        })
    return {"tools": tools}


def dispatch_tool_call(registry: Dict[str, ToolSpec], name: str, arguments: Dict[str, Any]) -> Any:
    """
    Validate args with the tool's Pydantic model, then invoke the named handler.
    """
    if name not in registry:
        raise KeyError(f"Tool not found: {name}")
    spec = registry[name]
    log_tool_call(logger, name, arguments)
    args_obj = spec.input_model(**arguments)
    return spec.handler(args_obj)


def register_into_fastmcp(mcp, registry: Dict[str, ToolSpec]) -> None:
    """
    Register all registry tools into a FastMCP stdio host.
    This keeps stdio and HTTP transports in sync without duplication.
    """
    for spec in registry.values():
        # Create a local closure so each handler binds to its spec
        def make_tool(spec: ToolSpec):
            def tool_handler(input):
                log_tool_call(logger, spec.name, input.model_dump(mode="json"))
                return call_gateway(spec.handler, input)
            # real classes, not postponed strings: FastMCP builds the schema from them
            tool_handler.__annotations__ = {"input": spec.input_model}
            tool_handler.__name__ = spec.name
            return tool_handler

        # FastMCP's decorator returns a decorator we can call dynamically.
        mcp.tool(name=spec.name, description=spec.description)(make_tool(spec))
