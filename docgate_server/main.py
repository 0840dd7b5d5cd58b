# docgate_server/main.py
from fastmcp import FastMCP
from docgate.config import Settings
from docgate.di import build_container
from docgate.logging import configure_logging
from docgate_server.registry import build_tool_registry, register_into_fastmcp

def create_app(settings: Settings | None = None) -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from tool/service logic.
    """
    container = build_container(settings)

    mcp = FastMCP("DocGate", version="0.1.0")

    # Same registry the HTTP transport serves
    register_into_fastmcp(mcp, build_tool_registry(container))

    return mcp


def main():
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    app = create_app(settings)
    # stdio transport: the editor shell launches this process and speaks JSON-RPC on stdin/stdout
    app.run(transport="stdio")


if __name__ == "__main__":
    main()
