# docgate_server/tools/common.py
from typing import Any, Callable

from fastmcp.exceptions import ToolError

from docgate.errors import GatewayError


def call_gateway(fn: Callable[..., Any], *args: Any) -> Any:
    """Run a service call, surfacing gateway failures as '<Kind>: <message>' tool errors."""
    try:
        return fn(*args)
    except GatewayError as e:
        raise ToolError(f"{e.kind.value}: {e.message}") from e
