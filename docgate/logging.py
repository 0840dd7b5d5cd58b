# docgate/logging.py
import json
import logging
import os
import re
from typing import Any, Dict

PII_RE = re.compile(r"([\w\.-]+)@([\w\.-]+)")  # naive email redaction
MAX_ARG_CHARS = 200  # file bodies can be megabytes; keep log lines short


def configure_logging(level: str | None = None):
    logging.basicConfig(
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_str(s: str) -> str:
    s = PII_RE.sub("[redacted-email]", s)
    if len(s) > MAX_ARG_CHARS:
        s = f"{s[:MAX_ARG_CHARS]}...[{len(s)} chars]"
    return s


def redact_args(args: Dict[str, Any]) -> Dict[str, Any]:
    safe = json.loads(json.dumps(args, default=repr))  # shallow copy via JSON
    for k, v in list(safe.items()):
        if isinstance(v, str):
            safe[k] = redact_str(v)
    return safe


def log_tool_call(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("tool_call %s %s", name, redact_args(args))
