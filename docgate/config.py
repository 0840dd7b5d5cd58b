# docgate/config.py
from pathlib import Path
from pydantic_settings import BaseSettings

from docgate.errors import ConfigError
from docgate.models import AllowedRootSet

class Settings(BaseSettings):
    # Sandbox roots (HOME_DIR defaults to the current user's home)
    HOME_DIR: Path | None = None
    SHARED_TMP_DIR: Path = Path("/tmp")
    DATA_DIR_NAME: str = ".docgate"   # under HOME_DIR

    # Tree listing guards
    TREE_MAX_DEPTH: int = 64
    TREE_MAX_NODES: int = 50_000

    # Project search
    SEARCH_MAX_HITS: int = 500
    SEARCH_CONTEXT_CHARS: int = 30

    # HTTP MCP transport
    MCP_HTTP_HOST: str = "127.0.0.1"
    MCP_HTTP_PORT: int = 8080
    MCP_HTTP_PATH: str = "/mcp"

    # Security: Bearer token and allowed origins
    MCP_HTTP_BEARER_TOKEN: str = "change-me"         # set in .env for prod
    MCP_HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1, tauri://localhost"
    MCP_HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


def resolve_home(settings: Settings) -> Path:
    if settings.HOME_DIR is not None:
        home = settings.HOME_DIR.expanduser()
    else:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise ConfigError(f"Cannot determine home directory: {e}") from e
    if not home.is_dir():
        raise ConfigError(f"Home directory does not exist: {home}")
    return home.resolve()


def data_dir(settings: Settings) -> Path:
    return resolve_home(settings) / settings.DATA_DIR_NAME


def build_allowed_roots(settings: Settings) -> AllowedRootSet:
    """
    Compute the sandbox once: home, shared tmp, app data dir (in that order).
    The data dir normally sits under home already; it is listed anyway so a
    relocated HOME_DIR keeps it reachable.
    """
    home = resolve_home(settings)
    return AllowedRootSet.from_dirs(home, settings.SHARED_TMP_DIR, home / settings.DATA_DIR_NAME)
