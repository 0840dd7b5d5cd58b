# docgate/di.py
from dataclasses import dataclass
from docgate.config import Settings, build_allowed_roots, resolve_home
from docgate.services.filesystem import FileSystemService
from docgate.services.pathguard import PathGuard
from docgate.services.search import SearchEngine
from docgate.services.tree import TreeEnumerator
from docgate.services.userdata import UserDataService

@dataclass
class Container:
    settings: Settings
    guard: PathGuard
    fs_service: FileSystemService
    user_data_service: UserDataService

def build_container(settings: Settings | None = None) -> Container:
    s = settings or Settings()
    home = resolve_home(s)
    guard = PathGuard(build_allowed_roots(s), home=home)

    tree = TreeEnumerator(max_depth=s.TREE_MAX_DEPTH, max_nodes=s.TREE_MAX_NODES)
    search = SearchEngine(max_hits=s.SEARCH_MAX_HITS, context_chars=s.SEARCH_CONTEXT_CHARS)
    fs = FileSystemService(guard, tree, search)

    user_data = UserDataService(home / s.DATA_DIR_NAME)

    return Container(s, guard, fs, user_data)
