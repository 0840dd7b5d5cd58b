# tests/test_tree.py
from pathlib import Path

import pytest

from docgate.errors import FileIOError, NotADirectory
from docgate.models import AllowedRootSet, NodeKind
from docgate.services.pathguard import PathGuard
from docgate.services.tree import TreeEnumerator, node_id


def _touch(p: Path, text: str = "") -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text)
    return p


@pytest.fixture
def project(sandbox) -> Path:
    root = sandbox["home"] / "project"
    _touch(root / "b.md")
    _touch(root / "A.txt")
    _touch(root / "image.png")
    _touch(root / "noext")
    _touch(root / ".hidden.md")
    _touch(root / "node_modules" / "pkg.js")
    _touch(root / "target" / "out.rs")
    _touch(root / ".git" / "config.toml")
    _touch(root / "zeta" / "deep" / "z.md")
    _touch(root / "Alpha" / "note.md")
    (root / "empty").mkdir()
    return root


def _names(nodes):
    return [n.name for n in nodes]


def _check_order(nodes):
    kinds = [n.kind for n in nodes]
    assert kinds == sorted(kinds, key=lambda k: 0 if k is NodeKind.DIRECTORY else 1)
    for kind in (NodeKind.DIRECTORY, NodeKind.FILE):
        same = [n.name.lower() for n in nodes if n.kind is kind]
        assert same == sorted(same)
    for n in nodes:
        if n.children:
            _check_order(n.children)


def test_flat_listing_filters_and_orders(guard, project):
    nodes = TreeEnumerator().list(guard.validate(str(project)), recursive=False)
    assert _names(nodes) == ["Alpha", "empty", "zeta", "A.txt", "b.md"]
    assert all(n.children is None for n in nodes)


def test_flat_listing_shape(guard, project):
    nodes = TreeEnumerator().list(guard.validate(str(project)))
    first = nodes[0]
    assert first.kind is NodeKind.DIRECTORY
    assert first.path == str(project / "Alpha")
    assert first.id == node_id(str(project / "Alpha"))
    dumped = first.model_dump(by_alias=True)
    assert dumped["type"] == "folder"
    assert set(dumped) == {"id", "name", "path", "type", "children"}


def test_recursive_listing_attaches_children(guard, project):
    nodes = TreeEnumerator().list(guard.validate(str(project)), recursive=True)
    by_name = {n.name: n for n in nodes}
    assert _names(by_name["zeta"].children) == ["deep"]
    assert _names(by_name["zeta"].children[0].children) == ["z.md"]
    assert by_name["empty"].children == []
    assert by_name["b.md"].children is None
    _check_order(nodes)


def test_ids_are_deterministic(guard, project):
    a = TreeEnumerator().list(guard.validate(str(project)), recursive=True)
    b = TreeEnumerator().list(guard.validate(str(project)), recursive=True)
    assert [n.id for n in a] == [n.id for n in b]
    assert len({n.id for n in a}) == len(a)


def test_case_insensitive_order_with_tiebreak(guard, sandbox):
    root = sandbox["home"] / "cases"
    for name in ("b.md", "B.md", "a.md", "C.md"):
        _touch(root / name)
    nodes = TreeEnumerator().list(guard.validate(str(root)))
    names = _names(nodes)
    assert [n.lower() for n in names] == ["a.md", "b.md", "b.md", "c.md"]
    assert names.index("B.md") < names.index("b.md")


def test_symlink_cycle_terminates(guard, sandbox):
    root = sandbox["home"] / "loop"
    _touch(root / "sub" / "doc.md")
    (root / "sub" / "back").symlink_to(root, target_is_directory=True)

    nodes = TreeEnumerator().list(guard.validate(str(root)), recursive=True)
    sub = nodes[0]
    assert sub.name == "sub"
    back = next(n for n in sub.children if n.name == "back")
    assert back.kind is NodeKind.DIRECTORY
    assert back.children is None


def test_max_depth_stops_recursion(guard, sandbox):
    root = sandbox["home"] / "deep"
    _touch(root / "l1" / "l2" / "l3" / "f.md")
    nodes = TreeEnumerator(max_depth=2).list(guard.validate(str(root)), recursive=True)
    l1 = nodes[0]
    l2 = l1.children[0]
    assert l2.name == "l2"
    assert l2.children is None


def test_node_budget_truncates_in_dfs_order(guard, sandbox):
    root = sandbox["home"] / "many"
    for i in range(5):
        _touch(root / f"f{i}.md")
    nodes = TreeEnumerator(max_nodes=3).list(guard.validate(str(root)))
    assert _names(nodes) == ["f0.md", "f1.md", "f2.md"]


def test_unreadable_subdirectory_degrades_to_none(guard, sandbox, monkeypatch):
    root = sandbox["home"] / "perm"
    _touch(root / "locked" / "x.md")
    _touch(root / "open" / "y.md")

    import docgate.services.tree as tree_mod
    real_scan = tree_mod.scan_dir

    def flaky(directory):
        if Path(directory).name == "locked":
            raise PermissionError(13, "Permission denied")
        return real_scan(directory)

    monkeypatch.setattr(tree_mod, "scan_dir", flaky)
    nodes = TreeEnumerator().list(guard.validate(str(root)), recursive=True)
    by_name = {n.name: n for n in nodes}
    assert by_name["locked"].children is None
    assert _names(by_name["open"].children) == ["y.md"]


def test_root_read_failure_is_fatal(guard, sandbox, monkeypatch):
    root = sandbox["home"] / "rootfail"
    root.mkdir()
    import docgate.services.tree as tree_mod

    def boom(directory):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(tree_mod, "scan_dir", boom)
    with pytest.raises(FileIOError) as exc:
        TreeEnumerator().list(guard.validate(str(root)))
    assert "Permission denied" in exc.value.message


def test_file_root_is_not_a_directory(guard, sandbox):
    f = _touch(sandbox["home"] / "single.md")
    with pytest.raises(NotADirectory):
        TreeEnumerator().list(guard.validate(str(f)))


def test_missing_root_is_not_a_directory(guard, sandbox):
    with pytest.raises(NotADirectory):
        TreeEnumerator().list(guard.validate(str(sandbox["home"] / "ghost")))


def test_standalone_guard_and_enumerator(tmp_path):
    root = tmp_path.resolve()
    _touch(root / "x.md")
    guard = PathGuard(AllowedRootSet.from_dirs(root))
    assert _names(TreeEnumerator().list(guard.validate(str(root)))) == ["x.md"]
