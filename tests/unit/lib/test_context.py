import pytest

from cmdx.errors import IndexParseError
from cmdx.lib import paths, store
from cmdx.lib.context import Snapshot
from cmdx.models import CommandEntry, ScopeKind


def _register(scope, alias, description=""):
    store.ensure_initialized(scope.root)
    with store.transaction(scope) as registry:
        registry.add(CommandEntry(alias, paths.script_rel_path(alias), description, scope))


def test_load_without_local_scope(workspace):
    snapshot = Snapshot.load()

    assert snapshot.local_registry is None
    assert snapshot.local_scope is None
    assert snapshot.global_scope.kind is ScopeKind.GLOBAL
    assert snapshot.global_scope.root == workspace.global_root
    assert len(snapshot.global_registry) == 0


def test_load_finds_local_from_subdirectory(local_workspace, monkeypatch):
    nested = local_workspace.project / "src" / "pkg"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    snapshot = Snapshot.load()
    assert snapshot.local_scope.root == local_workspace.project
    assert snapshot.local_scope.kind is ScopeKind.LOCAL


def test_marker_without_index_is_empty_scope(workspace):
    (workspace.project / ".cmd").mkdir()
    snapshot = Snapshot.load()
    assert snapshot.local_registry is not None
    assert len(snapshot.local_registry) == 0


def test_corrupt_index_is_fatal(local_workspace):
    paths.index_path(local_workspace.project).write_text("{oops")
    with pytest.raises(IndexParseError):
        Snapshot.load()


def test_registries_local_first(local_workspace):
    snapshot = Snapshot.load()
    kinds = [registry.scope.kind for registry in snapshot.registries()]
    assert kinds == [ScopeKind.LOCAL, ScopeKind.GLOBAL]


def test_aliases_merged_without_duplicates(local_workspace):
    _register(local_workspace.global_scope, "build")
    _register(local_workspace.global_scope, "deploy")
    _register(local_workspace.local_scope, "build")
    _register(local_workspace.local_scope, "test")

    snapshot = Snapshot.load()
    assert snapshot.aliases() == ["build", "test", "deploy"]


def test_entries_flag_shadowed_global(local_workspace):
    _register(local_workspace.global_scope, "build", "global build")
    _register(local_workspace.local_scope, "build", "local build")

    entries = Snapshot.load().entries()
    assert [(e.description, shadowed) for e, shadowed in entries] == [
        ("local build", False),
        ("global build", True),
    ]


def test_registry_for(local_workspace):
    snapshot = Snapshot.load()
    assert snapshot.registry_for(snapshot.local_scope) is snapshot.local_registry
    assert snapshot.registry_for(snapshot.global_scope) is snapshot.global_registry
