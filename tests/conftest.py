from dataclasses import dataclass
from pathlib import Path

import pytest

from cmdx import config
from cmdx.lib import store
from cmdx.models import Scope, ScopeKind


@dataclass
class Workspace:
    global_root: Path
    project: Path

    @property
    def global_scope(self) -> Scope:
        return Scope(ScopeKind.GLOBAL, self.global_root)

    @property
    def local_scope(self) -> Scope:
        return Scope(ScopeKind.LOCAL, self.project)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user environment out of config and editor resolution."""
    for key in ("CMDX_EDITOR", "CMDX_WORKDIR", "CMDX_LOCK", "CMDX_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("CMDX_PROPAGATE_EXIT_CODE", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    config.clear_cache()
    yield
    config.clear_cache()


@pytest.fixture
def workspace(monkeypatch, tmp_path):
    """Isolated global root plus an uninitialized project directory as cwd.

    Provides:
    - tmp_path/bin as the global scope root (via CMDX_GLOBAL_ROOT)
    - tmp_path/proj as the current working directory
    """
    global_root = tmp_path / "bin"
    global_root.mkdir()
    project = tmp_path / "proj"
    project.mkdir()

    monkeypatch.setenv("CMDX_GLOBAL_ROOT", str(global_root))
    monkeypatch.chdir(project)
    return Workspace(global_root=global_root, project=project)


@pytest.fixture
def local_workspace(workspace):
    """Workspace whose project directory is an initialized local scope."""
    store.ensure_initialized(workspace.project)
    return workspace


@pytest.fixture
def mock_run(mocker):
    """Patch subprocess.run as seen by the dispatcher; exits 0 by default."""
    run = mocker.patch("cmdx.lib.dispatch.subprocess.run")
    run.return_value.returncode = 0
    return run
