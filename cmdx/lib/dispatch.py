"""Script dispatch: resolve aliases, run scripts, open files in the editor."""

import logging
import os
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from cmdx import config
from cmdx.errors import DanglingAliasError, EditorError, LaunchError
from cmdx.lib.context import Snapshot
from cmdx.models import CommandEntry

logger = logging.getLogger(__name__)

SCRIPT_TEMPLATE = '#!/usr/bin/env sh\n\necho "Hello world"\n'
SCRIPT_MODE = 0o775


def resolve_alias(snapshot: Snapshot, alias: str) -> CommandEntry | None:
    """First match across scopes, local before global."""
    for registry in snapshot.registries():
        entry = registry.find_by_alias(alias)
        if entry is not None:
            return entry
    return None


def _workdir(entry: CommandEntry, mode: str) -> Path | None:
    if mode == "scope":
        return entry.scope.root
    if mode == "script":
        return entry.abs_path.parent
    return None


def invoke(entry: CommandEntry, args: Sequence[str], workdir: str = "scope") -> int:
    """Run the script behind entry and wait for it.

    A non-zero exit is informational; only a failure to spawn is an error.
    """
    script = entry.abs_path
    if not script.exists():
        raise DanglingAliasError(entry.alias, entry.rel_path)

    cmd = [str(script), *args]
    cwd = _workdir(entry, workdir)
    logger.info(f"Running {cmd} in {cwd or Path.cwd()}")
    try:
        result = subprocess.run(cmd, cwd=str(cwd) if cwd else None, check=False)
    except OSError as e:
        raise LaunchError(f"Failed to execute command {script}: {e}") from e

    if result.returncode != 0:
        logger.info(f"{entry.alias} exited with code {result.returncode}")
    return result.returncode


def editor_command() -> list[str]:
    """$EDITOR, then the configured editor, then vim."""
    editor = os.environ.get("EDITOR") or config.load_config().get("editor") or config.DEFAULT_EDITOR
    return shlex.split(editor) or [config.DEFAULT_EDITOR]


def open_in_editor(path: Path) -> int:
    cmd = [*editor_command(), str(path)]
    logger.info(f"Opening {path} with {cmd[0]}")
    try:
        result = subprocess.run(cmd, check=False)
    except OSError as e:
        raise EditorError(f"Failed to execute editor {cmd[0]}: {e}") from e
    return result.returncode


def create_script(path: Path) -> bool:
    """Write the starter script unless path already exists. Returns True if written."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SCRIPT_TEMPLATE)
    path.chmod(SCRIPT_MODE)
    logger.debug(f"Created script {path}")
    return True
