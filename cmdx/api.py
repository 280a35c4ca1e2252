"""Command operations: init, add, edit, remove, run, list.

Each operation takes the invocation's Snapshot explicitly. Reads go through
the snapshot; writes reload the target scope inside store.transaction.
"""

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from cmdx import config
from cmdx.errors import InvalidAliasError, UnknownAliasError
from cmdx.lib import dispatch, paths, store
from cmdx.lib.context import Snapshot
from cmdx.lib.scope import resolve_scope
from cmdx.models import CommandEntry

logger = logging.getLogger(__name__)

RESERVED = frozenset({"init", "add", "edit", "remove", "list"})


@dataclass
class InitResult:
    index: Path
    notices: list[str] = field(default_factory=list)


def validate_alias(alias: str) -> None:
    if not alias or not alias.strip():
        raise InvalidAliasError("alias cannot be empty")
    if alias.startswith("-"):
        raise InvalidAliasError(f"alias {alias!r} cannot start with '-'")
    if os.sep in alias or (os.altsep and os.altsep in alias) or alias in (".", ".."):
        raise InvalidAliasError(f"alias {alias!r} cannot contain a path separator")
    if alias in RESERVED:
        raise InvalidAliasError(f"alias {alias!r} is a built-in command")


def init(cwd: Path | None = None) -> InitResult:
    """Set up the local scope in cwd. Safe to repeat."""
    root = Path.cwd() if cwd is None else cwd
    result = InitResult(index=paths.index_path(root))
    store.ensure_initialized(root, verbose=True, echo=result.notices.append)
    return result


def add(
    snapshot: Snapshot,
    alias: str,
    description: str = "",
    force_global: bool = False,
    force_local: bool = False,
    open_editor: bool = True,
) -> CommandEntry:
    """Create the script for alias, register it, and open it for editing."""
    validate_alias(alias)
    scope = resolve_scope(force_global, force_local, snapshot.global_scope, snapshot.local_scope)
    store.ensure_initialized(scope.root)

    entry = CommandEntry(
        alias=alias,
        rel_path=paths.script_rel_path(alias),
        description=description,
        scope=scope,
    )
    with store.transaction(scope, lock=config.load_config()["lock"]) as registry:
        registry.add(entry)
        dispatch.create_script(entry.abs_path)
    logger.info(f"Registered {alias} in {scope}")

    if open_editor:
        dispatch.open_in_editor(entry.abs_path)
    return entry


def edit(
    snapshot: Snapshot,
    alias: str | None = None,
    force_global: bool = False,
    force_local: bool = False,
) -> Path:
    """Open alias's script, or the target scope's index when no alias is given."""
    if alias is None:
        scope = resolve_scope(
            force_global, force_local, snapshot.global_scope, snapshot.local_scope
        )
        target = store.ensure_initialized(scope.root)
    else:
        if force_global or force_local:
            scope = resolve_scope(
                force_global, force_local, snapshot.global_scope, snapshot.local_scope
            )
            entry = snapshot.registry_for(scope).find_by_alias(alias)
        else:
            entry = dispatch.resolve_alias(snapshot, alias)
        if entry is None:
            raise UnknownAliasError(alias)
        target = entry.abs_path

    dispatch.open_in_editor(target)
    return target


def remove(
    snapshot: Snapshot,
    alias: str,
    force_global: bool = False,
    force_local: bool = False,
) -> CommandEntry:
    """Deregister alias from the target scope. The script file stays on disk."""
    scope = resolve_scope(force_global, force_local, snapshot.global_scope, snapshot.local_scope)
    with store.transaction(scope, lock=config.load_config()["lock"]) as registry:
        entry = registry.find_by_alias(alias)
        if entry is None or not registry.remove(alias):
            raise UnknownAliasError(alias)
    logger.info(f"Removed {alias} from {scope}")
    return entry


def run(snapshot: Snapshot, alias: str, args: Sequence[str] = ()) -> int:
    """Dispatch alias with args. Returns the script's exit code."""
    entry = dispatch.resolve_alias(snapshot, alias)
    if entry is None:
        raise UnknownAliasError(alias)
    return dispatch.invoke(entry, args, workdir=config.load_config()["workdir"])


def list_commands(snapshot: Snapshot) -> list[dict]:
    return [
        {
            "alias": entry.alias,
            "scope": entry.scope.kind.value,
            "description": entry.description,
            "path": str(entry.abs_path),
            "exists": entry.abs_path.exists(),
            "shadowed": shadowed,
        }
        for entry, shadowed in snapshot.entries()
    ]
