"""Index persistence: one JSON array per scope at <root>/.cmd/index.json."""

import contextlib
import fcntl
import json
import logging
import os
import stat
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

from cmdx.errors import IndexNotFoundError, IndexParseError
from cmdx.lib import paths
from cmdx.lib.registry import CommandRegistry
from cmdx.models import Scope

logger = logging.getLogger(__name__)


def _normalize(record, position: int, path: Path) -> dict[str, str]:
    if not isinstance(record, dict):
        raise IndexParseError(f"{path}: entry {position} is not an object")
    rel_path = record.get("rel_path", record.get("relativePath"))
    alias = record.get("alias")
    if not isinstance(alias, str) or not alias:
        raise IndexParseError(f"{path}: entry {position} has no alias")
    if not isinstance(rel_path, str):
        raise IndexParseError(f"{path}: entry {position} ({alias}) has no rel_path")
    description = record.get("description") or ""
    return {"alias": alias, "rel_path": rel_path, "description": str(description)}


def load(scope: Scope) -> CommandRegistry:
    """Read a scope's index.

    Raises:
        IndexNotFoundError: index.json does not exist
        IndexParseError: index.json exists but is not a valid command array
    """
    path = paths.index_path(scope.root)
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise IndexNotFoundError(f"{path} does not exist") from e

    try:
        records = json.loads(data)
    except json.JSONDecodeError as e:
        raise IndexParseError(f"{path}: {e}") from e
    if not isinstance(records, list):
        raise IndexParseError(f"{path}: expected a JSON array, got {type(records).__name__}")

    normalized = [_normalize(record, i, path) for i, record in enumerate(records)]
    logger.debug(f"Loaded {len(normalized)} commands from {path}")
    return CommandRegistry.from_records(scope, normalized)


def load_or_empty(scope: Scope) -> CommandRegistry:
    """Like load, but a scope with no index yet is an empty registry."""
    try:
        return load(scope)
    except IndexNotFoundError:
        logger.debug(f"No index for {scope}, starting empty")
        return CommandRegistry(scope)


def save(registry: CommandRegistry) -> Path:
    """Write the registry back to its index through a temp file and rename."""
    path = paths.index_path(registry.scope.root)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(registry.to_records(), indent=2) + "\n"

    mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=".index.", suffix=".tmp", delete=False
    ) as handle:
        tmp_name = handle.name
        try:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
            os.chmod(tmp_name, mode)
        except BaseException:
            handle.close()
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
    try:
        os.replace(tmp_name, path)
    except OSError:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise

    registry.dirty = False
    logger.debug(f"Saved {len(registry)} commands to {path}")
    return path


def ensure_initialized(
    root: Path, verbose: bool = False, echo: Callable[[str], None] | None = None
) -> Path:
    """Create .cmd/, .cmd/scripts/ and an empty index when missing.

    Every step tolerates what already exists. With verbose, each existing
    piece is reported through echo. Returns the index path.
    """
    report = echo or logger.info

    marker = paths.marker_dir(root)
    try:
        marker.mkdir()
        logger.debug(f"Created {marker}")
    except FileExistsError:
        if verbose:
            report(f"./{paths.MARKER}/ folder already exists")

    scripts = paths.scripts_dir(root)
    try:
        scripts.mkdir()
        logger.debug(f"Created {scripts}")
    except FileExistsError:
        if verbose:
            report(f"./{paths.MARKER}/{paths.SCRIPTS}/ folder already exists")

    index = paths.index_path(root)
    try:
        with open(index, "x", encoding="utf-8") as f:
            f.write("[]\n")
        logger.debug(f"Created {index}")
    except FileExistsError:
        if verbose:
            report(f"./{paths.MARKER}/{paths.INDEX} file already exists")

    return index


@contextlib.contextmanager
def _locked(root: Path) -> Iterator[None]:
    lock_file = paths.lock_path(root)
    with open(lock_file, "a") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        logger.debug(f"Acquired {lock_file}")
        try:
            yield
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextlib.contextmanager
def transaction(scope: Scope, lock: bool = True) -> Iterator[CommandRegistry]:
    """Load a scope's registry fresh, yield it, save it if it changed.

    The sequence holds an advisory lock on .cmd/index.lock when the marker
    directory exists. Without the lock, concurrent writers race and the last
    one wins. Nothing is written when the body raises.
    """
    use_lock = lock and paths.marker_dir(scope.root).is_dir()
    with _locked(scope.root) if use_lock else contextlib.nullcontext():
        registry = load_or_empty(scope)
        yield registry
        if registry.dirty:
            save(registry)
