import os
import shutil
import sys
from pathlib import Path

from cmdx.errors import ExecutableLocationError

MARKER = ".cmd"
SCRIPTS = "scripts"
INDEX = "index.json"
LOCK = "index.lock"
CONFIG = "config.yaml"
SCRIPT_SUFFIX = ".sh"


def global_root() -> Path:
    """Return the directory of the running executable.

    CMDX_GLOBAL_ROOT overrides the lookup. A bare program name is resolved
    through PATH the way the shell found it.
    """
    override = os.environ.get("CMDX_GLOBAL_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    program = sys.argv[0] if sys.argv else ""
    if not program or program == "-c":
        raise ExecutableLocationError(
            "cannot retrieve directory of the executable -- place for the global scope scripts"
        )
    if os.sep not in program:
        found = shutil.which(program)
        if found is None:
            raise ExecutableLocationError(f"cannot locate executable {program!r} on PATH")
        program = found
    return Path(program).resolve().parent


def find_local_root(start: Path | None = None) -> Path | None:
    """Walk up from start (inclusive) to the first directory holding a marker dir."""
    current = Path.cwd() if start is None else Path(start).absolute()
    for candidate in (current, *current.parents):
        if marker_dir(candidate).is_dir():
            return candidate
    return None


def marker_dir(root: Path) -> Path:
    return root / MARKER


def scripts_dir(root: Path) -> Path:
    return marker_dir(root) / SCRIPTS


def index_path(root: Path) -> Path:
    return marker_dir(root) / INDEX


def lock_path(root: Path) -> Path:
    return marker_dir(root) / LOCK


def script_rel_path(alias: str) -> str:
    """Relative path, from the scope root, of the script created for alias."""
    return f"{MARKER}/{SCRIPTS}/{alias}{SCRIPT_SUFFIX}"


def config_file() -> Path:
    """Return config file path in the global .cmd/ directory."""
    return marker_dir(global_root()) / CONFIG
