from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ScopeKind(str, Enum):
    GLOBAL = "global"
    LOCAL = "local"


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    root: Path

    def __str__(self) -> str:
        return f"{self.kind.value} ({self.root})"


@dataclass(frozen=True)
class CommandEntry:
    """One registered alias, bound to the scope that owns it."""

    alias: str
    rel_path: str
    description: str
    scope: Scope

    @property
    def abs_path(self) -> Path:
        return self.scope.root / self.rel_path

    def to_record(self) -> dict[str, str]:
        return {
            "alias": self.alias,
            "rel_path": self.rel_path,
            "description": self.description,
        }
