"""Immutable view of both scopes, loaded once per invocation."""

import logging
from dataclasses import dataclass
from pathlib import Path

from cmdx.lib import paths, store
from cmdx.lib.registry import CommandRegistry
from cmdx.models import CommandEntry, Scope, ScopeKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    global_registry: CommandRegistry
    local_registry: CommandRegistry | None = None

    @classmethod
    def load(cls, cwd: Path | None = None) -> "Snapshot":
        """Locate and load both scopes. A corrupt index is fatal; a missing one is empty."""
        global_scope = Scope(ScopeKind.GLOBAL, paths.global_root())
        global_registry = store.load_or_empty(global_scope)

        local_registry = None
        local_root = paths.find_local_root(cwd)
        if local_root is not None:
            local_registry = store.load_or_empty(Scope(ScopeKind.LOCAL, local_root))

        logger.debug(f"Global scope at {global_scope.root}, local scope at {local_root}")
        return cls(global_registry, local_registry)

    @property
    def global_scope(self) -> Scope:
        return self.global_registry.scope

    @property
    def local_scope(self) -> Scope | None:
        return self.local_registry.scope if self.local_registry is not None else None

    def registry_for(self, scope: Scope) -> CommandRegistry | None:
        for registry in self.registries():
            if registry.scope == scope:
                return registry
        return None

    def registries(self) -> list[CommandRegistry]:
        """Registries in lookup order: local shadows global."""
        if self.local_registry is None:
            return [self.global_registry]
        return [self.local_registry, self.global_registry]

    def aliases(self) -> list[str]:
        seen: list[str] = []
        for registry in self.registries():
            for alias in registry.aliases():
                if alias not in seen:
                    seen.append(alias)
        return seen

    def entries(self) -> list[tuple[CommandEntry, bool]]:
        """Every entry with a flag telling whether a higher-precedence scope hides it."""
        seen: set[str] = set()
        result = []
        for registry in self.registries():
            for entry in registry:
                result.append((entry, entry.alias in seen))
                seen.add(entry.alias)
        return result
