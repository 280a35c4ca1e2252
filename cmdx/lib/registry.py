"""In-memory command registry for a single scope."""

from collections.abc import Iterator

from cmdx.errors import AliasExistsError
from cmdx.models import CommandEntry, Scope


class CommandRegistry:
    """Ordered alias entries belonging to one scope.

    Aliases are unique within a registry. The same alias may live in another
    scope's registry; the dispatcher decides which one wins.
    """

    def __init__(self, scope: Scope, entries: list[CommandEntry] | None = None):
        self.scope = scope
        self._entries: list[CommandEntry] = list(entries or [])
        self.dirty = False

    @classmethod
    def from_records(cls, scope: Scope, records: list[dict]) -> "CommandRegistry":
        entries = [
            CommandEntry(
                alias=record["alias"],
                rel_path=record["rel_path"],
                description=record.get("description", ""),
                scope=scope,
            )
            for record in records
        ]
        return cls(scope, entries)

    def to_records(self) -> list[dict[str, str]]:
        return [entry.to_record() for entry in self._entries]

    def find_by_alias(self, alias: str) -> CommandEntry | None:
        for entry in self._entries:
            if entry.alias == alias:
                return entry
        return None

    def add(self, entry: CommandEntry) -> None:
        """Append entry. Caller persists through the store."""
        if self.find_by_alias(entry.alias) is not None:
            raise AliasExistsError(entry.alias)
        self._entries.append(entry)
        self.dirty = True

    def remove(self, alias: str) -> bool:
        """Drop alias from the index. The backing script is left on disk."""
        kept = [entry for entry in self._entries if entry.alias != alias]
        if len(kept) == len(self._entries):
            return False
        self._entries = kept
        self.dirty = True
        return True

    def aliases(self) -> list[str]:
        return [entry.alias for entry in self._entries]

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and self.find_by_alias(alias) is not None

    def __repr__(self) -> str:
        return f"CommandRegistry({self.scope.kind.value}, {len(self)} entries)"
