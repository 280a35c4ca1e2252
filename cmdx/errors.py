class CmdError(Exception):
    """Base exception for cmdx domain errors."""

    pass


class ReportedError(CmdError):
    """Condition reported to the user; the invocation still exits cleanly."""

    pass


class FatalError(CmdError):
    """Condition that aborts the invocation."""

    pass


class UnknownAliasError(ReportedError):
    """Raised when an alias is not registered in any consulted scope."""

    def __init__(self, alias: str):
        super().__init__(f"{alias} is an unknown command")
        self.alias = alias


class AliasExistsError(ReportedError):
    """Raised when adding an alias that the target registry already holds."""

    def __init__(self, alias: str):
        super().__init__(f"unable to create {alias} because it already exists")
        self.alias = alias


class DanglingAliasError(ReportedError):
    """Raised when an alias points to a script that no longer exists."""

    def __init__(self, alias: str, rel_path: str):
        super().__init__(f"the {alias} alias is pointed to a non-existent file {rel_path}")
        self.alias = alias
        self.rel_path = rel_path


class ExecutableLocationError(FatalError):
    """Raised when the directory of the running executable cannot be determined."""

    pass


class IndexNotFoundError(FatalError):
    """Raised when a scope's index.json does not exist."""

    pass


class IndexParseError(FatalError):
    """Raised when a scope's index.json exists but cannot be parsed."""

    pass


class ScopeError(FatalError):
    """Raised when a forced scope is not available."""

    pass


class InvalidAliasError(FatalError):
    """Raised when an alias cannot be used as a command or file name."""

    pass


class LaunchError(FatalError):
    """Raised when a script cannot be spawned."""

    pass


class EditorError(FatalError):
    """Raised when the editor cannot be spawned."""

    pass


class ConfigError(FatalError):
    """Raised when config.yaml is structurally invalid."""

    pass
