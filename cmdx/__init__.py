"""cmdx: register short aliases for scripts, globally or per project."""

__version__ = "0.3.0"
