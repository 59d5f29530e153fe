"""Error types raised while generating option modules."""

from __future__ import annotations

from pathlib import Path


class GenerationError(RuntimeError):
    """Base class for failures that abort a generation run."""


class SourceParseError(GenerationError):
    """Raised when an input file is not valid Python source."""

    def __init__(self, path: Path, message: str, line: int | None = None) -> None:
        self.path = path
        self.line = line
        self.message = message
        location = f"{path}:{line}" if line is not None else str(path)
        super().__init__(f"{location}: {message}")


class NameCollisionError(GenerationError):
    """Raised when two generated or imported names would bind the same identifier."""

    def __init__(self, name: str, first: str, second: str) -> None:
        self.name = name
        self.first = first
        self.second = second
        super().__init__(f"name collision on '{name}': {first} and {second}")


class OutputWriteError(GenerationError):
    """Raised when a generated module cannot be written."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"failed to write {path}: {cause}")


__all__ = [
    "GenerationError",
    "NameCollisionError",
    "OutputWriteError",
    "SourceParseError",
]
