"""Depth-first source discovery honouring ignore rules."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

SOURCE_SUFFIX = ".py"
CODEGEN_SUFFIX = "_tcogen.py"
TEMPL_SUFFIX = "_templ.py"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
}


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .tcogen.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def load_ignore_rules(root: Path, extra_patterns: Iterable[str] = ()) -> List[IgnoreRule]:
    """Collect rules from ``root/.gitignore`` followed by ``extra_patterns``."""
    rules: List[IgnoreRule] = []
    gitignore = root / ".gitignore"
    if gitignore.exists():
        for raw_line in gitignore.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            negate = line.startswith("!")
            rule = build_ignore_rule(line[1:] if negate else line, negate=negate)
            if rule is not None:
                rules.append(rule)
    for pattern in extra_patterns:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def is_generation_candidate(name: str, skip_suffixes: Iterable[str] = ()) -> bool:
    """Return True for Python sources that were not produced by a generator."""
    if not name.endswith(SOURCE_SUFFIX):
        return False
    if name.endswith((CODEGEN_SUFFIX, TEMPL_SUFFIX)):
        return False
    return not any(name.endswith(suffix) for suffix in skip_suffixes)


def _raise_walk_error(error: OSError) -> None:
    raise error


def iter_source_files(
    root: Path,
    rules: Sequence[IgnoreRule] = (),
    skip_suffixes: Iterable[str] = (),
) -> Iterator[Path]:
    """Yield candidate source files under ``root`` depth-first in sorted order.

    Errors raised while listing a directory propagate to the caller.
    """
    skip = tuple(skip_suffixes)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if not is_generation_candidate(filename, skip):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


__all__ = [
    "CODEGEN_SUFFIX",
    "IgnoreRule",
    "SOURCE_SUFFIX",
    "TEMPL_SUFFIX",
    "build_ignore_rule",
    "is_generation_candidate",
    "iter_source_files",
    "load_ignore_rules",
    "should_ignore",
]
