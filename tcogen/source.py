"""Source parsing and comment-to-declaration association."""

from __future__ import annotations

import ast
import io
import tokenize
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Set

from .errors import SourceParseError
from .models import CommentGroup, SourceFile

_NON_CODE_TOKENS = {
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
    tokenize.ENDMARKER,
}


def parse_source(path: Path) -> SourceFile:
    """Read and parse ``path``, attaching standalone comment groups to declarations."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SourceParseError(path, f"cannot read file: {exc}") from exc
    return parse_source_bytes(path, data)


def parse_source_bytes(path: Path, data: bytes) -> SourceFile:
    try:
        tree = ast.parse(data, filename=str(path))
    except SyntaxError as exc:
        raise SourceParseError(path, exc.msg or "invalid syntax", exc.lineno) from exc
    except ValueError as exc:
        # e.g. source containing null bytes
        raise SourceParseError(path, str(exc)) from exc

    try:
        groups = collect_comment_groups(data)
    except (tokenize.TokenError, SyntaxError) as exc:
        raise SourceParseError(path, f"cannot tokenize: {exc}") from exc

    return SourceFile(
        path=path,
        module_name=path.stem,
        is_package=(path.parent / "__init__.py").exists(),
        tree=tree,
        comments=groups,
        doc_comments=associate_comments(tree.body, groups),
    )


def collect_comment_groups(data: bytes) -> List[CommentGroup]:
    """Group standalone comments that sit on consecutive lines.

    A comment sharing its line with code is not standalone and never joins a
    group; blank lines and code lines end the current group.
    """
    code_lines: Set[int] = set()
    comments: Dict[int, str] = {}
    for token in tokenize.tokenize(io.BytesIO(data).readline):
        if token.type == tokenize.COMMENT:
            comments[token.start[0]] = token.string
        elif token.type not in _NON_CODE_TOKENS:
            for line in range(token.start[0], token.end[0] + 1):
                code_lines.add(line)

    groups: List[CommentGroup] = []
    current: CommentGroup | None = None
    for line in sorted(comments):
        if line in code_lines:
            continue
        if current is not None and line == current.end_line + 1:
            current.end_line = line
            current.texts.append(comments[line])
            continue
        current = CommentGroup(start_line=line, end_line=line, texts=[comments[line]])
        groups.append(current)
    return groups


def associate_comments(
    declarations: Sequence[ast.stmt], groups: Iterable[CommentGroup]
) -> Dict[ast.stmt, CommentGroup]:
    """Map each declaration to the comment group ending on the line just above it."""
    by_end_line = {group.end_line: group for group in groups}
    mapping: Dict[ast.stmt, CommentGroup] = {}
    for node in declarations:
        group = by_end_line.get(first_line(node) - 1)
        if group is not None:
            mapping[node] = group
    return mapping


def first_line(node: ast.stmt) -> int:
    """Return the first source line of ``node``, counting its decorators."""
    decorators = getattr(node, "decorator_list", None) or []
    lines = [decorator.lineno for decorator in decorators]
    lines.append(node.lineno)
    return min(lines)


__all__ = [
    "associate_comments",
    "collect_comment_groups",
    "first_line",
    "parse_source",
    "parse_source_bytes",
]
