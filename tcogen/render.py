"""Rendering of generated module models to source text."""

from __future__ import annotations

import ast

from .models import GeneratedFile


def _unparse(stmt: ast.stmt) -> str:
    # unparse reads lineno on assignments and defs, which built nodes lack
    return ast.unparse(ast.fix_missing_locations(stmt))


def render(generated: GeneratedFile) -> str:
    """Return the source text for ``generated``.

    The header comment sits directly above the import block; every top-level
    declaration is separated from the next by two blank lines.
    """
    head = list(generated.header)
    head.extend(_unparse(stmt) for stmt in generated.imports)
    blocks = ["\n".join(head)]
    blocks.extend(_unparse(stmt) for stmt in generated.declarations)
    return "\n\n\n".join(blocks) + "\n"


__all__ = ["render"]
