"""Minimal import planning for generated option modules."""

from __future__ import annotations

import ast
from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from .models import AnnotatedRecord, SourceFile

UTILITY_MODULE = "typing"
UTILITY_NAME = "Callable"


def referenced_names(records: Iterable[AnnotatedRecord]) -> Set[str]:
    """Return the root identifiers used by the field types and default literals of ``records``."""
    names: Set[str] = set()
    for record in records:
        for field in record.fields:
            names.update(_type_roots(ast.parse(field.type_name, mode="eval")))
            if field.default is not None:
                names.update(_default_roots(field.default))
    return names


def _default_roots(literal: str) -> Iterator[str]:
    try:
        tree = ast.parse(literal, mode="eval")
    except SyntaxError:
        # malformed defaults surface when the generated module is imported
        return
    for child in ast.walk(tree):
        if isinstance(child, ast.Name):
            yield child.id


def _type_roots(node: ast.AST) -> Iterator[str]:
    for child in ast.walk(node):
        if isinstance(child, ast.Name):
            yield child.id
        elif isinstance(child, ast.Constant) and isinstance(child.value, str):
            # forward references
            try:
                nested = ast.parse(child.value, mode="eval")
            except SyntaxError:
                continue
            yield from _type_roots(nested)


def import_bindings(stmt: ast.stmt) -> List[Tuple[str, str]]:
    """Return ``(bound_name, description)`` pairs for an import statement."""
    bindings: List[Tuple[str, str]] = []
    if isinstance(stmt, ast.Import):
        for alias in stmt.names:
            bound = alias.asname or alias.name.split(".", 1)[0]
            bindings.append((bound, f"import {alias.name}"))
    elif isinstance(stmt, ast.ImportFrom):
        if stmt.module == "__future__":
            return bindings
        module = "." * stmt.level + (stmt.module or "")
        for alias in stmt.names:
            if alias.name == "*":
                continue
            bindings.append((alias.asname or alias.name, f"from {module} import {alias.name}"))
    return bindings


def module_definitions(tree: ast.Module) -> List[str]:
    """Names defined (not imported) at the top level of ``tree``, in source order."""
    names: List[str] = []
    for node in tree.body:
        if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            names.append(node.name)
        elif isinstance(node, ast.Assign):
            names.extend(target.id for target in node.targets if isinstance(target, ast.Name))
        elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            names.append(node.target.id)
    return names


def plan_imports(source: SourceFile, records: Sequence[AnnotatedRecord]) -> List[ast.stmt]:
    """Build the import block for the module generated from ``source``.

    Source imports are copied only for the bindings a field type or default
    literal references; star imports are copied as-is because their bindings
    cannot be known.
    """
    referenced = referenced_names(records)
    planned: List[ast.stmt] = [
        ast.ImportFrom(module="__future__", names=[ast.alias(name="annotations")], level=0),
        ast.ImportFrom(module=UTILITY_MODULE, names=[ast.alias(name=UTILITY_NAME)], level=0),
    ]

    for node in source.tree.body:
        copied = _copy_referenced(node, referenced)
        if copied is not None:
            planned.append(copied)

    local_names = [record.name for record in records]
    for name in module_definitions(source.tree):
        if name in referenced and name not in local_names:
            local_names.append(name)
    planned.append(
        ast.ImportFrom(
            module=source.module_name,
            names=[ast.alias(name=name) for name in local_names],
            level=1 if source.is_package else 0,
        )
    )
    return _dedupe(planned)


def _copy_referenced(node: ast.stmt, referenced: Set[str]) -> ast.stmt | None:
    if isinstance(node, ast.Import):
        kept = [
            ast.alias(name=alias.name, asname=alias.asname)
            for alias in node.names
            if (alias.asname or alias.name.split(".", 1)[0]) in referenced
        ]
        return ast.Import(names=kept) if kept else None
    if isinstance(node, ast.ImportFrom):
        if node.module == "__future__":
            return None
        kept = [
            ast.alias(name=alias.name, asname=alias.asname)
            for alias in node.names
            if alias.name == "*" or (alias.asname or alias.name) in referenced
        ]
        if not kept:
            return None
        return ast.ImportFrom(module=node.module, names=kept, level=node.level)
    return None


def _dedupe(statements: Iterable[ast.stmt]) -> List[ast.stmt]:
    seen: Set[str] = set()
    unique: List[ast.stmt] = []
    for stmt in statements:
        key = ast.dump(stmt)
        if key in seen:
            continue
        seen.add(key)
        unique.append(stmt)
    return unique


__all__ = [
    "import_bindings",
    "module_definitions",
    "plan_imports",
    "referenced_names",
]
