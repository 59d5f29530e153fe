"""Field model extraction for annotated dataclass records."""

from __future__ import annotations

import ast
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import FieldDescriptor
from .tags import parse_tag

STRING_TYPE = "str"
DEFAULT_TAG_KEY = "default"

_PSEUDO_FIELD_WRAPPERS = {"ClassVar", "InitVar"}
_KW_ONLY_MARKER = "KW_ONLY"
_ANNOTATED = "Annotated"
_FIELD_FACTORY = "field"


def extract_fields(class_def: ast.ClassDef) -> List[FieldDescriptor]:
    """Return descriptors for every named field of ``class_def`` in declaration order.

    Statements that cannot carry a name-based setter (methods, plain
    assignments, ``ClassVar``/``InitVar`` pseudo-fields, the ``KW_ONLY``
    sentinel) are skipped.
    """
    fields: List[FieldDescriptor] = []
    for stmt in class_def.body:
        if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
            continue
        annotation = _resolve_forward_ref(stmt.annotation)
        if _is_pseudo_field(annotation):
            continue

        type_expr, tags = _unwrap_annotated(annotation)
        default = _default_literal(type_expr, tags)
        has_value, init = _inspect_value(stmt.value)
        fields.append(
            FieldDescriptor(
                name=stmt.target.id,
                type_name=ast.unparse(type_expr),
                default=default,
                has_value=has_value,
                init=init,
            )
        )
    return fields


def class_attributes(class_def: ast.ClassDef) -> frozenset[str]:
    """Names bound directly in the class body (fields, methods, nested classes)."""
    names = set()
    for stmt in class_def.body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            names.add(stmt.name)
        elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            names.add(stmt.target.id)
        elif isinstance(stmt, ast.Assign):
            for target in stmt.targets:
                names.update(_assigned_names(target))
    return frozenset(names)


def _assigned_names(target: ast.expr) -> Iterable[str]:
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            yield from _assigned_names(element)


def _resolve_forward_ref(annotation: ast.expr) -> ast.expr:
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        try:
            return ast.parse(annotation.value, mode="eval").body
        except SyntaxError:
            return annotation
    return annotation


def _terminal_name(node: ast.expr) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _is_pseudo_field(annotation: ast.expr) -> bool:
    if _terminal_name(annotation) == _KW_ONLY_MARKER:
        return True
    target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
    return _terminal_name(target) in _PSEUDO_FIELD_WRAPPERS


def _unwrap_annotated(annotation: ast.expr) -> Tuple[ast.expr, Sequence[str]]:
    """Split ``Annotated[T, 'tag', ...]`` into ``T`` and its string metadata."""
    if not isinstance(annotation, ast.Subscript) or _terminal_name(annotation.value) != _ANNOTATED:
        return annotation, ()
    arguments = annotation.slice
    if not isinstance(arguments, ast.Tuple) or not arguments.elts:
        return annotation, ()
    type_expr = _resolve_forward_ref(arguments.elts[0])
    tags = [
        item.value
        for item in arguments.elts[1:]
        if isinstance(item, ast.Constant) and isinstance(item.value, str)
    ]
    return type_expr, tags


def _default_literal(type_expr: ast.expr, tags: Sequence[str]) -> Optional[str]:
    # composite types (attribute access, subscripts, unions) never take a tag default
    if not isinstance(type_expr, ast.Name):
        return None
    for tag in tags:
        value = parse_tag(tag).get(DEFAULT_TAG_KEY)
        if value is None:
            continue
        if type_expr.id == STRING_TYPE:
            return repr(value)
        return value
    return None


def _inspect_value(value: Optional[ast.expr]) -> Tuple[bool, bool]:
    """Return ``(has_value, init)`` for a field's right-hand side."""
    if value is None:
        return False, True
    if isinstance(value, ast.Call) and _terminal_name(value.func) == _FIELD_FACTORY:
        keywords = {keyword.arg: keyword.value for keyword in value.keywords if keyword.arg}
        has_value = "default" in keywords or "default_factory" in keywords
        init_flag = keywords.get("init")
        init = not (isinstance(init_flag, ast.Constant) and init_flag.value is False)
        return has_value, init
    return True, True


__all__ = ["extract_fields", "class_attributes", "STRING_TYPE"]
