"""Directive scanning for dataclass records flagged for generation."""

from __future__ import annotations

import ast
from typing import List, Optional

from .fields import class_attributes, extract_fields
from .logging import get_logger
from .models import AnnotatedRecord, SourceFile

CODEGEN_DIRECTIVE = "# templ:component-opts"

_DATACLASS_DECORATOR = "dataclass"


class DirectiveScanner:
    """Finds module-level dataclasses carrying the codegen directive."""

    def __init__(self, directive: str = CODEGEN_DIRECTIVE) -> None:
        self.directive = directive
        self.logger = get_logger("scanner")

    def scan(self, source: SourceFile) -> List[AnnotatedRecord]:
        """Return every annotated record in ``source`` that can be generated."""
        records: List[AnnotatedRecord] = []
        for node in source.tree.body:
            if not isinstance(node, ast.ClassDef):
                continue
            group = source.doc_comments.get(node)
            if group is None or self.directive not in group.texts:
                continue

            decorator = _dataclass_decorator(node)
            if decorator is None:
                self.logger.debug(
                    "%s.%s carries the directive but is not a dataclass; ignoring",
                    source.module_name,
                    node.name,
                )
                continue

            fields = extract_fields(node)
            if not fields:
                self.logger.warning("%s has no fields; skipping", node.name)
                continue

            if _is_frozen(decorator):
                self.logger.warning(
                    "%s is a frozen dataclass and cannot take options; skipping", node.name
                )
                continue

            records.append(
                AnnotatedRecord(
                    name=node.name,
                    fields=fields,
                    attributes=class_attributes(node),
                )
            )
        return records


def _dataclass_decorator(node: ast.ClassDef) -> Optional[ast.expr]:
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Name) and target.id == _DATACLASS_DECORATOR:
            return decorator
        if (
            isinstance(target, ast.Attribute)
            and target.attr == _DATACLASS_DECORATOR
            and isinstance(target.value, ast.Name)
            and target.value.id == "dataclasses"
        ):
            return decorator
    return None


def _is_frozen(decorator: ast.expr) -> bool:
    if not isinstance(decorator, ast.Call):
        return False
    for keyword in decorator.keywords:
        if keyword.arg == "frozen":
            return isinstance(keyword.value, ast.Constant) and keyword.value.value is True
    return False


__all__ = ["CODEGEN_DIRECTIVE", "DirectiveScanner"]
