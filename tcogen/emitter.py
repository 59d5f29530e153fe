"""Emission of the functional-options declarations for annotated records."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import NameCollisionError
from .fields import STRING_TYPE
from .imports import UTILITY_NAME, import_bindings, plan_imports
from .models import AnnotatedRecord, FieldDescriptor, GeneratedFile, SourceFile

GENERATOR_NAME = "templ-component-opts"

OPT_TYPE_NAME = "Opt"
DEFAULT_FUNC_NAME = "default_opts"
WITH_NAME = "with_"
WITH_IMPL_NAME = "_with"
STR_SUFFIX = "_str"

# zero literals for fields that carry neither a tag default nor their own value
_ZERO_LITERALS = {
    STRING_TYPE: "''",
    "int": "0",
    "float": "0.0",
    "bool": "False",
}
_FALLBACK_ZERO = "None"

STRINGIFIED_TYPES = frozenset({"bool", "int", "float"})


def _load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _store(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Store())


def _raw(text: str) -> ast.Name:
    # unparse writes a Name id verbatim, so default literals reach the output untouched
    return ast.Name(id=text, ctx=ast.Load())


def _attribute(owner: str, attr: str, ctx: ast.expr_context | None = None) -> ast.Attribute:
    return ast.Attribute(value=_load(owner), attr=attr, ctx=ctx or ast.Load())


def _type_expr(type_name: str) -> ast.expr:
    return ast.parse(type_name, mode="eval").body


def _arguments(args: Sequence[ast.arg] = (), vararg: Optional[ast.arg] = None) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=list(args),
        vararg=vararg,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def _function(
    name: str,
    args: ast.arguments,
    body: List[ast.stmt],
    returns: ast.expr,
    doc: Optional[str] = None,
) -> ast.FunctionDef:
    if doc:
        body = [ast.Expr(value=ast.Constant(value=doc)), *body]
    return ast.FunctionDef(
        name=name,
        args=args,
        body=body,
        decorator_list=[],
        returns=returns,
        type_comment=None,
    )


def _bind_method(record: str, attr: str, impl: str) -> ast.Assign:
    return ast.Assign(
        targets=[_attribute(record, attr, ast.Store())],
        value=_load(impl),
        type_comment=None,
    )


class _Namespace:
    """Tracks which generated or imported construct owns each identifier."""

    def __init__(self) -> None:
        self._owners: Dict[str, str] = {}

    def claim(self, name: str, owner: str) -> None:
        existing = self._owners.get(name)
        if existing is not None and existing != owner:
            raise NameCollisionError(name, existing, owner)
        self._owners[name] = owner


class OptionsEmitter:
    """Builds option-pattern declarations and assembles generated modules."""

    def emit(self, record: AnnotatedRecord) -> List[ast.stmt]:
        """Return the declarations for ``record`` in their fixed emission order."""
        return [ast.fix_missing_locations(stmt) for stmt, _ in self._emit_with_origins(record)]

    def _emit_with_origins(self, record: AnnotatedRecord) -> List[Tuple[ast.stmt, str]]:
        self._check_record_attributes(record)
        declarations: List[Tuple[ast.stmt, str]] = [
            (self._option_type(record), f"option type of {record.name}"),
            (self._default_func(record), f"default constructor of {record.name}"),
            (self._with_func(record), f"with_ function of {record.name}"),
        ]
        declarations.extend((stmt, f"with_ method of {record.name}") for stmt in self._with_method(record))
        for field in record.fields:
            origin = f"{record.name}.{field.name}"
            declarations.append((self._setter(record, field), f"setter for {origin}"))
            if stringifier_supported(field):
                declarations.extend(
                    (stmt, f"stringifier for {origin}") for stmt in self._stringifier(record, field)
                )
        return declarations

    def build_file(
        self, source: SourceFile, records: Sequence[AnnotatedRecord], path: Path
    ) -> GeneratedFile:
        """Assemble the generated module for every record found in ``source``."""
        names = ", ".join(record.name for record in records)
        generated = GeneratedFile(
            path=path,
            header=(
                f"# Code generated by {GENERATOR_NAME}; DO NOT EDIT.",
                "",
                f"# This file contains functions and methods for use with {names} in templ components.",
            ),
            imports=plan_imports(source, records),
            records=[record.name for record in records],
        )

        namespace = _Namespace()
        for stmt in generated.imports:
            for bound, description in import_bindings(stmt):
                namespace.claim(bound, description)
        for record in records:
            for stmt, origin in self._emit_with_origins(record):
                for name in _declared_names(stmt):
                    namespace.claim(name, origin)
                generated.declarations.append(stmt)
        return generated

    def _check_record_attributes(self, record: AnnotatedRecord) -> None:
        seen: Dict[str, str] = {}
        for field in record.fields:
            if field.name in seen:
                raise NameCollisionError(
                    field.name, f"field {record.name}.{field.name}", "a second field of that name"
                )
            seen[field.name] = f"field {record.name}.{field.name}"

        attributes = _Namespace()
        for attr in sorted(record.attributes):
            attributes.claim(attr, f"{record.name}.{attr} declared in source")
        attributes.claim(WITH_NAME, f"generated {record.name}.{WITH_NAME} method")
        for field in record.fields:
            if stringifier_supported(field):
                method = field.name + STR_SUFFIX
                attributes.claim(method, f"generated {record.name}.{method} method")

    def _option_type(self, record: AnnotatedRecord) -> ast.stmt:
        # Opt = Callable[[Record], None]
        callable_type = ast.Subscript(
            value=_load(UTILITY_NAME),
            slice=ast.Tuple(
                elts=[
                    ast.List(elts=[_load(record.name)], ctx=ast.Load()),
                    ast.Constant(value=None),
                ],
                ctx=ast.Load(),
            ),
            ctx=ast.Load(),
        )
        return ast.Assign(targets=[_store(OPT_TYPE_NAME)], value=callable_type, type_comment=None)

    def _default_func(self, record: AnnotatedRecord) -> ast.stmt:
        keywords = []
        # fields excluded from __init__ are set by assignment after construction
        assignments: List[ast.stmt] = []
        for field in record.fields:
            if field.default is not None:
                value = field.default
            elif field.has_value:
                continue
            else:
                value = _zero_literal(field)
            if field.init:
                keywords.append(ast.keyword(arg=field.name, value=_raw(value)))
            else:
                assignments.append(
                    ast.Assign(
                        targets=[_attribute("out", field.name, ast.Store())],
                        value=_raw(value),
                        type_comment=None,
                    )
                )

        construct = ast.Call(func=_load(record.name), args=[], keywords=keywords)
        return _function(
            DEFAULT_FUNC_NAME,
            _arguments(),
            [
                ast.Assign(targets=[_store("out")], value=construct, type_comment=None),
                *assignments,
                ast.Return(value=_load("out")),
            ],
            returns=_load(record.name),
            doc=f"Return a new {record.name} populated with its default values.",
        )

    def _with_func(self, record: AnnotatedRecord) -> ast.stmt:
        apply_opts = ast.Call(
            func=_attribute("out", WITH_NAME),
            args=[ast.Starred(value=_load("opts"), ctx=ast.Load())],
            keywords=[],
        )
        return _function(
            WITH_NAME,
            _arguments(vararg=ast.arg(arg="opts", annotation=_load(OPT_TYPE_NAME))),
            [
                ast.Assign(
                    targets=[_store("out")],
                    value=ast.Call(func=_load(DEFAULT_FUNC_NAME), args=[], keywords=[]),
                    type_comment=None,
                ),
                ast.Expr(value=apply_opts),
                ast.Return(value=_load("out")),
            ],
            returns=_load(record.name),
            doc=f"Build a {record.name} from its defaults with each option applied in order.",
        )

    def _with_method(self, record: AnnotatedRecord) -> List[ast.stmt]:
        loop = ast.For(
            target=_store("opt"),
            iter=_load("opts"),
            body=[ast.Expr(value=ast.Call(func=_load("opt"), args=[_load("self")], keywords=[]))],
            orelse=[],
            type_comment=None,
        )
        impl = _function(
            WITH_IMPL_NAME,
            _arguments(
                args=[ast.arg(arg="self", annotation=_load(record.name))],
                vararg=ast.arg(arg="opts", annotation=_load(OPT_TYPE_NAME)),
            ),
            [loop, ast.Return(value=_load("self"))],
            returns=_load(record.name),
            doc=f"Apply each option to this {record.name} in order and return it for chaining.",
        )
        return [impl, _bind_method(record.name, WITH_NAME, WITH_IMPL_NAME)]

    def _setter(self, record: AnnotatedRecord, field: FieldDescriptor) -> ast.stmt:
        closure = _function(
            "apply",
            _arguments(args=[ast.arg(arg="opts", annotation=_load(record.name))]),
            [
                ast.Assign(
                    targets=[_attribute("opts", field.name, ast.Store())],
                    value=_load("value"),
                    type_comment=None,
                )
            ],
            returns=ast.Constant(value=None),
        )
        return _function(
            field.name,
            _arguments(args=[ast.arg(arg="value", annotation=_type_expr(field.type_name))]),
            [closure, ast.Return(value=_load("apply"))],
            returns=_load(OPT_TYPE_NAME),
            doc=f"Set the value of the {record.name}.{field.name} field.",
        )

    def _stringifier(self, record: AnnotatedRecord, field: FieldDescriptor) -> List[ast.stmt]:
        value = _attribute("self", field.name)
        if field.type_name == "bool":
            rendered: ast.expr = ast.IfExp(
                test=value, body=ast.Constant(value="true"), orelse=ast.Constant(value="false")
            )
        else:
            fmt = "d" if field.type_name == "int" else ".1f"
            rendered = ast.JoinedStr(
                values=[
                    ast.FormattedValue(
                        value=value,
                        conversion=-1,
                        format_spec=ast.JoinedStr(values=[ast.Constant(value=fmt)]),
                    )
                ]
            )

        method = field.name + STR_SUFFIX
        impl_name = f"_{method}"
        impl = _function(
            impl_name,
            _arguments(args=[ast.arg(arg="self", annotation=_load(record.name))]),
            [ast.Return(value=rendered)],
            returns=_load("str"),
            doc=f"Return a string form of the {record.name}.{field.name} field.",
        )
        return [impl, _bind_method(record.name, method, impl_name)]


def stringifier_supported(field: FieldDescriptor) -> bool:
    """Only ``bool``, ``int`` and ``float`` fields get a ``<field>_str`` method."""
    return field.type_name in STRINGIFIED_TYPES


def _zero_literal(field: FieldDescriptor) -> str:
    return _ZERO_LITERALS.get(field.type_name, _FALLBACK_ZERO)


def _declared_names(stmt: ast.stmt) -> List[str]:
    if isinstance(stmt, ast.FunctionDef):
        return [stmt.name]
    if isinstance(stmt, ast.Assign):
        return [target.id for target in stmt.targets if isinstance(target, ast.Name)]
    return []


__all__ = [
    "DEFAULT_FUNC_NAME",
    "GENERATOR_NAME",
    "OPT_TYPE_NAME",
    "OptionsEmitter",
    "STRINGIFIED_TYPES",
    "WITH_NAME",
    "stringifier_supported",
]
