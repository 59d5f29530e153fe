"""Tests for tcogen.fields."""

from __future__ import annotations

import ast
import textwrap

from tcogen.fields import class_attributes, extract_fields
from tcogen.models import FieldDescriptor


def _class(source: str) -> ast.ClassDef:
    tree = ast.parse(textwrap.dedent(source))
    node = tree.body[-1]
    assert isinstance(node, ast.ClassDef)
    return node


def test_extract_fields_reads_names_types_and_defaults_in_order() -> None:
    node = _class(
        """
        class Opts:
            name: str
            age: int
            happy: Annotated[bool, 'default:"True"']
        """
    )

    assert extract_fields(node) == [
        FieldDescriptor(name="name", type_name="str"),
        FieldDescriptor(name="age", type_name="int"),
        FieldDescriptor(name="happy", type_name="bool", default="True"),
    ]


def test_extract_fields_quotes_string_defaults() -> None:
    node = _class(
        """
        class Opts:
            title: Annotated[str, 'default:"Hello \\\\"world\\\\""']
            label: typing.Annotated[str, 'json:"label" default:"x"']
        """
    )

    fields = extract_fields(node)

    assert fields[0].default == repr('Hello "world"')
    assert fields[1].default == "'x'"


def test_extract_fields_passes_non_string_defaults_through_verbatim() -> None:
    node = _class(
        """
        class Opts:
            ratio: Annotated[float, 'default:"1.5"']
            mode: Annotated[Mode, 'default:"Mode.DARK"']
            broken: Annotated[int, 'default:"not a number"']
        """
    )

    defaults = [field.default for field in extract_fields(node)]

    assert defaults == ["1.5", "Mode.DARK", "not a number"]


def test_extract_fields_ignores_defaults_on_composite_types() -> None:
    node = _class(
        """
        class Opts:
            published: Annotated[datetime.datetime, 'default:"now"']
            tags: Annotated[list[str], 'default:"[]"']
        """
    )

    fields = extract_fields(node)

    assert [field.type_name for field in fields] == ["datetime.datetime", "list[str]"]
    assert all(field.default is None for field in fields)


def test_extract_fields_uses_first_tag_defining_default() -> None:
    node = _class(
        """
        class Opts:
            count: Annotated[int, 'json:"count"', 'default:"3"', 'default:"4"']
        """
    )

    assert extract_fields(node)[0].default == "3"


def test_extract_fields_skips_unnamed_members_and_pseudo_fields() -> None:
    node = _class(
        """
        class Opts:
            \"\"\"Docstring.\"\"\"

            registry: ClassVar[dict] = {}
            seed: dataclasses.InitVar[int] = 0
            _: KW_ONLY
            plain = 5

            def helper(self) -> None:
                pass

            name: str
        """
    )

    assert [field.name for field in extract_fields(node)] == ["name"]


def test_extract_fields_records_own_values_and_init_flags() -> None:
    node = _class(
        """
        class Opts:
            size: int = 3
            items: list[str] = field(default_factory=list)
            label: str = field(repr=False)
            cache: dict = field(init=False, default_factory=dict)
        """
    )

    fields = {field.name: field for field in extract_fields(node)}

    assert fields["size"].has_value is True
    assert fields["items"].has_value is True
    assert fields["label"].has_value is False
    assert fields["cache"].init is False
    assert fields["size"].init is True


def test_extract_fields_resolves_string_annotations() -> None:
    node = _class(
        """
        class Opts:
            count: "int"
            parent: "Optional[Opts]"
        """
    )

    assert [field.type_name for field in extract_fields(node)] == ["int", "Optional[Opts]"]


def test_class_attributes_collects_body_bindings() -> None:
    node = _class(
        """
        class Opts:
            name: str
            flag = True
            a, b = 1, 2

            def render(self) -> str:
                return ""
        """
    )

    assert class_attributes(node) == frozenset({"name", "flag", "a", "b", "render"})
