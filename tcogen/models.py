"""Core data models shared across tcogen components."""

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple


@dataclass
class CommentGroup:
    """Run of standalone comment lines on consecutive source lines."""

    start_line: int
    end_line: int
    texts: List[str] = field(default_factory=list)


@dataclass
class SourceFile:
    """Parsed view of one input module."""

    path: Path
    module_name: str
    is_package: bool
    tree: ast.Module
    comments: List[CommentGroup] = field(default_factory=list)
    doc_comments: Dict[ast.stmt, CommentGroup] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldDescriptor:
    """Name, type and default metadata for one record field."""

    name: str
    type_name: str
    default: Optional[str] = None
    has_value: bool = False
    init: bool = True


@dataclass
class AnnotatedRecord:
    """A dataclass flagged for generation by the marker comment."""

    name: str
    fields: List[FieldDescriptor]
    attributes: FrozenSet[str] = frozenset()


@dataclass
class GeneratedFile:
    """Synthesized companion module, alive until rendered and written."""

    path: Path
    header: Tuple[str, ...]
    imports: List[ast.stmt] = field(default_factory=list)
    declarations: List[ast.stmt] = field(default_factory=list)
    records: List[str] = field(default_factory=list)
