"""
Typed building blocks shared by the normalization pipeline.

Graph values are rdflib terms: ``Literal`` for text values (with optional
language tag and datatype), ``URIRef`` for references and ``BNode`` for
anonymous subjects. The dataclasses here wrap those terms with the
bookkeeping the pipeline needs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from rdflib import BNode, Literal, URIRef
from rdflib.term import Node

PARSE_ERROR = "PARSE ERROR"


@dataclass(frozen=True)
class FieldError:
    """Outcome of a field whose predicate expression could not be evaluated."""
    field: str
    expression: str
    message: str

    def __str__(self):
        return PARSE_ERROR


Value = Union[Node, FieldError]


@dataclass(frozen=True)
class Binding:
    """One (subject, field, value) match produced by the extractor."""
    subject: Node
    field: str
    value: Value


@dataclass
class ConsolidatedRecord:
    """All values bound to one subject, grouped by field name."""
    uri: str
    id: str = ""
    fields: Dict[str, List[Value]] = field(default_factory=dict)
    context: Dict[str, List[Value]] = field(default_factory=dict)
    selected: bool = False

    def values(self, name: str) -> List[Value]:
        return self.fields.get(name, [])


def is_blank(term) -> bool:
    return isinstance(term, BNode)


def is_reference(value) -> bool:
    return isinstance(value, URIRef)


def is_literal(value) -> bool:
    return isinstance(value, Literal)


def has_error(values: List[Value]) -> bool:
    return any(isinstance(v, FieldError) for v in values)


def to_text(value: Value) -> str:
    """Render a value as the plain string emitted to clients."""
    if isinstance(value, FieldError):
        return PARSE_ERROR
    return str(value)
