"""
Statement extraction: reduce a graph to the bindings named by a field map.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from rdflib import Graph, URIRef
from rdflib.paths import Path
from rdflib.term import Node

from ld_authority.errors import PathSyntaxError
from ld_authority.field_map import FieldMap
from ld_authority.terms import Binding, FieldError, is_blank

logger = logging.getLogger(__name__)

CONTEXT_PREFIX = "context:"


def context_field(name: str) -> str:
    """Binding field name used for a context field."""
    return f"{CONTEXT_PREFIX}{name}"


class StatementExtractor:
    """Filters a graph down to the statements relevant to a field map."""

    def __init__(self, field_map: FieldMap, include_context: bool = True, authority: Optional[str] = None):
        """
        Args:
            field_map: Fields to extract
            include_context: Whether to extract the field map's context fields
            authority: Authority name, used in configuration error messages

        Raises:
            InvalidConfiguration: If the field map has no label predicate
        """
        field_map.validate(authority)
        self.field_map = field_map
        self.include_context = include_context
        self._compiled = self._compile()

    def _compile(self) -> Dict[str, Union[URIRef, Path, FieldError]]:
        expressions = dict(self.field_map.result_fields())
        if self.include_context:
            for name, expression in self.field_map.context.items():
                expressions[context_field(name)] = expression

        compiled = {}
        for name, expression in expressions.items():
            try:
                compiled[name] = self.field_map.compile(expression)
            except PathSyntaxError as e:
                logger.warning(f"Unable to parse expression for field '{name}': {e}")
                compiled[name] = FieldError(field=name, expression=str(expression), message=str(e))
        return compiled

    def subjects(self, graph: Graph) -> List[Node]:
        """Distinct non-blank subjects of the graph, in first-seen order."""
        seen = {}
        for subject in graph.subjects():
            if is_blank(subject) or subject in seen:
                continue
            seen[subject] = True
        return list(seen)

    def extract(self, graph: Graph, subjects: Optional[Iterable[Node]] = None) -> List[Binding]:
        """
        Extract one binding per matching statement.

        Args:
            graph: Graph to read from
            subjects: Restrict extraction to these subjects (default: every
                non-blank subject of the graph)

        Returns:
            Bindings ordered by subject, then field, then statement order.
            A field whose expression failed to parse yields a single
            FieldError binding for each subject.
        """
        if subjects is None:
            subjects = self.subjects(graph)

        bindings = []
        for subject in subjects:
            if is_blank(subject):
                continue
            bindings.extend(self.extract_subject(graph, subject))
        logger.debug(f"Extracted {len(bindings)} bindings for {len(self._compiled)} fields")
        return bindings

    def extract_subject(self, graph: Graph, subject: Node) -> List[Binding]:
        """Bindings for a single subject; failures stay confined to their field."""
        subject_bindings = []
        has_data = False
        for name, predicate in self._compiled.items():
            if isinstance(predicate, FieldError):
                subject_bindings.append(Binding(subject, name, predicate))
                continue
            for value in graph.objects(subject, predicate):
                has_data = True
                subject_bindings.append(Binding(subject, name, value))
        # A subject with nothing but parse errors has no data of its own
        return subject_bindings if has_data else []
