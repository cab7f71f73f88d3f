"""
Context expansion for search results.

Reference-valued context fields are replaced by short summaries of the
referenced entities, read from the same graph. Expansion depth is an
explicit limit: summaries produced at the last allowed level carry no
context of their own, so cyclic graphs cannot recurse.
"""

import logging
from typing import Any, Dict, List, Optional

from rdflib import Graph, URIRef

from ld_authority.consolidator import ResultConsolidator
from ld_authority.extractor import StatementExtractor
from ld_authority.field_map import FieldMap
from ld_authority.label_formatter import full_label
from ld_authority.language import LanguageResolver
from ld_authority.terms import PARSE_ERROR, ConsolidatedRecord, Value, has_error, is_blank, is_reference, to_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 1


class ContextExpander:
    """Renders the context fields of consolidated records."""

    def __init__(self, graph: Graph, field_map: FieldMap, resolver: LanguageResolver,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Args:
            graph: Graph the records were consolidated from
            field_map: Field map of the search, including its context fields
            resolver: Language filter for literal values
            max_depth: Number of reference levels to expand
        """
        self.graph = graph
        self.field_map = field_map
        self.resolver = resolver
        self.max_depth = max_depth
        self._extractors: Dict[int, StatementExtractor] = {}

    def expand(self, record: ConsolidatedRecord, depth: int = 0) -> Dict[str, Any]:
        """
        Render every context field of a record.

        Args:
            record: Consolidated record with raw context values
            depth: Expansion level of the record (0 for a search result)

        Returns:
            Context field name -> list of strings (literals, or bare
            identifiers when no reference resolved) or list of summaries
        """
        context = {}
        for name in self.field_map.context:
            # Blank nodes have no identity outside the response graph
            values = [v for v in record.context.get(name, []) if not is_blank(v)]
            if has_error(values):
                context[name] = [PARSE_ERROR]
            elif values and all(is_reference(v) for v in values):
                context[name] = self.expand_references(values, depth)
            else:
                context[name] = [to_text(v) for v in self.resolver.filter(values)]
        return context

    def expand_references(self, references: List[Value], depth: int = 0) -> List[Any]:
        """
        Summarize each distinct reference.

        An unresolvable reference becomes a placeholder ``{"uri": ...}``.
        When none resolves, the bare identifiers are returned instead.
        """
        unique = list(dict.fromkeys(references))
        if depth >= self.max_depth:
            return [str(ref) for ref in unique]

        summaries = []
        resolved = 0
        for ref in unique:
            summary = self.summarize(ref, depth + 1)
            if summary is None:
                summaries.append({"uri": str(ref)})
            else:
                summaries.append(summary)
                resolved += 1

        if resolved == 0:
            logger.debug(f"None of {len(unique)} context references resolved in graph")
            return [str(ref) for ref in unique]
        return summaries

    def summarize(self, reference: URIRef, depth: int) -> Optional[Dict[str, Any]]:
        """Summary of one referenced entity, or None when the graph says nothing about it."""
        extractor = self._extractor(depth)
        bindings = extractor.extract_subject(self.graph, reference)
        if not bindings:
            return None

        consolidator = ResultConsolidator(extractor.field_map, include_context=extractor.include_context,
                                          process_all=True)
        records = consolidator.consolidate(bindings, default_uri=str(reference))
        record = records[str(reference)]
        summary = {
            "uri": record.uri,
            "id": record.id,
            "label": full_label(self.resolver.filter(record.values("label")),
                                self.resolver.filter(record.values("altlabel"))),
        }
        if extractor.include_context:
            summary["context"] = self.expand(record, depth)
        return summary

    def _extractor(self, depth: int) -> StatementExtractor:
        extractor = self._extractors.get(depth)
        if extractor is None:
            sub_map = self.field_map.reduced()
            nested = depth < self.max_depth and self.field_map.supports_context
            if nested:
                sub_map.context = dict(self.field_map.context)
            extractor = StatementExtractor(sub_map, include_context=nested)
            self._extractors[depth] = extractor
        return extractor
