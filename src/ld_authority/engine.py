"""
Normalization engine: turns an authority graph into search results or a
single term record.

The engine performs no I/O. Each call is a pure function of the graph,
the field map and the RequestContext it is given.
"""

import logging
from typing import Any, Dict, List, Optional

from rdflib import Graph, URIRef

from ld_authority.consolidator import ResultConsolidator
from ld_authority.context_expander import DEFAULT_MAX_DEPTH, ContextExpander
from ld_authority.errors import InvalidConfiguration, TermNotFound
from ld_authority.extractor import StatementExtractor
from ld_authority.field_map import FieldMap
from ld_authority.label_formatter import full_label
from ld_authority.language import LanguageResolver, RequestContext
from ld_authority.sorter import SORT_KEY, ResultSorter
from ld_authority.terms import to_text

logger = logging.getLogger(__name__)


class NormalizationEngine:
    """Facade over extraction, consolidation, language, context, label and sort stages."""

    def __init__(self, max_context_depth: int = DEFAULT_MAX_DEPTH):
        self.max_context_depth = max_context_depth

    def search(self, graph: Graph, field_map: FieldMap, context: Optional[RequestContext] = None,
               sort_field: Optional[str] = None, authority: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Build ranked search results from a graph.

        Args:
            graph: Graph returned by the authority for the query
            field_map: Fields to extract; context fields are expanded
            context: Per-call settings (languages); defaults to no filtering
            sort_field: Field to order on; defaults to 'sort' when the field
                map has a sort predicate, otherwise results are not sorted
            authority: Authority name, used in error messages

        Returns:
            List of {uri, id, label[, context]} dicts

        Raises:
            InvalidConfiguration: If the field map lacks a label predicate or
                sort_field names a field the map does not have
        """
        context = context or RequestContext()
        if sort_field is None and field_map.supports_sort:
            sort_field = SORT_KEY
        if sort_field is not None and not field_map.has(sort_field):
            raise InvalidConfiguration(f"sort field '{sort_field}' is not configured")

        extractor = StatementExtractor(field_map, include_context=True, authority=authority)
        bindings = extractor.extract(graph)
        if not bindings:
            return []

        consolidator = ResultConsolidator(field_map, include_context=True)
        records = consolidator.consolidate(bindings)

        resolver = LanguageResolver(context)
        expander = ContextExpander(graph, field_map, resolver, max_depth=self.max_context_depth)

        results = []
        for record in ResultConsolidator.selected(records):
            sort_values = [to_text(v) for v in resolver.filter(record.values(sort_field))] if sort_field else []
            if sort_field and not sort_values:
                continue

            result = {
                "uri": record.uri,
                "id": record.id,
                "label": full_label(resolver.filter(record.values("label")),
                                    resolver.filter(record.values("altlabel"))),
            }
            if sort_field:
                result[SORT_KEY] = sort_values
            if field_map.supports_context:
                result["context"] = expander.expand(record)
            results.append(result)

        if sort_field:
            results = ResultSorter(SORT_KEY).sort(results)
        logger.info(f"Normalized {len(results)} search results from {len(records)} subjects")
        return results

    def find(self, graph: Graph, subject: str, field_map: FieldMap, context: Optional[RequestContext] = None,
             term_id: Optional[str] = None, url: Optional[str] = None,
             authority: Optional[str] = None) -> Dict[str, Any]:
        """
        Build the detailed record of a single term.

        Args:
            graph: Graph returned by the authority for the term
            subject: URI of the term within the graph
            field_map: Term fields (label, altlabel, id, sameas)
            context: Per-call settings; languages filter label and altlabel only
            term_id: Identifier used when the graph has no id value
            url: Request URL, reported when the term is not found
            authority: Authority name, used in error messages

        Returns:
            {uri, id, label, altlabel[, sameas], predicates}

        Raises:
            InvalidConfiguration: If the field map lacks a label predicate
            TermNotFound: If the graph has no statements about the subject
        """
        field_map.validate(authority)
        context = context or RequestContext()
        subject_ref = URIRef(subject)

        predicates = {}
        for predicate, value in graph.predicate_objects(subject_ref):
            predicates.setdefault(str(predicate), []).append(str(value))
        if not predicates:
            raise TermNotFound(url or subject)

        extractor = StatementExtractor(field_map, include_context=False, authority=authority)
        bindings = extractor.extract_subject(graph, subject_ref)
        consolidator = ResultConsolidator(field_map, include_context=False, process_all=True)
        record = consolidator.consolidate(bindings, default_uri=subject).get(str(subject_ref))

        resolver = LanguageResolver(context)
        labels = record.values("label") if record else []
        altlabels = record.values("altlabel") if record else []
        term = {
            "uri": str(subject_ref),
            "id": (record.id if record and record.id else None) or term_id or "",
            "label": [to_text(v) for v in resolver.filter(labels)],
            "altlabel": [to_text(v) for v in resolver.filter(altlabels)],
        }
        if field_map.has("sameas"):
            term["sameas"] = [to_text(v) for v in record.values("sameas")] if record else []
        term["predicates"] = predicates
        return term
