"""
Field maps bind logical result fields (label, altlabel, id, sort, ...) to
predicate expressions in the authority graph.

A predicate expression is either a single IRI or a '/'-separated sequence
of steps, each step an IRI in angle brackets or a prefixed name:

    http://www.w3.org/2004/02/skos/core#prefLabel
    <http://www.loc.gov/mads/rdf/v1#identifiesRWO>/schema:name
    madsrdf:identifiesRWO/madsrdf:birthDate/schema:label

Sequences are evaluated as rdflib property paths.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from rdflib import OWL, RDF, RDFS, SKOS, XSD, URIRef
from rdflib.namespace import DC, DCTERMS, FOAF
from rdflib.paths import Path, SequencePath

from ld_authority.errors import InvalidConfiguration, PathSyntaxError

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = {
    "rdf": str(RDF),
    "rdfs": str(RDFS),
    "owl": str(OWL),
    "skos": str(SKOS),
    "xsd": str(XSD),
    "dc": str(DC),
    "dcterms": str(DCTERMS),
    "foaf": str(FOAF),
    "schema": "http://schema.org/",
    "madsrdf": "http://www.loc.gov/mads/rdf/v1#",
}

# Bare IRIs may contain '/', so they are recognised before splitting into steps
_IRI_SCHEMES = ("urn:", "info:", "tag:", "mailto:")

# results config key -> logical field name
RESULT_PREDICATES = {
    "label_predicate": "label",
    "altlabel_predicate": "altlabel",
    "id_predicate": "id",
    "sort_predicate": "sort",
    "selector_predicate": "selector",
    "sameas_predicate": "sameas",
}

SUMMARY_FIELDS = ("label", "altlabel", "id")


def _is_bare_iri(expression: str) -> bool:
    return "://" in expression or expression.startswith(_IRI_SCHEMES)


def parse_predicate(expression: str, prefixes: Optional[Dict[str, str]] = None) -> Union[URIRef, Path]:
    """
    Parse a predicate expression into an rdflib predicate or property path.

    Args:
        expression: The expression to parse
        prefixes: Prefix name -> namespace IRI, merged over DEFAULT_PREFIXES

    Returns:
        A URIRef for a single step, a SequencePath for several

    Raises:
        PathSyntaxError: If the expression is empty, has an unbalanced angle
            bracket, an empty step or an unknown prefix
    """
    if expression is None or not str(expression).strip():
        raise PathSyntaxError("empty predicate expression")
    expression = str(expression).strip()
    if "<" not in expression and ">" not in expression and _is_bare_iri(expression):
        return URIRef(expression)

    namespaces = dict(DEFAULT_PREFIXES)
    namespaces.update(prefixes or {})

    steps = []
    current = ""
    in_iri = False
    for ch in expression:
        if ch == "<":
            if in_iri or current.strip():
                raise PathSyntaxError(f"unexpected '<' in {expression!r}")
            in_iri = True
            current = ch
        elif ch == ">":
            if not in_iri:
                raise PathSyntaxError(f"unexpected '>' in {expression!r}")
            in_iri = False
            current += ch
        elif ch == "/" and not in_iri:
            steps.append(current.strip())
            current = ""
        else:
            current += ch
    if in_iri:
        raise PathSyntaxError(f"unterminated '<' in {expression!r}")
    steps.append(current.strip())

    terms = [_parse_step(step, namespaces, expression) for step in steps]
    if len(terms) == 1:
        return terms[0]
    return SequencePath(*terms)


def _parse_step(step: str, namespaces: Dict[str, str], expression: str) -> URIRef:
    if not step:
        raise PathSyntaxError(f"empty step in {expression!r}")
    if step.startswith("<"):
        iri = step[1:-1].strip()
        if not iri:
            raise PathSyntaxError(f"empty IRI in {expression!r}")
        return URIRef(iri)
    if ":" not in step:
        raise PathSyntaxError(f"step {step!r} is neither an IRI nor a prefixed name")
    prefix, local = step.split(":", 1)
    if prefix not in namespaces:
        raise PathSyntaxError(f"unknown prefix {prefix!r} in {expression!r}")
    return URIRef(namespaces[prefix] + local)


@dataclass
class FieldMap:
    """
    Logical field name -> predicate expression, partitioned into required,
    optional and context fields.

    Required: label. Optional: altlabel, id, sort, selector, sameas.
    Context: any name chosen by the authority configuration.
    """
    required: Dict[str, str] = field(default_factory=dict)
    optional: Dict[str, str] = field(default_factory=dict)
    context: Dict[str, str] = field(default_factory=dict)
    prefixes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, results: Dict[str, Any], context: Optional[Dict[str, str]] = None,
                    prefixes: Optional[Dict[str, str]] = None, include_sort: bool = True,
                    include_selector: bool = True) -> "FieldMap":
        """
        Build a field map from the ``results`` section of an authority config.

        Args:
            results: Mapping of ``<field>_predicate`` keys to expressions
            context: Context field name -> expression
            prefixes: Extra prefixes used by the expressions
            include_sort: Whether to carry the sort predicate
            include_selector: Whether to carry the selector predicate

        Returns:
            FieldMap (not yet validated)
        """
        results = results or {}
        required = {}
        optional = {}
        for key, name in RESULT_PREDICATES.items():
            value = results.get(key)
            if value is None:
                continue
            if name == "sort" and not include_sort:
                continue
            if name == "selector" and not include_selector:
                continue
            if name == "label":
                required[name] = value
            else:
                optional[name] = value
        return cls(
            required=required,
            optional=optional,
            context=dict(context or {}),
            prefixes=dict(prefixes or {}),
        )

    def validate(self, authority: Optional[str] = None) -> None:
        """Raise InvalidConfiguration unless a label predicate is configured."""
        if not self.required.get("label"):
            where = f" for LOD authority {authority}" if authority else ""
            raise InvalidConfiguration(f"required label_predicate is missing in search configuration{where}")

    def has(self, name: str) -> bool:
        return name in self.required or name in self.optional

    def predicate(self, name: str) -> Optional[str]:
        return self.required.get(name, self.optional.get(name))

    def result_fields(self) -> Dict[str, str]:
        fields = dict(self.required)
        fields.update(self.optional)
        return fields

    @property
    def supports_sort(self) -> bool:
        return "sort" in self.optional

    @property
    def supports_context(self) -> bool:
        return bool(self.context)

    @property
    def selects_results(self) -> bool:
        return "selector" in self.optional

    def reduced(self) -> "FieldMap":
        """Field map for one-level summaries: label, altlabel and id only."""
        fields = {name: expr for name, expr in self.result_fields().items() if name in SUMMARY_FIELDS}
        required = {"label": fields.pop("label")} if "label" in fields else {}
        return FieldMap(required=required, optional=fields, prefixes=dict(self.prefixes))

    def compile(self, expression: str) -> Union[URIRef, Path]:
        return parse_predicate(expression, self.prefixes)
