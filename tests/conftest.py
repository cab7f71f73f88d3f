"""Shared graphs, field maps and fakes for the ld_authority tests."""

import pytest

from ld_authority.config_loader import DefaultLanguage
from ld_authority.fetcher import parse_graph
from ld_authority.field_map import FieldMap

SKOS = "http://www.w3.org/2004/02/skos/core#"
DCTERMS = "http://purl.org/dc/terms/"
VIVO = "http://vivoweb.org/ontology/core#"
SCHEMA = "http://schema.org/"
EX = "http://example.org/ns#"

PREFIXES = """
@prefix skos: <http://www.w3.org/2004/02/skos/core#> .
@prefix dcterms: <http://purl.org/dc/terms/> .
@prefix vivo: <http://vivoweb.org/ontology/core#> .
@prefix schema: <http://schema.org/> .
@prefix ex: <http://example.org/ns#> .
"""

OCLC_THREE_RESULTS = PREFIXES + """
<http://id.worldcat.org/fast/5140> skos:prefLabel "Cornell, Joseph" ;
    dcterms:identifier "5140" ;
    vivo:rank "2" .
<http://id.worldcat.org/fast/557490> skos:prefLabel "New York State School of Industrial and Labor Relations" ;
    dcterms:identifier "557490" ;
    vivo:rank "3" .
<http://id.worldcat.org/fast/530369> skos:prefLabel "Cornell University" ;
    dcterms:identifier "530369" ;
    vivo:rank "1" .
[] skos:prefLabel "Anonymous match" ;
    vivo:rank "0" .
<http://id.worldcat.org/fast/ontology/1.0/#fast> skos:prefLabel "FAST" .
"""

NO_RESULTS = PREFIXES + """
<http://experimental.worldcat.org/fast/search> dcterms:description "supercalifragilisticexpialidocious" .
"""

LANG_SEARCH_ENFR = PREFIXES + """
<http://aims.fao.org/aos/agrovoc/c_9513> skos:prefLabel "buttermilk"@en, "Babeurre"@fr ;
    skos:altLabel "yummy"@en, "délicieux"@fr ;
    vivo:rank "1" .
<http://aims.fao.org/aos/agrovoc/c_9515> skos:prefLabel "condensed milk"@en, "lait condensé"@fr ;
    skos:altLabel "creamy"@en, "crémeux"@fr ;
    vivo:rank "2" .
<http://aims.fao.org/aos/agrovoc/c_9516> skos:prefLabel "dried milk"@en, "lait en poudre"@fr ;
    skos:altLabel "powdery"@en, "poudreux"@fr ;
    vivo:rank "3" .
"""

LANG_SEARCH_ENFRDE = PREFIXES + """
<http://aims.fao.org/aos/agrovoc/c_9513> skos:prefLabel "buttermilk"@en, "Babeurre"@fr, "Buttermilch"@de ;
    skos:altLabel "yummy"@en, "délicieux"@fr, "lecker"@de ;
    vivo:rank "1" .
"""

LANG_TERM_ENFR = PREFIXES + """
<http://aims.fao.org/aos/agrovoc/c_9513> skos:prefLabel "buttermilk"@en, "Babeurre"@fr ;
    skos:altLabel "yummy"@en, "délicieux"@fr ;
    skos:inScheme <http://aims.fao.org/aos/agrovoc> .
"""

OCLC_TERM = PREFIXES + """
<http://id.worldcat.org/fast/530369> a schema:Organization ;
    dcterms:identifier "530369" ;
    skos:prefLabel "Cornell University" ;
    skos:altLabel "Ithaca (N.Y.). Cornell University", "Kornelʹskii universitet", "Kʻang-nai-erh ta hsüeh" ;
    schema:sameAs <http://id.loc.gov/authorities/names/n79021621>, <https://viaf.org/viaf/126293486> ;
    skos:inScheme <http://id.worldcat.org/fast/ontology/1.0/#fast>, <http://id.worldcat.org/fast/ontology/1.0/#facet-Corporate> ;
    schema:name "Cornell University" .
"""

CONTEXT_GRAPH = PREFIXES + """
<http://example.org/person/1> skos:prefLabel "Twain, Mark" ;
    dcterms:identifier "p1" ;
    vivo:rank "1" ;
    ex:birthDate "1835"@en, "en 1835"@fr ;
    ex:knows <http://example.org/person/2>, <http://example.org/person/3> ;
    ex:influencedBy <http://example.org/person/404>, <http://example.org/person/405> ;
    ex:occupation <http://example.org/occupation/writer>, <http://example.org/person/406> .
<http://example.org/person/2> skos:prefLabel "Howells, William Dean" ;
    dcterms:identifier "p2" ;
    ex:knows <http://example.org/person/1> .
<http://example.org/person/3> skos:prefLabel "Harte, Bret" ;
    skos:altLabel "Harte, Francis Brett" .
<http://example.org/occupation/writer> skos:prefLabel "Writer"@en, "Écrivain"@fr .
"""


def graph_from(turtle):
    return parse_graph(turtle, "turtle")


@pytest.fixture
def search_map():
    return FieldMap(
        required={"label": SKOS + "prefLabel"},
        optional={"altlabel": SKOS + "altLabel", "id": DCTERMS + "identifier", "sort": VIVO + "rank"},
    )


@pytest.fixture
def term_map():
    return FieldMap(
        required={"label": SKOS + "prefLabel"},
        optional={"altlabel": SKOS + "altLabel", "id": DCTERMS + "identifier", "sameas": SCHEMA + "sameAs"},
    )


@pytest.fixture
def context_map():
    return FieldMap(
        required={"label": "skos:prefLabel"},
        optional={"altlabel": "skos:altLabel", "id": "dcterms:identifier", "sort": "vivo:rank"},
        context={
            "knows": "ex:knows",
            "influenced_by": "ex:influencedBy",
            "occupation": "ex:occupation",
            "birth_date": "ex:birthDate",
            "broken": "ex:knows/nope:label",
            "none": "ex:nothing",
        },
        prefixes={"ex": EX, "vivo": VIVO},
    )


class FakeFetcher:
    """Serves prepared graphs by URL and records the URLs requested."""

    def __init__(self, responses=None, on_fetch=None):
        self.responses = responses or {}
        self.on_fetch = on_fetch
        self.urls = []

    def fetch(self, url):
        from ld_authority.errors import TermNotFound

        self.urls.append(url)
        if self.on_fetch:
            self.on_fetch(url)
        if url not in self.responses:
            raise TermNotFound(url)
        return graph_from(self.responses[url])


@pytest.fixture
def languages():
    return DefaultLanguage("en")
