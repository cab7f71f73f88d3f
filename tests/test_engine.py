import pytest

from ld_authority.engine import NormalizationEngine
from ld_authority.errors import InvalidConfiguration, TermNotFound
from ld_authority.fetcher import new_graph
from ld_authority.field_map import FieldMap
from ld_authority.language import RequestContext

from conftest import (
    LANG_SEARCH_ENFR,
    LANG_SEARCH_ENFRDE,
    LANG_TERM_ENFR,
    NO_RESULTS,
    OCLC_TERM,
    OCLC_THREE_RESULTS,
    PREFIXES,
    SKOS,
    graph_from,
)

BUTTERMILK = "http://aims.fao.org/aos/agrovoc/c_9513"


@pytest.fixture
def engine():
    return NormalizationEngine()


class TestSearch:
    def test_results_are_ranked(self, engine, search_map):
        results = engine.search(graph_from(OCLC_THREE_RESULTS), search_map)
        assert results == [
            {"uri": "http://id.worldcat.org/fast/530369", "id": "530369", "label": "Cornell University"},
            {"uri": "http://id.worldcat.org/fast/5140", "id": "5140", "label": "Cornell, Joseph"},
            {"uri": "http://id.worldcat.org/fast/557490", "id": "557490",
             "label": "New York State School of Industrial and Labor Relations"},
        ]

    def test_no_matching_subjects(self, engine, search_map):
        assert engine.search(graph_from(NO_RESULTS), search_map) == []

    def test_empty_graph(self, engine, search_map):
        assert engine.search(new_graph(), search_map) == []

    def test_without_sort_keeps_graph_order(self, engine):
        field_map = FieldMap(required={"label": SKOS + "prefLabel"})
        results = engine.search(graph_from(OCLC_THREE_RESULTS), field_map)
        assert [r["label"] for r in results] == [
            "Cornell, Joseph",
            "New York State School of Industrial and Labor Relations",
            "Cornell University",
            "FAST",
        ]

    def test_explicit_sort_field(self, engine):
        field_map = FieldMap(required={"label": SKOS + "prefLabel"})
        results = engine.search(graph_from(OCLC_THREE_RESULTS), field_map, sort_field="label")
        assert [r["label"] for r in results][:2] == ["Cornell University", "Cornell, Joseph"]
        assert all("sort" not in r for r in results)

    def test_unknown_sort_field(self, engine, search_map):
        with pytest.raises(InvalidConfiguration, match="sort field 'rank'"):
            engine.search(graph_from(OCLC_THREE_RESULTS), search_map, sort_field="rank")

    def test_missing_label_predicate(self, engine):
        with pytest.raises(InvalidConfiguration, match="LOD authority LOD_NO_LABEL"):
            engine.search(graph_from(OCLC_THREE_RESULTS), FieldMap(), authority="LOD_NO_LABEL")

    def test_selector_predicate(self, engine):
        graph = graph_from("""
            @prefix skos: <http://www.w3.org/2004/02/skos/core#> .
            @prefix ex: <http://example.org/ns#> .
            <http://example.org/a> skos:prefLabel "kept" ; ex:isResult "true" .
            <http://example.org/b> skos:prefLabel "dropped" .
        """)
        field_map = FieldMap(required={"label": "skos:prefLabel"}, optional={"selector": "ex:isResult"},
                             prefixes={"ex": "http://example.org/ns#"})
        assert [r["label"] for r in engine.search(graph, field_map)] == ["kept"]

    def test_labels_without_language(self, engine, search_map):
        results = engine.search(graph_from(LANG_SEARCH_ENFR), search_map)
        assert len(results) == 3
        assert results[0]["label"] == "[buttermilk, Babeurre] (yummy, délicieux)"

    def test_labels_in_default_language(self, engine, search_map):
        context = RequestContext.build(None, None, "en")
        results = engine.search(graph_from(LANG_SEARCH_ENFR), search_map, context)
        assert [r["label"] for r in results] == [
            "buttermilk (yummy)", "condensed milk (creamy)", "dried milk (powdery)"]

    def test_authority_language_over_default(self, engine, search_map):
        context = RequestContext.build(None, ["fr"], "en")
        results = engine.search(graph_from(LANG_SEARCH_ENFR), search_map, context)
        assert results[0]["label"] == "Babeurre (délicieux)"

    def test_explicit_language_over_authority(self, engine, search_map):
        context = RequestContext.build("fr", ["en"], "en")
        results = engine.search(graph_from(LANG_SEARCH_ENFR), search_map, context)
        assert results[0]["label"] == "Babeurre (délicieux)"

    def test_multiple_languages(self, engine, search_map):
        context = RequestContext.build(None, ["en", "fr"], None)
        results = engine.search(graph_from(LANG_SEARCH_ENFRDE), search_map, context)
        assert results[0]["label"] == "[buttermilk, Babeurre] (yummy, délicieux)"

    def test_unmatched_language_falls_back(self, engine, search_map):
        context = RequestContext.build("ja")
        results = engine.search(graph_from(LANG_SEARCH_ENFR), search_map, context)
        assert results[0]["label"] == "[buttermilk, Babeurre] (yummy, délicieux)"

    def test_language_filter_keeps_label_order(self, engine, search_map):
        graph = graph_from(PREFIXES + """
            <http://example.org/a> skos:prefLabel "Alpha", "Beta"@en, "Gamma"@fr ;
                vivo:rank "1" .
        """)
        results = engine.search(graph, search_map, RequestContext.build("en"))
        assert results[0]["label"] == "[Alpha, Beta]"


class TestFind:
    def test_term(self, engine, term_map):
        term = engine.find(graph_from(OCLC_TERM), "http://id.worldcat.org/fast/530369", term_map)

        assert term["uri"] == "http://id.worldcat.org/fast/530369"
        assert term["id"] == "530369"
        assert term["label"] == ["Cornell University"]
        assert term["altlabel"] == ["Ithaca (N.Y.). Cornell University", "Kornelʹskii universitet",
                                    "Kʻang-nai-erh ta hsüeh"]
        assert term["sameas"] == ["http://id.loc.gov/authorities/names/n79021621",
                                  "https://viaf.org/viaf/126293486"]
        assert list(term) == ["uri", "id", "label", "altlabel", "sameas", "predicates"]

    def test_predicates_index(self, engine, term_map):
        term = engine.find(graph_from(OCLC_TERM), "http://id.worldcat.org/fast/530369", term_map)
        predicates = term["predicates"]

        assert len(predicates) == 7
        assert predicates["http://www.w3.org/1999/02/22-rdf-syntax-ns#type"] == ["http://schema.org/Organization"]
        assert predicates["http://www.w3.org/2004/02/skos/core#inScheme"] == [
            "http://id.worldcat.org/fast/ontology/1.0/#fast",
            "http://id.worldcat.org/fast/ontology/1.0/#facet-Corporate",
        ]

    def test_language_filters_labels_not_predicates(self, engine, term_map):
        term = engine.find(graph_from(LANG_TERM_ENFR), BUTTERMILK, term_map, RequestContext.build("fr"))

        assert term["label"] == ["Babeurre"]
        assert term["altlabel"] == ["délicieux"]
        assert term["predicates"][SKOS + "prefLabel"] == ["buttermilk", "Babeurre"]

    def test_id_falls_back_to_term_id(self, engine, term_map):
        term = engine.find(graph_from(LANG_TERM_ENFR), BUTTERMILK, term_map, term_id="c_9513")
        assert term["id"] == "c_9513"
        assert term["sameas"] == []

    def test_term_without_labels(self, engine, term_map):
        graph = graph_from(f"<{BUTTERMILK}> <{SKOS}inScheme> <http://aims.fao.org/aos/agrovoc> .")
        term = engine.find(graph, BUTTERMILK, term_map)
        assert term["label"] == []
        assert term["altlabel"] == []
        assert term["id"] == ""

    def test_not_found_reports_url(self, engine, term_map):
        url = "http://id.worldcat.org/fast/FAKE_ID"
        with pytest.raises(TermNotFound) as e:
            engine.find(new_graph(), "http://id.worldcat.org/fast/FAKE_ID", term_map, url=url)
        assert str(e.value) == f"{url} Not Found - Term may not exist at LOD Authority."
        assert e.value.url == url

    def test_configuration_checked_before_data(self, engine):
        with pytest.raises(InvalidConfiguration, match="LOD authority LOD_NO_LABEL"):
            engine.find(new_graph(), "http://example.org/a", FieldMap(), authority="LOD_NO_LABEL")

    def test_not_found_for_other_subject(self, engine, term_map):
        with pytest.raises(TermNotFound):
            engine.find(graph_from(OCLC_TERM), "http://id.worldcat.org/fast/5140", term_map)
