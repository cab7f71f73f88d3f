"""
Authority configuration: the search and term sections of an authority's
YAML file.
"""

import logging
from typing import Any, Dict, Optional

from ld_authority.errors import InvalidAuthority, InvalidConfiguration
from ld_authority.field_map import FieldMap
from ld_authority.iri_template import UrlConfig, build_url
from ld_authority.language import normalize_languages

logger = logging.getLogger(__name__)


class _SectionConfig:
    """Settings shared by the search and term sections."""

    section = ""

    def __init__(self, config: Optional[Dict[str, Any]], authority_name: str):
        self.authority_name = authority_name
        self.config = config or {}
        self.results = self.config.get("results") or {}
        self.prefixes = self.config.get("prefixes") or {}
        self.subauthorities = self.config.get("subauthorities") or {}
        self.replacement_patterns = self.config.get("qa_replacement_patterns") or {}
        self._url_config = None

    @property
    def supported(self) -> bool:
        return bool(self.config)

    @property
    def language(self):
        return normalize_languages(self.config.get("language"))

    @property
    def url_config(self) -> UrlConfig:
        if self._url_config is None:
            if not self.supported:
                raise InvalidConfiguration(f"{self.section} is not configured for LOD authority {self.authority_name}")
            self._url_config = UrlConfig.from_config(self.config.get("url"))
        return self._url_config

    def has_subauthorities(self) -> bool:
        return bool(self.subauthorities)

    def subauthority(self, name: Optional[str]) -> bool:
        return name is not None and name in self.subauthorities

    def check_subauthority(self, subauth: Optional[str]) -> None:
        if subauth is not None and not self.subauthority(subauth):
            raise InvalidAuthority(f"Unable to initialize linked data {self.section} sub-authority {subauth}")

    def _substitutions(self, replacements: Optional[Dict[str, Any]], subauth: Optional[str]) -> Dict[str, Any]:
        substitutions = dict(replacements or {})
        if subauth is not None:
            pattern = self.replacement_patterns.get("subauth", "subauth")
            substitutions[pattern] = self.subauthorities[subauth]
        return substitutions


class SearchConfig(_SectionConfig):
    """The ``search`` section of an authority configuration."""

    section = "search"

    @property
    def context(self) -> Dict[str, str]:
        return self.config.get("context") or {}

    @property
    def results_label_predicate(self) -> Optional[str]:
        return self.results.get("label_predicate")

    @property
    def results_sort_predicate(self) -> Optional[str]:
        return self.results.get("sort_predicate")

    @property
    def supports_sort(self) -> bool:
        return self.results_sort_predicate is not None

    @property
    def supports_context(self) -> bool:
        return bool(self.context)

    @property
    def select_results_based_on_predicate(self) -> bool:
        return self.results.get("selector_predicate") is not None

    def field_map(self, include_sort: bool = True, include_context: bool = True) -> FieldMap:
        field_map = FieldMap.from_config(
            self.results,
            context=self.context if include_context else None,
            prefixes=self.prefixes,
            include_sort=include_sort,
        )
        field_map.validate(self.authority_name)
        return field_map

    def url_with_replacements(self, query: str, subauth: Optional[str] = None,
                              replacements: Optional[Dict[str, Any]] = None) -> str:
        substitutions = self._substitutions(replacements, subauth)
        substitutions[self.replacement_patterns.get("query", "query")] = query
        return build_url(self.url_config, substitutions)


class TermConfig(_SectionConfig):
    """The ``term`` section of an authority configuration."""

    section = "term"

    @property
    def term_id(self) -> str:
        return str(self.config.get("term_id", "ID")).upper()

    @property
    def term_id_expects_id(self) -> bool:
        return self.term_id == "ID"

    @property
    def term_id_expects_uri(self) -> bool:
        return self.term_id == "URI"

    @property
    def subject_prefix(self) -> Optional[str]:
        return self.config.get("subject_prefix")

    def field_map(self) -> FieldMap:
        field_map = FieldMap.from_config(self.results, prefixes=self.prefixes,
                                         include_sort=False, include_selector=False)
        if not field_map.has("label"):
            raise InvalidConfiguration(
                f"required label_predicate is missing in term configuration for LOD authority {self.authority_name}")
        return field_map

    def url_with_replacements(self, term_id: str, subauth: Optional[str] = None,
                              replacements: Optional[Dict[str, Any]] = None) -> str:
        substitutions = self._substitutions(replacements, subauth)
        substitutions[self.replacement_patterns.get("term_id", "term_id")] = term_id
        return build_url(self.url_config, substitutions)

    def subject_uri(self, term_id: str, url: str) -> str:
        """URI of the term inside the fetched graph."""
        if self.term_id_expects_uri:
            return term_id
        if self.subject_prefix:
            return f"{self.subject_prefix}{term_id}"
        return url


class AuthorityConfig:
    """Parsed configuration for one linked-data authority."""

    def __init__(self, name: str, config: Dict[str, Any]):
        self.name = name
        self.config = config or {}
        self.search = SearchConfig(self.config.get("search"), name)
        self.term = TermConfig(self.config.get("term"), name)
        if not self.search.supported and not self.term.supported:
            logger.warning(f"Authority '{name}' configures neither search nor term")
