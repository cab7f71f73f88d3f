"""
Authorities: the registry of named authorities and the generic
linked-data authority that searches and looks up terms through the
normalization engine.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Type

from ld_authority.authority_config import AuthorityConfig
from ld_authority.config_loader import DefaultLanguage, default_language
from ld_authority.engine import NormalizationEngine
from ld_authority.errors import InvalidAuthority
from ld_authority.fetcher import GraphFetcher
from ld_authority.language import RequestContext

logger = logging.getLogger(__name__)

_authorities: Dict[str, Type["Authority"]] = {}


def authorities() -> List[Type["Authority"]]:
    """All registered authority classes."""
    return list(_authorities.values())


def register(name: str, klass: Type["Authority"]) -> None:
    _authorities[str(name)] = klass


def class_for(name: str) -> Type["Authority"]:
    """
    Look up a registered authority class.

    Raises:
        InvalidAuthority: If nothing is registered under the name
    """
    try:
        return _authorities[str(name)]
    except KeyError:
        raise InvalidAuthority(f"{name} is not a registered authority") from None


class Authority:
    """
    Base class for all authorities. Subclasses provide all, find and search.
    """

    def all(self):
        raise NotImplementedError(f"{type(self).__name__}#all is unimplemented.")

    def find(self, id, **kwargs):
        raise NotImplementedError(f"{type(self).__name__}#find is unimplemented.")

    def search(self, query, **kwargs):
        raise NotImplementedError(f"{type(self).__name__}#search is unimplemented.")


class LinkedDataAuthority(Authority):
    """An authority described by a YAML configuration and served as RDF."""

    def __init__(self, name: str, configs: Dict[str, Dict[str, Any]], fetcher: Optional[GraphFetcher] = None,
                 engine: Optional[NormalizationEngine] = None, languages: Optional[DefaultLanguage] = None):
        """
        Args:
            name: Authority name (key in configs)
            configs: Authority name -> raw configuration
            fetcher: Graph retrieval (default: GraphFetcher())
            engine: Normalization engine (default: NormalizationEngine())
            languages: Process-wide default language holder

        Raises:
            InvalidAuthority: If the name is not configured
        """
        name = str(name).upper()
        if name not in configs:
            raise InvalidAuthority(f"Unable to initialize linked data authority '{name}'")
        self.name = name
        self.auth_config = AuthorityConfig(name, configs[name])
        self.fetcher = fetcher or GraphFetcher()
        self.engine = engine or NormalizationEngine()
        self.languages = languages or default_language

    @property
    def search_config(self):
        return self.auth_config.search

    @property
    def term_config(self):
        return self.auth_config.term

    def supports_search(self) -> bool:
        return self.search_config.supported

    def search_subauthorities(self) -> bool:
        return self.search_config.has_subauthorities()

    def search_subauthority(self, name: str) -> bool:
        return self.search_config.subauthority(name)

    def supports_term(self) -> bool:
        return self.term_config.supported

    def term_subauthorities(self) -> bool:
        return self.term_config.has_subauthorities()

    def term_subauthority(self, name: str) -> bool:
        return self.term_config.subauthority(name)

    def term_id_expects_id(self) -> bool:
        return self.term_config.term_id_expects_id

    def term_id_expects_uri(self) -> bool:
        return self.term_config.term_id_expects_uri

    def _request_context(self, language, authority_languages) -> RequestContext:
        # Snapshot the process default once; nothing downstream reads it again
        return RequestContext.build(language, authority_languages, self.languages.snapshot())

    def search(self, query: str, language=None, replacements: Optional[Dict[str, Any]] = None,
               subauth: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Search the authority.

        Args:
            query: The query string
            language: Language(s) used to select literals (overrides config)
            replacements: Template variable -> value for the search URL
            subauth: Sub-authority to query

        Returns:
            List of {uri, id, label[, context]} results
        """
        if not self.supports_search():
            raise InvalidAuthority(f"Search is not configured for linked data authority '{self.name}'")
        self.search_config.check_subauthority(subauth)
        context = self._request_context(language, self.search_config.language)
        field_map = self.search_config.field_map()

        url = self.search_config.url_with_replacements(query, subauth, replacements)
        logger.info(f"LOD search url: {url}")
        graph = self.fetcher.fetch(url)

        parse_start = time.time()
        results = self.engine.search(graph, field_map, context, authority=self.name)
        logger.info(f"Time to convert data to json: {time.time() - parse_start:.3f}s")
        return results

    def find(self, id: str, language=None, replacements: Optional[Dict[str, Any]] = None,
             subauth: Optional[str] = None) -> Dict[str, Any]:
        """
        Look up a single term.

        Args:
            id: Term id or URI, as the term configuration expects
            language: Language(s) used to select label and altlabel
            replacements: Template variable -> value for the term URL
            subauth: Sub-authority to query

        Returns:
            {uri, id, label, altlabel[, sameas], predicates}

        Raises:
            TermNotFound: If the authority has nothing for the id
        """
        if not self.supports_term():
            raise InvalidAuthority(f"Term fetch is not configured for linked data authority '{self.name}'")
        self.term_config.check_subauthority(subauth)
        context = self._request_context(language, self.term_config.language)
        field_map = self.term_config.field_map()

        url = self.term_config.url_with_replacements(id, subauth, replacements)
        logger.info(f"LOD term url: {url}")
        graph = self.fetcher.fetch(url)

        parse_start = time.time()
        subject = self.term_config.subject_uri(id, url)
        term_id = id if self.term_id_expects_id() else None
        term = self.engine.find(graph, subject, field_map, context, term_id=term_id, url=url,
                                authority=self.name)
        logger.info(f"Time to convert data to json: {time.time() - parse_start:.3f}s")
        return term


class AuthorityManager:
    """Builds linked-data authorities from configuration on first use"""

    def __init__(self, authority_configs: Dict[str, Dict[str, Any]], config: Optional[Dict[str, Any]] = None,
                 fetcher: Optional[GraphFetcher] = None, languages: Optional[DefaultLanguage] = None):
        """
        Args:
            authority_configs: Authority name -> raw configuration
            config: Service configuration from ConfigLoader.load_config
            fetcher: Shared graph fetcher (built from request_timeout by default)
            languages: Process-wide default language holder
        """
        self.authority_configs = {str(k).upper(): v for k, v in (authority_configs or {}).items()}
        self.config = config or {}
        self.fetcher = fetcher or GraphFetcher(timeout=self.config.get("request_timeout", 30))
        self.languages = languages or default_language
        self.engine = NormalizationEngine()
        self._authorities: Dict[str, LinkedDataAuthority] = {}

        logger.info(f"AuthorityManager initialized with {len(self.authority_configs)} authorities")

    def list_authorities(self) -> List[Dict[str, Any]]:
        """Configured authorities with their capabilities and load status."""
        result = []
        for name, config in self.authority_configs.items():
            result.append({
                "name": name,
                "search": bool(config.get("search")),
                "term": bool(config.get("term")),
                "initialized": self.is_initialized(name),
            })
        return result

    def get_authority(self, name: str) -> LinkedDataAuthority:
        """
        Get or lazily build the authority for a name.

        Raises:
            InvalidAuthority: If the name is not configured
        """
        key = str(name).upper()
        if key in self._authorities:
            return self._authorities[key]

        logger.info(f"Initializing linked data authority: {key}")
        authority = LinkedDataAuthority(key, self.authority_configs, fetcher=self.fetcher,
                                        engine=self.engine, languages=self.languages)
        self._authorities[key] = authority
        return authority

    def is_initialized(self, name: str) -> bool:
        return str(name).upper() in self._authorities


register("linked_data", LinkedDataAuthority)
