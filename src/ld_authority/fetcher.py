"""
Retrieval of authority responses as rdflib graphs.

One blocking GET per call; retries are left to the caller.
"""

import logging
import time
from typing import Optional
from urllib.parse import urlparse

import requests
from rdflib import Graph

from ld_authority.errors import ServiceError, ServiceUnavailable, TermNotFound

logger = logging.getLogger(__name__)

ACCEPT_HEADER = ("application/rdf+xml, text/turtle;q=0.9, application/ld+json;q=0.8, "
                 "application/n-triples;q=0.7")

CONTENT_TYPE_FORMATS = {
    'application/rdf+xml': 'xml',
    'application/xml': 'xml',
    'text/xml': 'xml',
    'text/turtle': 'turtle',
    'application/x-turtle': 'turtle',
    'text/n3': 'n3',
    'application/n-triples': 'nt',
    'application/ld+json': 'json-ld',
    'application/json': 'json-ld',
}

SUFFIX_FORMATS = {
    '.ttl': 'turtle',
    '.nt': 'nt',
    '.n3': 'n3',
    '.rdf': 'xml',
    '.xml': 'xml',
    '.jsonld': 'json-ld',
    '.json': 'json-ld',
}

DEFAULT_FORMAT = 'xml'

# Dict-backed store: iteration follows insertion order, which result ordering relies on
ORDERED_STORE = 'SimpleMemory'


class MalformedLiteralFilter(logging.Filter):
    """Drops rdflib.term warnings about literals that fail datatype conversion."""

    def filter(self, record):
        return record.levelno >= logging.ERROR


# Authority data often carries malformed dates; rdflib still loads them as strings
logging.getLogger('rdflib.term').addFilter(MalformedLiteralFilter())


def detect_format(content_type: Optional[str], url: str) -> str:
    """Pick an rdflib parser from the Content-Type, falling back to the URL suffix."""
    if content_type:
        media_type = content_type.split(';')[0].strip().lower()
        if media_type in CONTENT_TYPE_FORMATS:
            return CONTENT_TYPE_FORMATS[media_type]
    path = urlparse(url).path.lower()
    for suffix, fmt in SUFFIX_FORMATS.items():
        if path.endswith(suffix):
            return fmt
    return DEFAULT_FORMAT


def new_graph() -> Graph:
    """An empty graph whose statements iterate in the order they were added."""
    return Graph(store=ORDERED_STORE)


def parse_graph(data, fmt: str = DEFAULT_FORMAT, public_id: Optional[str] = None) -> Graph:
    """Parse serialized RDF into an insertion-ordered graph."""
    graph = new_graph()
    graph.parse(data=data, format=fmt, publicID=public_id)
    return graph


class GraphFetcher:
    """Fetches a URL and parses the body into a graph."""

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None):
        """
        Args:
            timeout: Request timeout in seconds
            session: HTTP session to use (a new one by default)
        """
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, url: str) -> Graph:
        """
        GET a URL and parse the response into a Graph.

        Raises:
            TermNotFound: On HTTP 404
            ServiceError: On any other non-success status or an unparseable body
            ServiceUnavailable: When the authority cannot be reached
        """
        start = time.time()
        try:
            response = self._session.get(url, headers={'Accept': ACCEPT_HEADER}, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.warning(f"Timeout fetching {url}")
            raise ServiceUnavailable(f"Timeout fetching {url}", url)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed for {url}: {e}")
            raise ServiceUnavailable(f"Unable to reach {url}: {e}", url)

        if response.status_code == 404:
            raise TermNotFound(url)
        if response.status_code == 503:
            raise ServiceUnavailable(f"Service unavailable at {url}", url)
        if response.status_code != 200:
            raise ServiceError(f"Unexpected response status {response.status_code} from {url}", url)

        fmt = detect_format(response.headers.get('Content-Type'), url)
        graph = new_graph()
        if response.content:
            try:
                graph.parse(data=response.content, format=fmt, publicID=url)
            except Exception as e:
                raise ServiceError(f"Unable to parse {fmt} response from {url}: {e}", url) from e

        logger.info(f"Time to receive data from authority: {time.time() - start:.3f}s ({len(graph)} triples)")
        return graph
