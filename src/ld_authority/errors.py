"""
Exception types raised by the linked-data authority layer.

Configuration problems are fatal and raised before any data is touched.
Lookup and transport problems carry the URL that was requested so callers
can report it.
"""


class LinkedDataError(Exception):
    """Base class for all ld_authority errors"""


class InvalidConfiguration(LinkedDataError):
    """Raised when an authority or field map is missing required settings"""


class InvalidAuthority(InvalidConfiguration):
    """Raised when an unknown authority or sub-authority is requested"""


class PathSyntaxError(ValueError):
    """Raised when a predicate expression cannot be parsed"""


class _UrlError(LinkedDataError):
    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class TermNotFound(_UrlError):
    """Raised when a term lookup yields no graph data"""

    def __init__(self, url: str):
        super().__init__(f"{url} Not Found - Term may not exist at LOD Authority.", url)


class ServiceError(_UrlError):
    """Raised when the authority answers with an unexpected HTTP status"""


class ServiceUnavailable(_UrlError):
    """Raised when the authority cannot be reached"""
