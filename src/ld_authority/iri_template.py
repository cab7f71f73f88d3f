"""
URL construction from IRI templates in authority configuration.

The substitution is deliberately literal: every ``{?variable}`` token is
replaced by the variable's plain value. ``{variable}`` tokens are left
alone, placeholders without a mapping stay in the URL, and values are
only percent-encoded when their mapping asks for it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ld_authority.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


@dataclass
class TemplateMapping:
    """One variable of an IRI template."""
    variable: str
    required: bool = False
    default: Optional[str] = None
    encode: bool = False

    @classmethod
    def from_config(cls, mapping: Dict[str, Any]) -> "TemplateMapping":
        if not mapping.get("variable"):
            raise InvalidConfiguration("template mapping requires a variable")
        default = mapping.get("default")
        return cls(
            variable=mapping["variable"],
            required=bool(mapping.get("required", False)),
            default=None if default is None else str(default),
            encode=bool(mapping.get("encode", False)),
        )

    def simple_value(self, value: Optional[Any] = None) -> str:
        """The substitution value, else the default, else ''; encoded if configured."""
        if value is None or value == "":
            value = self.default
        if value is None:
            return ""
        value = str(value)
        return quote(value, safe="") if self.encode else value


@dataclass
class UrlConfig:
    """An IRI template and its variable mappings."""
    template: str
    mapping: List[TemplateMapping] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "UrlConfig":
        if not config or not config.get("template"):
            raise InvalidConfiguration("url template is required")
        return cls(
            template=config["template"],
            mapping=[TemplateMapping.from_config(m) for m in config.get("mapping", [])],
        )

    def variables(self) -> List[str]:
        return [m.variable for m in self.mapping]


def build_url(url_config: UrlConfig, substitutions: Optional[Dict[str, Any]] = None) -> str:
    """
    Construct a URL from an IRI template.

    Args:
        url_config: Template and variable mappings
        substitutions: Variable name -> value

    Returns:
        The template with each ``{?variable}`` replaced by its simple value
    """
    substitutions = substitutions or {}
    url = url_config.template
    for m in url_config.mapping:
        url = url.replace(f"{{?{m.variable}}}", m.simple_value(substitutions.get(m.variable)))
    return url
