"""
Language resolution for multi-lingual literals.

The effective languages for a call are resolved once, when the call
starts, and carried through the pipeline in a RequestContext. Nothing in
the pipeline reads the process-wide default after that point.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ld_authority.terms import Value, is_literal

logger = logging.getLogger(__name__)

LanguageSpec = Optional[Union[str, Sequence[str]]]


def normalize_languages(languages: LanguageSpec) -> Tuple[str, ...]:
    """
    Turn a language setting into a tuple of lower-cased tags.

    Accepts None, a single tag, a comma-separated string or a sequence.
    Blank entries and duplicates are dropped; order is kept.
    """
    if languages is None:
        return ()
    if isinstance(languages, str):
        languages = languages.split(",")
    normalized = []
    for lang in languages:
        if lang is None:
            continue
        lang = str(lang).strip().lower()
        if lang and lang not in normalized:
            normalized.append(lang)
    return tuple(normalized)


def resolve_languages(language: LanguageSpec = None, authority_languages: LanguageSpec = None,
                      default_languages: LanguageSpec = None) -> Tuple[str, ...]:
    """
    Pick the effective languages, highest precedence first:

    1. the language passed to the call
    2. the language(s) configured on the authority
    3. the process-wide default language(s)
    4. none: no filtering
    """
    for tier in (language, authority_languages, default_languages):
        resolved = normalize_languages(tier)
        if resolved:
            return resolved
    return ()


@dataclass(frozen=True)
class RequestContext:
    """Immutable per-call settings threaded through the pipeline."""
    languages: Tuple[str, ...] = ()

    @classmethod
    def build(cls, language: LanguageSpec = None, authority_languages: LanguageSpec = None,
              default_languages: LanguageSpec = None) -> "RequestContext":
        return cls(languages=resolve_languages(language, authority_languages, default_languages))

    @property
    def filters(self) -> bool:
        return bool(self.languages)


class LanguageResolver:
    """Filters literal lists down to the languages of a RequestContext."""

    def __init__(self, context: Optional[RequestContext] = None):
        self.context = context or RequestContext()

    def filter(self, values: Iterable[Value]) -> List[Value]:
        """
        Keep the values matching the resolved languages.

        Only literals carrying a language tag are subject to filtering;
        untagged literals, references and field errors always pass and keep
        their position. The slots held by matching tagged literals are
        refilled in configured language order, so with a single language
        the input order is kept as is. When no tagged literal matches any
        resolved language the list is returned unfiltered.
        """
        values = list(values)
        languages = self.context.languages
        if not languages:
            return values

        rank = {lang: i for i, lang in enumerate(languages)}
        matched = [v for v in values if _tag(v) in rank]
        if not matched:
            return values

        ordered = iter(sorted(matched, key=lambda v: rank[_tag(v)]))
        filtered = []
        for value in values:
            tag = _tag(value)
            if tag is None:
                filtered.append(value)
            elif tag in rank:
                filtered.append(next(ordered))
        return filtered


def _tag(value) -> Optional[str]:
    if is_literal(value) and value.language:
        return value.language.lower()
    return None
