"""
Ordering of search results by the configured sort field.
"""

import logging
import re
from functools import cmp_to_key
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SORT_KEY = "sort"

_INTEGER = re.compile(r"\A[-+]?\d+\Z")


def is_integer(value: str) -> bool:
    return bool(_INTEGER.match(value))


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


class ResultSorter:
    """
    Orders result dicts on a list-valued sort key.

    - a result without the key sorts after one that has it
    - two single integer values compare numerically
    - otherwise lists compare element-wise, case-insensitively; a list that
      runs out first is lower
    """

    def __init__(self, sort_key: str = SORT_KEY, strip: bool = True):
        self.sort_key = sort_key
        self.strip = strip

    def compare(self, a: Dict[str, Any], b: Dict[str, Any]) -> int:
        cmp = self._compare_missing(a, b)
        if cmp is not None:
            return cmp

        cmp = self._compare_numeric(a[self.sort_key], b[self.sort_key])
        if cmp is not None:
            return cmp

        a_values = [str(v).lower() for v in a[self.sort_key]]
        b_values = [str(v).lower() for v in b[self.sort_key]]
        for i in range(max(len(a_values), len(b_values))):
            if len(a_values) <= i:
                return -1
            if len(b_values) <= i:
                return 1
            cmp = _cmp(a_values[i], b_values[i])
            if cmp != 0:
                return cmp
        return 0

    def _compare_missing(self, a: Dict[str, Any], b: Dict[str, Any]) -> Optional[int]:
        a_has = bool(a.get(self.sort_key))
        b_has = bool(b.get(self.sort_key))
        if not a_has and not b_has:
            return 0
        if not a_has:
            return 1
        if not b_has:
            return -1
        return None

    @staticmethod
    def _compare_numeric(a_values: List, b_values: List) -> Optional[int]:
        if len(a_values) != 1 or len(b_values) != 1:
            return None
        a_value, b_value = str(a_values[0]), str(b_values[0])
        if not (is_integer(a_value) and is_integer(b_value)):
            return None
        return _cmp(int(a_value), int(b_value))

    def sort(self, results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Stable sort of results; the sort key is removed afterwards when strip is set."""
        ordered = sorted(results, key=cmp_to_key(self.compare))
        if self.strip:
            for result in ordered:
                result.pop(self.sort_key, None)
        logger.debug(f"Sorted {len(ordered)} results on '{self.sort_key}'")
        return ordered
