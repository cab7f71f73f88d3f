"""
Result consolidation: group extracted bindings into one record per subject.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ld_authority.extractor import CONTEXT_PREFIX
from ld_authority.field_map import FieldMap
from ld_authority.terms import Binding, ConsolidatedRecord, FieldError, to_text

logger = logging.getLogger(__name__)


class ResultConsolidator:
    """Groups bindings by subject into ConsolidatedRecords."""

    def __init__(self, field_map: FieldMap, include_context: bool = True, process_all: bool = False):
        """
        Args:
            field_map: The field map the bindings were extracted with
            include_context: Whether context bindings are carried into records
            process_all: Mark every record selected, ignoring the selector test
        """
        self.field_map = field_map
        self.include_context = include_context
        self.process_all = process_all

    def consolidate(self, bindings: Iterable[Binding], default_uri: Optional[str] = None) -> Dict[str, ConsolidatedRecord]:
        """
        Group bindings by subject.

        Every field of the map gets a list (empty when nothing was bound).
        Values keep binding order and are not deduplicated.

        Args:
            bindings: Output of StatementExtractor.extract
            default_uri: Key used for bindings whose subject renders empty

        Returns:
            Ordered mapping of subject URI -> record, including records that
            fail the selector test (their ``selected`` flag is False)
        """
        records = {}
        for binding in bindings:
            uri = str(binding.subject) or default_uri
            record = records.get(uri)
            if record is None:
                record = self._init_record(uri)
                records[uri] = record

            if binding.field.startswith(CONTEXT_PREFIX):
                if self.include_context:
                    record.context[binding.field[len(CONTEXT_PREFIX):]].append(binding.value)
                continue

            record.fields.setdefault(binding.field, []).append(binding.value)
            if binding.field == "id" and not record.id and not isinstance(binding.value, FieldError):
                record.id = to_text(binding.value)

        for record in records.values():
            record.selected = self.process_all or self._passes_selector(record)
        logger.debug(f"Consolidated {len(records)} subjects")
        return records

    def _init_record(self, uri: str) -> ConsolidatedRecord:
        record = ConsolidatedRecord(uri=uri)
        for name in self.field_map.result_fields():
            record.fields[name] = []
        if self.include_context:
            for name in self.field_map.context:
                record.context[name] = []
        return record

    def _passes_selector(self, record: ConsolidatedRecord) -> bool:
        if not self.field_map.selects_results:
            return True
        return len(record.values("selector")) > 0

    @staticmethod
    def selected(records: Dict[str, ConsolidatedRecord]) -> List[ConsolidatedRecord]:
        return [record for record in records.values() if record.selected]
