"""ld_authority: normalize linked-data authority graphs into search and term results."""
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent  # src/ld_authority → src → repo root

__version__ = "0.3.0"

from ld_authority.engine import NormalizationEngine  # noqa: E402
from ld_authority.errors import (  # noqa: E402
    InvalidAuthority,
    InvalidConfiguration,
    LinkedDataError,
    TermNotFound,
)
from ld_authority.field_map import FieldMap  # noqa: E402
from ld_authority.language import RequestContext  # noqa: E402
