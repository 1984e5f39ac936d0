"""Boundary conversion from decoded JSON into FinancialRecord values.

The records file is an untrusted JSON array. Conversion is lenient: missing
fields become empty strings and non-object entries are dropped, so a single bad
entry never discards the whole collection. Numeric and date validation is left
to the aggregation layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from .dto import FinancialRecord


RECORD_FIELDS: Final[dict[str, str]] = {
    "comp_group_id": "compGroupId",
    "doc_date": "docDate",
    "gl_code": "glCode",
    "acc_comp_id": "accCompId",
    "amount": "amount",
}


def record_from_mapping(entry: Mapping[str, object]) -> FinancialRecord:
    """Build a FinancialRecord from one decoded JSON object.

    Args:
        entry: Mapping keyed by the source field names (e.g. "glCode").

    Returns:
        FinancialRecord with every value coerced to a stripped string.
    """

    values = {attr: _as_text(entry.get(source)) for attr, source in RECORD_FIELDS.items()}
    return FinancialRecord(**values)


def records_from_payload(payload: object) -> tuple[FinancialRecord, ...]:
    """Convert a decoded JSON document into records.

    Args:
        payload: Decoded JSON; expected to be a list of objects.

    Returns:
        Records in source order. A payload that is not a list yields an empty
        tuple; entries that are not objects are skipped.
    """

    if not isinstance(payload, list):
        return ()
    return tuple(record_from_mapping(entry) for entry in payload if isinstance(entry, Mapping))


def _as_text(value: object) -> str:
    """Coerce a JSON scalar into a string (None becomes "")."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()
